"""
import-shaker Package.

A LibCST pass that rewrites member accesses on namespace-style imports
(``Namespace.member``) into direct imports of the member, so that bundlers and
freezers can drop the parts of a namespace a module never uses.

Usage
-----

.. code-block:: python

    import import_shaker
    from import_shaker import NamedImport

    def resolve(request):
        if request.import_path == "mylib" and request.import_name == "ops":
            return NamedImport(path=f"mylib.ops.{request.property_name}")
        return None

    code = "from mylib import ops\\ny = ops.add(1, 2)\\n"
    print(import_shaker.shake(code, resolve))
    # from mylib.ops.add import add as _add
    # y = _add(1, 2)
"""

from typing import Optional

from import_shaker.config import ShakerConfig
from import_shaker.core.engine import ShakeEngine, ShakeResult
from import_shaker.core.resolution import DefaultImport, NamedImport, ResolutionPolicy, ResolveRequest
from import_shaker.core.shaker import TreeShaker
from import_shaker.enums import ImportType
from import_shaker.policies import ResolutionRule, RulePolicy

__version__ = "0.1.0"


def shake(code: str, resolve: ResolutionPolicy, file_path: str = "", debug: bool = False) -> str:
  """
  Tree-shakes namespace imports in a string of Python code.

  Args:
      code (str): The source code of one module.
      resolve: Policy called once per distinct namespace member access.
      file_path (str): Path of the module, handed to the policy.
      debug (bool): If True, prints each rewrite to the console.

  Returns:
      str: The rewritten source code.

  Raises:
      ValueError: If parsing fails or the policy raises.
  """
  engine = ShakeEngine(config=ShakerConfig(debug=debug, resolve=resolve))
  result = engine.run(code, file_path=file_path)
  if not result.success:
    error_msg = "\n".join(result.errors)
    raise ValueError(f"Tree shaking failed:\n{error_msg}")
  return result.code


__all__ = [
  "DefaultImport",
  "ImportType",
  "NamedImport",
  "ResolutionRule",
  "ResolveRequest",
  "RulePolicy",
  "ShakeEngine",
  "ShakeResult",
  "ShakerConfig",
  "TreeShaker",
  "shake",
  "__version__",
]
