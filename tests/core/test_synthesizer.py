"""
Tests for the Import Synthesizer.

Verifies that synthesized statements are registered as bindings and spliced
into the module body right after the import they originate from.
"""

import libcst as cst

from import_shaker.core.registry import BindingRegistry
from import_shaker.core.resolution import DefaultImport, NamedImport
from import_shaker.core.synthesizer import ImportSynthesizer
from import_shaker.core.utils import AliasGenerator
from import_shaker.enums import ImportType


def _setup(code):
  module = cst.parse_module(code)
  registry = BindingRegistry()
  for line in module.body:
    for small in getattr(line, "body", []):
      if isinstance(small, (cst.Import, cst.ImportFrom)):
        registry.register(small)
  return module, registry, ImportSynthesizer(registry, AliasGenerator({"ops", "os"}))


def test_synthesize_registers_binding():
  module, registry, synthesizer = _setup("from mylib import ops\n")
  (origin,) = list(registry)

  alias, binding = synthesizer.synthesize(origin, NamedImport(path="mylib.ops"), "add")

  assert alias.value == "_add"
  assert binding.synthesized
  assert binding.identifier is alias
  assert (binding.import_name, binding.import_path, binding.import_type) == ("add", "mylib.ops", ImportType.NAMED)
  assert registry.get(alias) is binding


def test_synthesize_default_binding():
  module, registry, synthesizer = _setup("import mylib\n")
  (origin,) = list(registry)

  _, binding = synthesizer.synthesize(origin, DefaultImport(path="mylib.ops"), "ops")

  assert binding.import_type is ImportType.DEFAULT
  assert binding.local_name == "_ops"


def test_splice_places_lines_after_origin():
  module, registry, synthesizer = _setup("import os\nfrom mylib import ops\nx = 1\n")
  origin = list(registry)[1]

  synthesizer.synthesize(origin, NamedImport(path="mylib.ops"), "add")
  synthesizer.synthesize(origin, NamedImport(path="mylib.ops"), "sub")
  result = module.with_changes(body=synthesizer.splice(module.body)).code

  assert result == (
    "import os\n"
    "from mylib import ops\n"
    "from mylib.ops import sub as _sub\n"
    "from mylib.ops import add as _add\n"
    "x = 1\n"
  )


def test_splice_follows_synthesized_origins():
  module, registry, synthesizer = _setup("from mylib import ops\nx = 1\n")
  (origin,) = list(registry)

  _, linalg = synthesizer.synthesize(origin, NamedImport(path="mylib.ops"), "linalg")
  synthesizer.synthesize(linalg, NamedImport(path="mylib.ops.linalg"), "norm")
  result = module.with_changes(body=synthesizer.splice(module.body)).code

  assert result == (
    "from mylib import ops\n"
    "from mylib.ops import linalg as _linalg\n"
    "from mylib.ops.linalg import norm as _norm\n"
    "x = 1\n"
  )
  assert len(synthesizer.lines) == 2


def test_splice_splits_line_after_origin():
  module, registry, synthesizer = _setup("import os; from mylib import ops; x = ops\n")
  origin = list(registry)[1]

  synthesizer.synthesize(origin, NamedImport(path="mylib.ops"), "add")
  result = module.with_changes(body=synthesizer.splice(module.body)).code

  assert result == "import os; from mylib import ops\nfrom mylib.ops import add as _add\nx = ops\n"


def test_splice_prune_hook_drops_statements():
  module, registry, synthesizer = _setup("# header\nfrom mylib import ops\nx = 1\n")
  (origin,) = list(registry)
  synthesizer.synthesize(origin, NamedImport(path="mylib.ops"), "add")

  def prune(small):
    return None if small is origin.declaration else small

  result = module.with_changes(body=synthesizer.splice(module.body, prune)).code

  assert result == "# header\nfrom mylib.ops import add as _add\nx = 1\n"
