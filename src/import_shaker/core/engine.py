"""
Orchestration Engine for the Tree Shaking pass.

This module provides the `ShakeEngine`, the host that drives one compilation
unit at a time:

1.  **Parsing**: Python source code into a LibCST tree.
2.  **Shaking**: Running the `TreeShaker` under a `MetadataWrapper` so scope
    and expression-context metadata are available.
3.  **Emission**: Regenerating source code from the mutated tree.

A fault raised by the resolution policy aborts the pass. `transform` lets it
propagate; `run` discards the partially mutated tree and reports the failure.
"""

import traceback
from typing import List, Optional

import libcst as cst
from pydantic import BaseModel, Field

from import_shaker.config import ShakerConfig
from import_shaker.core.resolution import ResolutionPolicy
from import_shaker.core.shaker import TreeShaker, UnitReport


class ShakeResult(BaseModel):
  """
  Structured result of a single unit.
  """

  code: str = Field(default="", description="The transformed source code.")
  errors: List[str] = Field(default_factory=list, description="Error messages encountered.")
  success: bool = Field(default=True, description="True if the pass completed.")
  rewrites: int = Field(default=0, description="Number of member accesses replaced by aliases.")
  synthesized: List[str] = Field(default_factory=list, description="Source of each synthesized import.")
  removed: List[str] = Field(default_factory=list, description="Local names whose import specifier was pruned.")

  @property
  def has_errors(self) -> bool:
    """
    Returns True if any errors were recorded.

    Returns:
        bool: True if errors list is non-empty.
    """
    return len(self.errors) > 0

  @property
  def changed(self) -> bool:
    """True if the pass rewrote anything."""
    return self.rewrites > 0 or bool(self.synthesized) or bool(self.removed)


class ShakeEngine:
  """
  The driver for compilation units.

  Each call to `transform` or `run` processes exactly one unit with a fresh
  pass instance.
  """

  def __init__(self, config: Optional[ShakerConfig] = None, resolve: Optional[ResolutionPolicy] = None):
    """
    Initializes the Engine.

    Args:
        config: The runtime configuration. Loaded from pyproject.toml if None.
        resolve: Explicit policy, overriding whatever the configuration describes.
    """
    self.config = config or ShakerConfig.load(resolve=resolve)
    self.resolve = resolve or self.config.build_policy()
    self.last_report = UnitReport()

  def parse(self, code: str) -> cst.Module:
    """
    Parses source string into a LibCST Module.

    Args:
        code (str): Python source code.

    Returns:
        cst.Module: The parsed tree.

    Raises:
        libcst.ParserSyntaxError: If the input code is invalid Python.
    """
    return cst.parse_module(code)

  def to_source(self, tree: cst.Module) -> str:
    """
    Converts CST back to source string.

    Args:
        tree (cst.Module): The modified syntax tree.

    Returns:
        str: Generated Python code.
    """
    return tree.code

  def transform(self, tree: cst.Module, file_path: str = "") -> cst.Module:
    """
    Runs the tree shaking pass over one module.

    Args:
        tree: The parsed module.
        file_path: Path of the unit, passed to the policy.

    Returns:
        cst.Module: The rewritten module.

    Raises:
        Exception: Anything raised by the resolution policy, unchanged.
    """
    shaker = TreeShaker(self.resolve, file_path=file_path, debug=self.config.debug)
    wrapper = cst.MetadataWrapper(tree)
    result = wrapper.visit(shaker)
    self.last_report = shaker.report
    return result

  def run(self, code: str, file_path: str = "") -> ShakeResult:
    """
    Executes the pipeline on a source string.

    Args:
        code: Python source code.
        file_path: Path of the unit, passed to the policy.

    Returns:
        ShakeResult: The output code and what was done. On failure the code is
        the unmodified input.
    """
    try:
      tree = self.parse(code)
      new_tree = self.transform(tree, file_path=file_path)
    except Exception as e:
      if self.config.debug:
        traceback.print_exc()
      return ShakeResult(code=code, errors=[f"{type(e).__name__}: {e}"], success=False)

    report = self.last_report
    return ShakeResult(
      code=self.to_source(new_tree),
      rewrites=report.rewrites,
      synthesized=list(report.synthesized),
      removed=list(report.removed),
    )
