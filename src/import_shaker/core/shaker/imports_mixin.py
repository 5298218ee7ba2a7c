"""
Import Registration Mixin.

Registers top-level ``import`` and ``from ... import`` statements as they are
encountered, and records the scope-resolved references of every imported name.
"""

from typing import Optional, Union

import libcst as cst
from libcst.metadata import ImportAssignment, ScopeProvider

from import_shaker.core.registry import ImportBinding


class ImportMixin(cst.CSTTransformer):
  """
  Mixin for processing Import statements.
  """

  def visit_Import(self, node: cst.Import) -> Optional[bool]:
    """Registers ``import m [as y]``. Import names are never rewritten."""
    self._register_declaration(node)
    return False

  def visit_ImportFrom(self, node: cst.ImportFrom) -> Optional[bool]:
    """Registers ``from m import x [as y]``. Import names are never rewritten."""
    self._register_declaration(node)
    return False

  def _register_declaration(self, node: Union[cst.Import, cst.ImportFrom]) -> None:
    state = self._state
    if state is None or node not in state.top_level:
      return

    for binding in state.registry.register(node):
      assignment = self._import_assignment(node, binding)
      if assignment is not None:
        binding.references = [access.node for access in assignment.references]

  def _import_assignment(
    self, node: Union[cst.Import, cst.ImportFrom], binding: ImportBinding
  ) -> Optional[ImportAssignment]:
    """
    Finds the scope assignment created by ``binding``'s specifier.

    Args:
        node: The import statement.
        binding: A binding registered from it.

    Returns:
        The matching ImportAssignment, or None if scope analysis has none.
    """
    scope = self.get_metadata(ScopeProvider, node, None)
    if scope is None:
      return None
    for assignment in scope.assignments[binding.local_name]:
      if isinstance(assignment, ImportAssignment) and assignment.as_name is binding.identifier:
        return assignment
    return None
