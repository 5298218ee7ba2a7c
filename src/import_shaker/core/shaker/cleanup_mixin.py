"""
Cleanup Mixin.

Post-processes the Module at the end of the compilation unit:
1.  Splices synthesized imports in right after the imports they were derived from.
2.  Removes specifiers whose every use was rewritten, and statements or lines
    left empty by that.
"""

from typing import Dict, Optional, Set

import libcst as cst

from import_shaker.core.registry import ImportStatement
from import_shaker.core.utils import strip_trailing_comma


class CleanupMixin(cst.CSTTransformer):
  """
  Mixin for finalising the Module.
  """

  def leave_Module(self, original_node: cst.Module, updated_node: cst.Module) -> cst.Module:
    """
    Inserts synthesized imports and prunes redundant ones, then ends the unit.

    Args:
        original_node: Original module.
        updated_node: Module after children processing.

    Returns:
        The finished module.
    """
    state = self._state

    removals: Dict[ImportStatement, Set[cst.ImportAlias]] = {}
    for binding in state.registry:
      if binding.synthesized:
        continue
      if binding.consumed and not binding.skipped and binding.escaped_references:
        binding.skip("still referenced outside a rewritten member access")
      if binding.skipped or not binding.consumed:
        continue
      removals.setdefault(binding.declaration, set()).add(binding.specifier)
      self.report.removed.append(binding.local_name)

    def prune(small: cst.BaseSmallStatement) -> Optional[cst.BaseSmallStatement]:
      dropped = removals.get(small)
      if not dropped:
        return small
      names = [alias for alias in small.names if alias not in dropped]
      if not names:
        return None
      return small.with_changes(names=strip_trailing_comma(small, names))

    body = state.synthesizer.splice(updated_node.body, prune if removals else None)

    self._state = None
    return updated_node.with_changes(body=body)
