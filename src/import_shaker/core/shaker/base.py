"""
Base Tree Shaker Logic.

Defines the base class for the TreeShaker: configuration, the per-unit state
object, scope resolution through LibCST metadata, and debug tracing.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

import libcst as cst
from libcst.metadata import ExpressionContextProvider, ImportAssignment, ScopeProvider

from import_shaker.core.registry import BindingRegistry, ImportBinding
from import_shaker.core.resolution import ResolutionPolicy
from import_shaker.core.synthesizer import ImportSynthesizer
from import_shaker.core.utils import AliasGenerator, NameCollector
from import_shaker.utils.console import print_trace

# (import_name, property_name, import_path)
DedupeKey = Tuple[str, str, str]


class UnitState:
  """
  Mutable state of one compilation unit.

  Built fresh when a module is entered and dropped when it is left.
  """

  def __init__(self, module: cst.Module):
    """
    Args:
        module: The module about to be traversed.
    """
    collector = NameCollector()
    module.visit(collector)

    self.registry = BindingRegistry()
    self.synthesizer = ImportSynthesizer(self.registry, AliasGenerator(collector.names))
    self.dedupe: Dict[DedupeKey, cst.Name] = {}
    self.top_level: Set[cst.CSTNode] = {
      small for line in module.body if isinstance(line, cst.SimpleStatementLine) for small in line.body
    }


@dataclass
class UnitReport:
  """Summary of what the pass did to the last module."""

  rewrites: int = 0
  synthesized: List[str] = field(default_factory=list)
  removed: List[str] = field(default_factory=list)


class BaseTreeShaker(cst.CSTTransformer):
  """
  Base class for the tree shaking pass.

  Holds the resolution policy and the state of the module being transformed.
  Must be run through a :class:`libcst.metadata.MetadataWrapper`.
  """

  METADATA_DEPENDENCIES = (ScopeProvider, ExpressionContextProvider)

  def __init__(self, policy: ResolutionPolicy, file_path: str = "", debug: bool = False):
    """
    Initializes the pass.

    Args:
        policy: Policy deciding where each ``Namespace.member`` can be imported from.
        file_path: Path of the unit, passed through to the policy.
        debug: If True, prints every rewrite and insertion to the console.
    """
    super().__init__()
    self.policy = policy
    self.file_path = file_path
    self.debug = debug
    self.report = UnitReport()
    self._state: Optional[UnitState] = None

  def visit_Module(self, node: cst.Module) -> Optional[bool]:
    """Starts a compilation unit with empty registries."""
    self._state = UnitState(node)
    self.report = UnitReport()
    return True

  def _declaration_of(self, reference: cst.Name) -> Optional[cst.CSTNode]:
    """
    Resolves a reference through lexical scope to its declaring import identifier.

    Args:
        reference: A Name of the original tree.

    Returns:
        The ``as_name`` node of the single import assignment the reference
        reads, or None (not import-bound, or ambiguous).
    """
    scope = self.get_metadata(ScopeProvider, reference, None)
    if scope is None:
      return None

    referents = set()
    for access in scope.accesses[reference]:
      if access.node is reference:
        referents.update(access.referents)

    if len(referents) != 1:
      return None
    (assignment,) = referents
    if isinstance(assignment, ImportAssignment):
      return assignment.as_name
    return None

  def _find_binding(self, updated: cst.BaseExpression, original: cst.BaseExpression) -> Optional[ImportBinding]:
    """
    Looks up the import binding an operand refers to.

    Args:
        updated: The operand after child rewrites (may be an alias we inserted).
        original: The same operand in the original tree, which carries metadata.

    Returns:
        The binding, or None.
    """
    if self._state is None or not isinstance(updated, cst.Name):
      return None
    registry = self._state.registry
    binding = registry.lookup(updated)
    if binding is None and isinstance(original, cst.Name):
      binding = registry.lookup(original, self._declaration_of)
    return binding

  def _trace(self, label: str, content: str = "", style: str = "") -> None:
    if self.debug:
      print_trace(label, content, style)
