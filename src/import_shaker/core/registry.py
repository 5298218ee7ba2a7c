"""
Import Binding Registry.

Records one :class:`ImportBinding` per distinct local name bound by an import
statement of the compilation unit. Bindings are keyed by the identity of their
declaring identifier node, never by name string, so that a local variable
shadowing an import in a nested scope cannot alias the import's binding.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, Set, Union

import libcst as cst

from import_shaker.core.utils import get_full_name, import_from_path
from import_shaker.enums import ImportType

logger = logging.getLogger(__name__)

ImportStatement = Union[cst.Import, cst.ImportFrom]

# Maps a reference Name to the identifier node that declares it, if any.
DeclarationResolver = Callable[[cst.Name], Optional[cst.CSTNode]]


@dataclass(eq=False)
class ImportBinding:
  """
  A single imported local name and its rewrite status.

  Every access site touching the same import shares this one record.
  """

  local_name: str
  import_name: str
  import_path: str
  import_type: ImportType
  declaration: ImportStatement
  """The import statement the name comes from."""

  specifier: cst.ImportAlias
  """The alias inside ``declaration`` that binds the name."""

  identifier: cst.Name
  """The declaring identifier node."""

  synthesized: bool = False
  consumed: bool = False
  skipped: bool = False
  references: List[cst.CSTNode] = field(default_factory=list)
  """Every load of the name found by scope analysis (source imports only)."""

  rewritten: Set[cst.CSTNode] = field(default_factory=set)
  """References replaced by the pass."""

  def skip(self, reason: str) -> None:
    """
    Marks the binding as not removable. The flag is never cleared.

    Args:
        reason: Human readable cause, for debug logging.
    """
    if not self.skipped:
      logger.debug("Keeping import '%s' from '%s': %s", self.local_name, self.import_path, reason)
    self.skipped = True

  @property
  def escaped_references(self) -> List[cst.CSTNode]:
    """References to the import that were left in the tree."""
    return [ref for ref in self.references if ref not in self.rewritten]


def _declaring_identifier(alias: cst.ImportAlias) -> Optional[cst.Name]:
  if alias.asname is not None:
    target = alias.asname.name
    return target if isinstance(target, cst.Name) else None
  # ``import a.b`` binds ``a`` while loading ``a.b``; not trackable.
  if isinstance(alias.name, cst.Name):
    return alias.name
  return None


class BindingRegistry:
  """
  Per-unit table of import bindings.

  Created empty when a compilation unit is entered and discarded when it is
  left; no state survives across units.
  """

  def __init__(self) -> None:
    self._bindings: Dict[cst.CSTNode, ImportBinding] = {}
    self._order: List[ImportBinding] = []

  def __iter__(self) -> Iterator[ImportBinding]:
    return iter(self._order)

  def __len__(self) -> int:
    return len(self._order)

  def register(self, declaration: ImportStatement, synthesized: bool = False) -> List[ImportBinding]:
    """
    Tracks every name bound by an import statement.

    Specifiers whose declaring identifier is already tracked are ignored.

    Args:
        declaration: The ``import`` or ``from ... import`` node.
        synthesized: True for statements created by the pass itself.

    Returns:
        List[ImportBinding]: The newly created bindings.
    """
    if isinstance(declaration.names, cst.ImportStar):
      return []

    created = []
    for alias in declaration.names:
      identifier = _declaring_identifier(alias)
      if identifier is None or identifier in self._bindings:
        continue

      local_name = identifier.value
      if isinstance(declaration, cst.ImportFrom):
        import_type = ImportType.NAMED
        import_name = get_full_name(alias.name)
        import_path = import_from_path(declaration)
      else:
        import_type = ImportType.DEFAULT if alias.asname is not None else ImportType.WILDCARD
        import_name = local_name
        import_path = get_full_name(alias.name)

      binding = ImportBinding(
        local_name=local_name,
        import_name=import_name,
        import_path=import_path,
        import_type=import_type,
        declaration=declaration,
        specifier=alias,
        identifier=identifier,
        synthesized=synthesized,
      )
      self._bindings[identifier] = binding
      self._order.append(binding)
      created.append(binding)
    return created

  def alias(self, reference: cst.Name, binding: ImportBinding) -> None:
    """
    Makes a node created by the pass resolve to ``binding`` by identity.

    Args:
        reference: A replacement Name inserted into the tree.
        binding: The binding it refers to.
    """
    self._bindings[reference] = binding

  def get(self, node: cst.CSTNode) -> Optional[ImportBinding]:
    """Identity lookup only."""
    return self._bindings.get(node)

  def lookup(self, reference: cst.Name, resolve: Optional[DeclarationResolver] = None) -> Optional[ImportBinding]:
    """
    Finds the binding a reference refers to.

    Identity match first (covers aliases created by the pass), then lexical
    scope resolution to the declaring identifier.

    Args:
        reference: The Name being read.
        resolve: Scope resolution primitive for nodes of the original tree.

    Returns:
        The binding, or None when the name is not import-bound.
    """
    binding = self._bindings.get(reference)
    if binding is not None or resolve is None:
      return binding

    declaring = resolve(reference)
    if declaring is None:
      return None
    return self._bindings.get(declaring)
