"""
Import Synthesizer.

Builds the direct import statements that replace resolved namespace member
accesses, queues them for insertion right after the import they were derived
from, and registers them so they can serve as namespaces for chained accesses.
"""

from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

import libcst as cst

from import_shaker.core.registry import BindingRegistry, ImportBinding, ImportStatement
from import_shaker.core.resolution import DefaultImport, NamedImport
from import_shaker.core.utils import AliasGenerator, build_import_from, build_import_module
from import_shaker.enums import ResolutionKind


class ImportSynthesizer:
  """
  Creates and places synthesized imports for one compilation unit.
  """

  def __init__(self, registry: BindingRegistry, aliases: AliasGenerator):
    """
    Args:
        registry: The unit's binding registry; new imports are registered into it.
        aliases: Generator for collision-free alias names.
    """
    self._registry = registry
    self._aliases = aliases
    # Lines waiting to be placed after a given import statement, nearest first.
    self._followers: Dict[ImportStatement, List[cst.SimpleStatementLine]] = {}
    self.lines: List[cst.SimpleStatementLine] = []

  def synthesize(
    self,
    origin: ImportBinding,
    resolved: Union[NamedImport, DefaultImport],
    property_name: str,
  ) -> Tuple[cst.Name, ImportBinding]:
    """
    Creates the import for a resolved access.

    Args:
        origin: The binding whose member access was resolved.
        resolved: The policy's answer.
        property_name: The accessed member.

    Returns:
        Tuple[cst.Name, ImportBinding]: The alias identifier bound by the new
        statement and the binding registered for it.
    """
    alias = self._aliases.generate(property_name)
    if resolved.kind is ResolutionKind.NAMED:
      statement = build_import_from(resolved.path, resolved.import_name or property_name, alias)
    else:
      statement = build_import_module(resolved.path, alias)

    line = cst.SimpleStatementLine(body=[statement])
    self._followers.setdefault(origin.declaration, []).insert(0, line)
    self.lines.append(line)

    (binding,) = self._registry.register(statement, synthesized=True)
    return alias, binding

  def placed_after(self, statement: ImportStatement) -> List[cst.SimpleStatementLine]:
    """
    Pops the lines queued after ``statement``, each followed by its own followers.

    Args:
        statement: An import statement, original or synthesized.

    Returns:
        List[cst.SimpleStatementLine]: The lines, in insertion order.
    """
    placed: List[cst.SimpleStatementLine] = []
    for line in self._followers.pop(statement, []):
      placed.append(line)
      for small in line.body:
        placed.extend(self.placed_after(small))
    return placed

  def splice(
    self,
    body: Sequence[cst.BaseStatement],
    prune: Optional[Callable[[cst.BaseSmallStatement], Optional[cst.BaseSmallStatement]]] = None,
  ) -> List[cst.BaseStatement]:
    """
    Places every queued line immediately after its origin statement.

    A line holding more small statements after the origin is split there, so
    the rest of the line already sees the synthesized names.

    Args:
        body: Module body statements.
        prune: Optional rewrite applied to each small statement; returning None
            drops it. A line left empty hands its comments to the next statement.

    Returns:
        List[cst.BaseStatement]: The body with synthesized lines inserted.
    """
    spliced: List[cst.BaseStatement] = []
    carried: List[cst.EmptyLine] = []

    def emit(statement: cst.BaseStatement) -> None:
      nonlocal carried
      if carried:
        statement = statement.with_changes(leading_lines=[*carried, *statement.leading_lines])
        carried = []
      spliced.append(statement)

    for statement in body:
      if not isinstance(statement, cst.SimpleStatementLine):
        emit(statement)
        continue

      last = len(statement.body) - 1
      leading = statement.leading_lines
      kept: List[cst.BaseSmallStatement] = []
      changed = False
      for index, small in enumerate(statement.body):
        rewritten = prune(small) if prune is not None else small
        changed = changed or rewritten is not small
        if rewritten is not None:
          kept.append(rewritten)

        followers = self.placed_after(small)
        if not followers and index < last:
          continue

        if kept and not changed and len(kept) == len(statement.body):
          emit(statement)
        elif kept:
          if index < last or rewritten is None:
            kept[-1] = kept[-1].with_changes(semicolon=cst.MaybeSentinel.DEFAULT)
          segment = statement.with_changes(body=kept, leading_lines=leading)
          if index < last:
            segment = segment.with_changes(trailing_whitespace=cst.TrailingWhitespace())
          emit(segment)
        else:
          carried.extend(line for line in leading if line.comment is not None)

        for line in followers:
          emit(line)
        leading = []
        kept = []
    return spliced
