"""
CST Utilities for the Tree Shaker.

Static helpers for reading import statements, building CST import nodes from
dotted path strings, and generating collision-free alias identifiers.
"""

import re
from typing import List, Optional, Sequence, Set, Tuple, Union

import libcst as cst

_TRAILING_DIGITS = re.compile(r"\d+$")


def get_full_name(node: Union[cst.Name, cst.Attribute]) -> str:
  """
  Recursively resolves a CST Name or Attribute chain to a dot-separated string.

  Args:
      node: The CST node representing the identifier.

  Returns:
      str: The dotted name (e.g. "numpy.linalg"), or an empty string if the node
      is not a Name/Attribute chain.
  """
  if isinstance(node, cst.Name):
    return node.value
  elif isinstance(node, cst.Attribute):
    return f"{get_full_name(node.value)}.{node.attr.value}"
  return ""


def create_dotted_name(name_str: str) -> Union[cst.Name, cst.Attribute]:
  """
  Creates a CST node structure for a dotted path string.

  Args:
      name_str (str): Dot-separated path (e.g. "numpy.linalg").

  Returns:
      Union[cst.Name, cst.Attribute]: The constructed node.
  """
  parts = name_str.split(".")
  node = cst.Name(parts[0])
  for part in parts[1:]:
    node = cst.Attribute(value=node, attr=cst.Name(part))
  return node


def import_from_path(node: cst.ImportFrom) -> str:
  """
  Returns the module specifier of a ``from ... import`` statement as written.

  Relative imports keep their leading dots (``from ..pkg import x`` -> ``..pkg``).
  """
  dots = "".join("." for _ in node.relative)
  if node.module is None:
    return dots
  return dots + get_full_name(node.module)


def split_module_path(path: str) -> Tuple[int, Optional[str]]:
  """
  Splits a module path into its relative level and dotted module part.

  Args:
      path: e.g. ``..pkg.mod``.

  Returns:
      Tuple[int, Optional[str]]: ``(2, "pkg.mod")``; the module is None for ``..``.
  """
  module = path.lstrip(".")
  return len(path) - len(module), module or None


def build_import_from(path: str, name: str, alias: cst.Name) -> cst.ImportFrom:
  """
  Builds ``from <path> import <name> as <alias>``.

  Args:
      path: Module path, possibly relative.
      name: The exported name to import.
      alias: The identifier node the import binds.

  Returns:
      cst.ImportFrom: The statement node.
  """
  level, module = split_module_path(path)
  return cst.ImportFrom(
    module=create_dotted_name(module) if module else None,
    names=[cst.ImportAlias(name=cst.Name(name), asname=cst.AsName(name=alias))],
    relative=[cst.Dot() for _ in range(level)],
  )


def build_import_module(path: str, alias: cst.Name) -> Union[cst.Import, cst.ImportFrom]:
  """
  Builds a statement binding the module at ``path`` to ``alias``.

  Python has no relative ``import ... as``, so ``.pkg.mod`` becomes
  ``from .pkg import mod as alias``.

  Args:
      path: Module path, possibly relative.
      alias: The identifier node the import binds.

  Returns:
      The statement node.
  """
  level, module = split_module_path(path)
  if level == 0:
    return cst.Import(names=[cst.ImportAlias(name=create_dotted_name(path), asname=cst.AsName(name=alias))])

  parent, _, last = module.rpartition(".")
  return build_import_from("." * level + parent, last, alias)


def strip_trailing_comma(
  node: Union[cst.Import, cst.ImportFrom], names: Sequence[cst.ImportAlias]
) -> List[cst.ImportAlias]:
  """
  Drops the comma after the last alias unless the statement is parenthesized.
  """
  names = list(names)
  if names and not (isinstance(node, cst.ImportFrom) and node.lpar):
    names[-1] = names[-1].with_changes(comma=cst.MaybeSentinel.DEFAULT)
  return names


class NameCollector(cst.CSTVisitor):
  """
  Collects every identifier spelled anywhere in a tree.

  Generated aliases must not collide with any of them, in any scope.
  """

  def __init__(self) -> None:
    self.names: Set[str] = set()

  def visit_Name(self, node: cst.Name) -> None:
    self.names.add(node.value)


class AliasGenerator:
  """
  Produces unique module-level identifiers for synthesized imports.

  Follows the familiar generated-uid scheme: ``bar`` -> ``_bar``, ``_bar2``, ...
  """

  def __init__(self, taken: Set[str]):
    """
    Args:
        taken: Identifiers already used by the compilation unit.
    """
    self._taken = set(taken)

  def generate(self, hint: str) -> cst.Name:
    """
    Creates a fresh alias identifier derived from ``hint``.

    Args:
        hint: Usually the accessed property name.

    Returns:
        cst.Name: A new node, never returned before by this generator.
    """
    base = _TRAILING_DIGITS.sub("", hint.lstrip("_")) or "ref"
    index = 1
    while True:
      candidate = f"_{base}" if index == 1 else f"_{base}{index}"
      if candidate not in self._taken:
        self._taken.add(candidate)
        return cst.Name(candidate)
      index += 1


_RENDER_CTX = cst.Module(body=[])


def node_source(node: cst.CSTNode) -> str:
  """
  Renders a detached node as source text, for traces and reports.

  Args:
      node: Any node, e.g. a synthesized statement line or an expression.

  Returns:
      str: The code of the node alone.
  """
  return _RENDER_CTX.code_for_node(node)
