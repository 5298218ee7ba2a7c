"""
Tree Shaker Package.

This package provides the ``TreeShaker`` class, a LibCST transformer that:
1.  **Registers** top-level imports as bindings.
2.  **Resolves** ``Namespace.member`` accesses on them through a policy,
    replacing each with a synthesized direct import.
3.  **Prunes** import specifiers that no longer have any use.

It is composed of several mixins handling specific node types.
"""

from import_shaker.core.shaker.attributes_mixin import AttributeMixin
from import_shaker.core.shaker.base import BaseTreeShaker, UnitReport, UnitState
from import_shaker.core.shaker.cleanup_mixin import CleanupMixin
from import_shaker.core.shaker.imports_mixin import ImportMixin


class TreeShaker(AttributeMixin, ImportMixin, CleanupMixin, BaseTreeShaker):
  """
  Composite Transformer for namespace import tree shaking.

  Inherits functionality from:
  - :class:`AttributeMixin`: resolving member accesses.
  - :class:`ImportMixin`: registering import statements.
  - :class:`CleanupMixin`: inserting synthesized imports and pruning.
  - :class:`BaseTreeShaker`: State management and configuration.
  """


__all__ = ["TreeShaker", "UnitReport", "UnitState"]
