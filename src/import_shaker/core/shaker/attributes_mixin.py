"""
Member Access Resolution Mixin.

Rewrites ``Namespace.member`` attribute accesses on tracked imports into
references to synthesized direct imports.

LibCST leaves nodes bottom-up, so in ``Foo.bar.baz`` the inner ``Foo.bar`` has
already been replaced by its alias when the outer access is left; the outer
access is then resolved as an ordinary single-level access on that alias.
"""

import logging
from typing import Optional

import libcst as cst
from libcst.metadata import ExpressionContext, ExpressionContextProvider

from import_shaker.core.registry import ImportBinding
from import_shaker.core.resolution import ResolveRequest, coerce_resolution
from import_shaker.core.utils import node_source

logger = logging.getLogger(__name__)

# Builtins that read a member whose name is only known at runtime.
REFLECTION_BUILTINS = frozenset({"getattr", "setattr", "hasattr", "delattr"})


class AttributeMixin(cst.CSTTransformer):
  """
  Mixin for processing member accesses on imported names.
  """

  def leave_Attribute(self, original_node: cst.Attribute, updated_node: cst.Attribute) -> cst.BaseExpression:
    """
    Resolves ``Namespace.member`` through the policy.

    Args:
        original_node: The node before transformation.
        updated_node: The node after transformation of its children.

    Returns:
        The alias reference, or ``updated_node`` when the access is left alone.
    """
    state = self._state
    binding = self._find_binding(updated_node.value, original_node.value)
    if binding is None:
      return updated_node

    context = self.get_metadata(ExpressionContextProvider, original_node, ExpressionContext.LOAD)
    if context is not ExpressionContext.LOAD:
      binding.skip(f"'{binding.local_name}.{updated_node.attr.value}' is assigned or deleted")
      return updated_node

    property_name = updated_node.attr.value
    key = (binding.import_name, property_name, binding.import_path)
    alias = state.dedupe.get(key)
    if alias is None:
      alias = self._resolve_access(binding, property_name)
      if alias is None:
        return updated_node

    replacement = cst.Name(alias.value, lpar=updated_node.lpar, rpar=updated_node.rpar)
    state.registry.alias(replacement, state.registry.get(alias))
    binding.rewritten.add(original_node.value)
    self.report.rewrites += 1

    self._trace("Expression before:", node_source(updated_node), "trace.removed")
    self._trace("Expression after:", node_source(replacement), "trace.added")
    return replacement

  def leave_Subscript(self, original_node: cst.Subscript, updated_node: cst.Subscript) -> cst.BaseExpression:
    """
    Marks ``Namespace[...]`` as a dynamic use of the namespace.
    """
    binding = self._find_binding(updated_node.value, original_node.value)
    if binding is not None:
      binding.skip(f"'{binding.local_name}' is subscripted")
    return updated_node

  def leave_Call(self, original_node: cst.Call, updated_node: cst.Call) -> cst.BaseExpression:
    """
    Marks ``getattr(Namespace, ...)`` and friends as a dynamic use of the namespace.
    """
    func = updated_node.func
    if not (isinstance(func, cst.Name) and func.value in REFLECTION_BUILTINS and updated_node.args):
      return updated_node

    binding = self._find_binding(updated_node.args[0].value, original_node.args[0].value)
    if binding is not None:
      binding.skip(f"'{binding.local_name}' is passed to {func.value}()")
    return updated_node

  def _resolve_access(self, binding: ImportBinding, property_name: str) -> Optional[cst.Name]:
    """
    Asks the policy about a new ``(import_name, property_name, import_path)`` triple.

    On success the direct import is synthesized and registered, the dedupe
    entry recorded and the binding marked consumed.

    Args:
        binding: The namespace binding being accessed.
        property_name: The accessed member.

    Returns:
        The alias identifier, or None if the policy declined.
    """
    state = self._state
    request = ResolveRequest(
      file_path=self.file_path,
      import_name=binding.import_name,
      import_path=binding.import_path,
      import_type=binding.import_type,
      local_name=binding.local_name,
      property_name=property_name,
    )

    resolved = coerce_resolution(self.policy(request))
    if resolved is None:
      binding.skip(f"policy declined '{binding.local_name}.{property_name}'")
      return None

    self._trace(f"import-shaker: {self.file_path}")
    self._trace("Request:", repr(request.as_dict()))
    self._trace("Resolved:", repr(resolved.model_dump()))

    alias, _ = state.synthesizer.synthesize(binding, resolved, property_name)
    state.dedupe[(binding.import_name, property_name, binding.import_path)] = alias
    binding.consumed = True

    synthesized = node_source(state.synthesizer.lines[-1]).strip()
    self.report.synthesized.append(synthesized)
    logger.debug("Resolved %s.%s -> %s", binding.local_name, property_name, synthesized)

    self._trace("Import before:", node_source(binding.declaration), "trace.removed")
    self._trace("Import after:", synthesized, "trace.added")
    return alias
