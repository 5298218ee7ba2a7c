"""
Declarative Resolution Policies.

Most projects describe their namespace layout with a handful of rules rather
than code. A :class:`RulePolicy` turns ``[[tool.import_shaker.rules]]`` tables
into a resolution policy; :func:`load_policy` imports a hand-written one.

Rule templates are ``str.format`` strings over the request fields
(``import_path``, ``import_name``, ``import_type``, ``local_name``,
``property_name``, ``file_path``) plus ``namespace``, the module path of the
accessed object.

Example::

    [[tool.import_shaker.rules]]
    module = "mylib"
    name = "ops"
    target = "{namespace}.{property_name}"
"""

import importlib
import importlib.util
import string
import sys
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import BaseModel, Field, field_validator

from import_shaker.core.resolution import DefaultImport, NamedImport, ResolutionPolicy, ResolveRequest
from import_shaker.enums import ImportType, ResolutionKind

TEMPLATE_FIELDS = frozenset(
  {"import_path", "import_name", "import_type", "local_name", "property_name", "file_path", "namespace"}
)


def _check_template(template: str) -> str:
  for _, field_name, _, _ in string.Formatter().parse(template):
    if field_name is not None and field_name not in TEMPLATE_FIELDS:
      raise ValueError(f"Unknown template field '{{{field_name}}}'. Available: {sorted(TEMPLATE_FIELDS)}")
  return template


class ResolutionRule(BaseModel):
  """
  One rule of a :class:`RulePolicy`.
  """

  module: str = Field(..., description="fnmatch pattern matched against the import path.")
  name: str = Field("*", description="fnmatch pattern matched against the imported name.")
  import_types: List[ImportType] = Field(
    default_factory=lambda: list(ImportType), description="Import shapes the rule applies to."
  )
  exclude: List[str] = Field(default_factory=list, description="Property name patterns that are never rewritten.")
  kind: ResolutionKind = Field(ResolutionKind.NAMED, description="Shape of the synthesized import.")
  target: str = Field("{namespace}", description="Template for the module to import from.")
  export: Optional[str] = Field(None, description="Template for the imported name (named kind only).")

  @field_validator("target", "export")
  @classmethod
  def validate_template(cls, v: Optional[str]) -> Optional[str]:
    """
    Ensures templates only reference known request fields.

    Args:
        v: The template string.

    Returns:
        The unchanged template.

    Raises:
        ValueError: If the template references an unknown field.
    """
    if v is None:
      return v
    return _check_template(v)

  def matches(self, request: ResolveRequest) -> bool:
    """True if the rule applies to the request."""
    return (
      request.import_type in self.import_types
      and fnmatchcase(request.import_path, self.module)
      and fnmatchcase(request.import_name, self.name)
    )

  def excludes(self, property_name: str) -> bool:
    """True if the property must not be rewritten."""
    return any(fnmatchcase(property_name, pattern) for pattern in self.exclude)

  def apply(self, request: ResolveRequest) -> Union[NamedImport, DefaultImport]:
    """
    Renders the rule's templates for a request.

    Args:
        request: The access being resolved.

    Returns:
        The resolution result.
    """
    context = request.as_dict()
    context["namespace"] = request.namespace
    path = self.target.format(**context)
    if self.kind is ResolutionKind.DEFAULT:
      return DefaultImport(path=path)
    import_name = self.export.format(**context) if self.export else None
    return NamedImport(path=path, import_name=import_name)


class RulePolicy:
  """
  Resolution policy driven by an ordered list of rules.

  The first matching rule decides; when none matches the access is declined.
  """

  def __init__(self, rules: Sequence[Union[ResolutionRule, Dict[str, Any]]]):
    """
    Args:
        rules: Rule models or raw mappings (e.g. parsed TOML tables).
    """
    self.rules: List[ResolutionRule] = [
      rule if isinstance(rule, ResolutionRule) else ResolutionRule.model_validate(rule) for rule in rules
    ]

  def __call__(self, request: ResolveRequest) -> Optional[Union[NamedImport, DefaultImport]]:
    for rule in self.rules:
      if not rule.matches(request):
        continue
      if rule.excludes(request.property_name):
        return None
      return rule.apply(request)
    return None

  def __repr__(self) -> str:
    return f"RulePolicy({len(self.rules)} rules)"


def load_policy(reference: str, base_dir: Optional[Path] = None) -> ResolutionPolicy:
  """
  Imports a policy callable from a ``"module:attribute"`` reference.

  The module part may also be a path to a ``.py`` file, resolved against
  ``base_dir``.

  Args:
      reference: e.g. ``"myproject.shaking:resolve"`` or ``"tools/policy.py:resolve"``.
      base_dir: Directory relative file paths are resolved against.

  Returns:
      The policy callable.

  Raises:
      ValueError: If the reference is malformed or does not name a callable.
  """
  module_ref, sep, attr = reference.partition(":")
  if not sep or not module_ref or not attr:
    raise ValueError(f"Invalid policy reference '{reference}'. Expected 'module:attribute'.")

  if module_ref.endswith(".py"):
    file_path = Path(module_ref)
    if not file_path.is_absolute() and base_dir is not None:
      file_path = base_dir / file_path
    if not file_path.is_file():
      raise ValueError(f"Policy file not found: {file_path}")
    unique_name = f"import_shaker_policy_{file_path.stem}_{file_path.stat().st_ino}"
    spec = importlib.util.spec_from_file_location(unique_name, file_path)
    if spec is None or spec.loader is None:
      raise ValueError(f"Cannot load policy file: {file_path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[unique_name] = module
    spec.loader.exec_module(module)
  else:
    module = importlib.import_module(module_ref)

  policy = module
  for part in attr.split("."):
    policy = getattr(policy, part, None)
    if policy is None:
      raise ValueError(f"Policy '{attr}' not found in '{module_ref}'.")

  if not callable(policy):
    raise ValueError(f"Policy '{reference}' is not callable.")
  return policy
