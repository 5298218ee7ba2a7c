"""
Resolution Policy Data Model.

Defines the descriptor handed to a resolution policy for every distinct
namespace member access, and the validated result models a policy may return.

A policy is any callable ``resolve(request) -> ResolvedImport | None``. It may
return a model instance, a mapping with the same keys, or a falsy value to
decline the rewrite.
"""

import keyword
from dataclasses import asdict, dataclass
from typing import Annotated, Any, Callable, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from import_shaker.enums import ImportType, ResolutionKind


@dataclass(frozen=True)
class ResolveRequest:
  """
  Describes one member access (``Namespace.member``) presented to a policy.
  """

  file_path: str
  import_name: str
  import_path: str
  import_type: ImportType
  local_name: str
  property_name: str

  @property
  def namespace(self) -> str:
    """
    Module path of the accessed namespace object, assuming it is a module.

    ``from pkg import ops`` gives ``pkg.ops``; ``import pkg.ops as ops`` gives ``pkg.ops``.
    """
    if self.import_type is not ImportType.NAMED:
      return self.import_path
    if self.import_path.endswith("."):
      return f"{self.import_path}{self.import_name}"
    return f"{self.import_path}.{self.import_name}"

  def as_dict(self) -> Dict[str, str]:
    """Plain dictionary view, with the import type as its string value."""
    data = asdict(self)
    data["import_type"] = self.import_type.value
    return data


def _check_segments(segments: List[str], path: str) -> None:
  for segment in segments:
    if not segment.isidentifier() or keyword.iskeyword(segment):
      raise ValueError(f"Invalid module path: '{path}'")


def validate_module_path(path: str, require_module: bool = False) -> str:
  """
  Checks that a string is a dotted module path, optionally led by dots.

  Args:
      path: The path to validate (e.g. ``numpy.linalg`` or ``..utils``).
      require_module: If True, a purely relative path (``..``) is rejected.

  Returns:
      str: The unchanged path.

  Raises:
      ValueError: If the path cannot appear in an import statement.
  """
  module = path.lstrip(".")
  if not module:
    if not path or require_module:
      raise ValueError(f"Invalid module path: '{path}'")
    return path
  _check_segments(module.split("."), path)
  return path


class NamedImport(BaseModel):
  """
  Resolve the access to ``from <path> import <import_name> as <alias>``.

  When ``import_name`` is omitted the accessed property name is imported.
  """

  model_config = ConfigDict(frozen=True, populate_by_name=True)

  type: Literal["named"] = "named"
  path: str
  import_name: Optional[str] = Field(None, alias="importName")

  @field_validator("path")
  @classmethod
  def validate_path(cls, v: str) -> str:
    """Rejects paths that are not importable module paths."""
    return validate_module_path(v)

  @field_validator("import_name")
  @classmethod
  def validate_import_name(cls, v: Optional[str]) -> Optional[str]:
    """Rejects export names that are not identifiers."""
    if v is not None and (not v.isidentifier() or keyword.iskeyword(v)):
      raise ValueError(f"Invalid import name: '{v}'")
    return v

  @property
  def kind(self) -> ResolutionKind:
    """Selects the ``from <path> import <name>`` statement form."""
    return ResolutionKind.NAMED


class DefaultImport(BaseModel):
  """
  Resolve the access to the module at ``path`` itself (``import <path> as <alias>``).
  """

  model_config = ConfigDict(frozen=True)

  type: Literal["default"] = "default"
  path: str

  @field_validator("path")
  @classmethod
  def validate_path(cls, v: str) -> str:
    """Rejects paths that do not name a module."""
    return validate_module_path(v, require_module=True)

  @property
  def kind(self) -> ResolutionKind:
    """Selects the ``import <path> as <alias>`` statement form."""
    return ResolutionKind.DEFAULT


ResolvedImport = Annotated[Union[NamedImport, DefaultImport], Field(discriminator="type")]

ResolutionPolicy = Callable[[ResolveRequest], Any]

_RESOLVED_ADAPTER: TypeAdapter = TypeAdapter(ResolvedImport)


def coerce_resolution(value: Any) -> Optional[Union[NamedImport, DefaultImport]]:
  """
  Normalises a raw policy return value.

  Args:
      value: Whatever the policy returned.

  Returns:
      The validated result model, or None when the policy declined.

  Raises:
      pydantic.ValidationError: If a non-falsy value is not a valid result.
  """
  if not value:
    return None
  if isinstance(value, (NamedImport, DefaultImport)):
    return value
  return _RESOLVED_ADAPTER.validate_python(value)
