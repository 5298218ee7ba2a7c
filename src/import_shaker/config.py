"""
Runtime Configuration Store.

Holds the options of the tree shaking pass and loads them from the
``[tool.import_shaker]`` table of the nearest ``pyproject.toml``.

Example::

    [tool.import_shaker]
    debug = false
    include = ["*.py"]

    [[tool.import_shaker.rules]]
    module = "mylib"
    name = "ops"
    target = "{namespace}.{property_name}"
"""

import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from import_shaker.core.resolution import ResolutionPolicy
from import_shaker.policies import ResolutionRule, RulePolicy, load_policy

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

TOOL_SECTION = "import_shaker"


class ShakerConfig(BaseModel):
  """
  Configuration container for the tree shaking pass.
  """

  model_config = ConfigDict(arbitrary_types_allowed=True)

  debug: bool = Field(False, description="Print every rewrite and insertion. No effect on output.")
  resolve: Optional[Callable[..., Any]] = Field(None, exclude=True, description="Explicit policy callable.")
  policy: Optional[str] = Field(None, description="'module:attribute' reference to a policy callable.")
  rules: List[ResolutionRule] = Field(default_factory=list, description="Declarative policy rules.")
  include: List[str] = Field(default_factory=lambda: ["*.py"], description="File globs for directory runs.")
  base_dir: Optional[Path] = Field(None, description="Directory holding the configuration file.")

  @field_validator("policy")
  @classmethod
  def validate_policy(cls, v: Optional[str]) -> Optional[str]:
    """
    Checks the shape of a policy reference.

    Args:
        v (Optional[str]): The reference to validate.

    Returns:
        Optional[str]: The stripped reference.

    Raises:
        ValueError: If the reference is not of the form 'module:attribute'.
    """
    if v is None:
      return v
    v = v.strip()
    module_ref, sep, attr = v.partition(":")
    if not sep or not module_ref or not attr:
      raise ValueError(f"Invalid policy reference '{v}'. Expected 'module:attribute'.")
    return v

  def build_policy(self) -> ResolutionPolicy:
    """
    Returns the policy the pass should consult.

    Priority: explicit ``resolve`` callable, then ``policy`` reference, then ``rules``.

    Returns:
        ResolutionPolicy: A callable policy.

    Raises:
        ValueError: If no policy is configured.
    """
    if self.resolve is not None:
      return self.resolve
    if self.policy:
      return load_policy(self.policy, base_dir=self.base_dir)
    if self.rules:
      return RulePolicy(self.rules)
    raise ValueError(
      f"No resolution policy configured. Set 'policy' or 'rules' in [tool.{TOOL_SECTION}] or pass a resolve callable."
    )

  @classmethod
  def load(
    cls,
    debug: Optional[bool] = None,
    resolve: Optional[ResolutionPolicy] = None,
    policy: Optional[str] = None,
    include: Optional[List[str]] = None,
    search_path: Optional[Path] = None,
  ) -> "ShakerConfig":
    """
    Loads configuration from pyproject.toml and overrides with explicit arguments.

    Args:
        debug (Optional[bool]): Override for debug tracing.
        resolve (Optional[ResolutionPolicy]): Explicit policy callable.
        policy (Optional[str]): Override for the policy reference.
        include (Optional[List[str]]): Override for directory globs.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        ShakerConfig: The fully resolved configuration object.
    """
    start_dir = search_path or Path.cwd()
    toml_config, toml_dir = _load_toml_settings(start_dir)

    final_debug = debug if debug is not None else toml_config.get("debug", False)
    final_policy = policy or toml_config.get("policy")
    final_include = include or toml_config.get("include", ["*.py"])

    return cls(
      debug=final_debug,
      resolve=resolve,
      policy=final_policy,
      rules=toml_config.get("rules", []),
      include=final_include,
      base_dir=toml_dir,
    )


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches the directory and its parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory it was found in.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      with open(toml_path, "rb") as f:
        data = tomllib.load(f)
      return data.get("tool", {}).get(TOOL_SECTION, {}), parent

  return {}, None
