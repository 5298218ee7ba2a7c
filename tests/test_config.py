"""
Tests for Configuration Loading.

Verifies that:
1. `[tool.import_shaker]` is discovered in the nearest pyproject.toml.
2. Explicit arguments override file settings.
3. `build_policy` picks the policy source by priority.
"""

import pytest
from pydantic import ValidationError

from import_shaker.config import ShakerConfig, tomllib
from import_shaker.policies import RulePolicy

PYPROJECT = """
[project]
name = "demo"

[tool.import_shaker]
debug = true
include = ["*.py", "*.pyi"]

[[tool.import_shaker.rules]]
module = "mylib"
name = "ops"
target = "{namespace}.{property_name}"
"""


@pytest.fixture
def project(tmp_path):
  (tmp_path / "pyproject.toml").write_text(PYPROJECT)
  nested = tmp_path / "src" / "pkg"
  nested.mkdir(parents=True)
  return tmp_path


def test_defaults_without_file(tmp_path):
  config = ShakerConfig.load(search_path=tmp_path)
  assert config.debug is False
  assert config.include == ["*.py"]
  assert config.rules == []
  assert config.base_dir is None


def test_load_from_parent_directory(project):
  config = ShakerConfig.load(search_path=project / "src" / "pkg")

  assert config.debug is True
  assert config.include == ["*.py", "*.pyi"]
  assert config.base_dir == project.resolve()
  assert config.rules[0].module == "mylib"


def test_arguments_override_file(project):
  config = ShakerConfig.load(debug=False, include=["*.txt"], search_path=project)
  assert config.debug is False
  assert config.include == ["*.txt"]


def test_rules_build_rule_policy(project):
  policy = ShakerConfig.load(search_path=project).build_policy()
  assert isinstance(policy, RulePolicy)
  assert len(policy.rules) == 1


def test_resolve_callable_takes_priority(project):
  def resolve(request):
    return None

  config = ShakerConfig.load(resolve=resolve, policy="os.path:join", search_path=project)
  assert config.build_policy() is resolve


def test_policy_reference_beats_rules(project):
  import os.path

  config = ShakerConfig.load(policy="os.path:join", search_path=project)
  assert config.build_policy() is os.path.join


def test_missing_policy_raises(tmp_path):
  with pytest.raises(ValueError, match="No resolution policy"):
    ShakerConfig.load(search_path=tmp_path).build_policy()


@pytest.mark.parametrize("reference", ["nocolon", ":attr", "module:"])
def test_malformed_policy_reference(reference):
  with pytest.raises(ValidationError):
    ShakerConfig(policy=reference)


def test_invalid_toml_propagates(tmp_path):
  (tmp_path / "pyproject.toml").write_text("[tool.import_shaker\n")
  with pytest.raises(tomllib.TOMLDecodeError):
    ShakerConfig.load(search_path=tmp_path)


def test_resolve_excluded_from_dump():
  config = ShakerConfig(resolve=lambda request: None)
  assert "resolve" not in config.model_dump()
