"""
Tests for the ShakeEngine orchestration layer.

Verifies that:
1. `run` reports counts of rewrites, synthesized imports and removals.
2. Policy faults propagate from `transform` and are captured by `run`.
3. Parse errors leave the input untouched.
4. The module-level `shake` helper raises ValueError on failure.
"""

import pytest

from import_shaker import ShakeEngine, ShakerConfig, shake


def _engine(resolve, **kwargs):
  return ShakeEngine(ShakerConfig(resolve=resolve, **kwargs))


def test_run_reports_changes(policy):
  result = _engine(policy).run("from mylib import ops\na = ops.add\nb = ops.add\n", file_path="a.py")

  assert result.success
  assert not result.has_errors
  assert result.changed
  assert result.rewrites == 2
  assert result.synthesized == ["from mylib.ops.add import add as _add"]
  assert result.removed == ["ops"]


def test_run_unchanged_source(policy):
  code = "import os\nx = os.sep\n"
  result = _engine(policy).run(code)

  assert result.success
  assert result.code == code
  assert not result.changed


def test_transform_propagates_policy_fault():
  def broken(request):
    raise RuntimeError("policy exploded")

  engine = _engine(broken)
  tree = engine.parse("from mylib import ops\nx = ops.add\n")
  with pytest.raises(RuntimeError, match="policy exploded"):
    engine.transform(tree)


def test_run_captures_policy_fault():
  def broken(request):
    raise RuntimeError("policy exploded")

  code = "from mylib import ops\nx = ops.add\n"
  result = _engine(broken).run(code)

  assert not result.success
  assert result.code == code
  assert result.errors == ["RuntimeError: policy exploded"]


def test_run_captures_invalid_policy_result():
  result = _engine(lambda request: {"type": "named", "path": "not a path"}).run("import m\nm.x\n")
  assert not result.success
  assert result.errors[0].startswith("ValidationError")


def test_run_captures_syntax_error(policy):
  code = "def broken(:\n"
  result = _engine(policy).run(code)
  assert not result.success
  assert result.code == code
  assert result.has_errors


def test_explicit_resolve_overrides_config(policy):
  engine = ShakeEngine(ShakerConfig(rules=[{"module": "other"}]), resolve=policy)
  assert engine.resolve is policy


def test_engine_without_policy_raises():
  with pytest.raises(ValueError, match="No resolution policy"):
    ShakeEngine(ShakerConfig())


def test_engine_is_reusable_across_units(policy):
  engine = _engine(policy)
  first = engine.run("from mylib import ops\nx = ops.add\n")
  second = engine.run("from mylib import ops\nx = ops.sub\n")

  assert first.synthesized == ["from mylib.ops.add import add as _add"]
  assert second.synthesized == ["from mylib.ops.sub import sub as _sub"]


def test_shake_helper_raises_on_failure():
  def broken(request):
    raise KeyError("nope")

  with pytest.raises(ValueError, match="Tree shaking failed"):
    shake("from mylib import ops\nx = ops.add\n", broken)


def test_policy_only_receives_access_descriptors():
  received = []

  def policy(request):
    received.append(request)
    return None

  result = _engine(policy).run("from mylib import ops\nx = ops.add\n")

  assert result.success
  assert [(type(r).__name__, r.property_name) for r in received] == [("ResolveRequest", "add")]
