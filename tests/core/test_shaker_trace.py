"""
Tests for Debug Tracing.

Verifies that debug mode prints each resolution and rewrite to the active
console without changing the generated code.
"""

from import_shaker import shake


def test_debug_traces_rewrites(policy, captured_console):
  code = "from mylib import ops\nx = ops.add\n"
  result = shake(code, policy, file_path="pkg/mod.py", debug=True)
  output = captured_console.getvalue()

  assert "import-shaker: pkg/mod.py" in output
  assert "Request:" in output
  assert "'property_name': 'add'" in output
  assert "Resolved:" in output
  assert "Import after:" in output
  assert "from mylib.ops.add import add as _add" in output
  assert "Expression before:" in output
  assert "ops.add" in output
  assert "Expression after:" in output
  assert result == shake(code, policy)


def test_no_trace_without_debug(policy, captured_console):
  shake("from mylib import ops\nx = ops.add\n", policy)
  assert "Expression before:" not in captured_console.getvalue()


def test_dedupe_hit_traces_expression_only(policy, captured_console):
  shake("from mylib import ops\na = ops.add\nb = ops.add\n", policy, debug=True)
  output = captured_console.getvalue()
  assert output.count("Resolved:") == 1
  assert output.count("Expression after:") == 2
