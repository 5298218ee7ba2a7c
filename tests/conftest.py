"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Console isolation so debug traces and log records can be captured.
- A reference resolution policy used across the pass tests.
"""

import io
import sys
from pathlib import Path

import pytest
from rich.console import Console

# Add src to path so we can import 'import_shaker' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from import_shaker import NamedImport  # noqa: E402
from import_shaker.utils.console import reset_console, set_console, set_verbosity  # noqa: E402


class RecordingPolicy:
  """
  Resolves ``mylib.ops`` members to ``mylib.ops.<member>`` and records every request.
  """

  def __init__(self):
    self.requests = []

  def __call__(self, request):
    self.requests.append(request)
    if request.import_path == "mylib" and request.import_name == "ops":
      return NamedImport(path=f"mylib.ops.{request.property_name}")
    return None


@pytest.fixture
def policy():
  return RecordingPolicy()


@pytest.fixture
def captured_console():
  """
  Routes console output and log records into a buffer for the duration of a test.
  """
  buffer = io.StringIO()
  set_console(Console(file=buffer, width=200, force_terminal=False, color_system=None))
  yield buffer
  set_verbosity(False)
  reset_console()
