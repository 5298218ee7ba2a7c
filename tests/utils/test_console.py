"""
Tests for Console Injection and Logging Adapters.
"""

import io
import logging

import pytest
from rich.console import Console

from import_shaker.utils.console import (
  LOGGER_NAME,
  console,
  get_console,
  log_error,
  log_info,
  log_success,
  log_warning,
  print_trace,
  reset_console,
  set_console,
  set_verbosity,
)


@pytest.fixture
def buffer():
  stream = io.StringIO()
  set_console(Console(file=stream, width=120))
  yield stream
  set_verbosity(False)
  reset_console()


def test_set_console_redirects_print_and_logs(buffer):
  assert get_console().file is buffer
  console.print("hello")
  log_info("info line")
  log_success("done line")
  log_warning("careful line")
  log_error("broken line")

  output = buffer.getvalue()
  for text in ("hello", "info line", "done line", "careful line", "broken line"):
    assert text in output


def test_reset_restores_default_console():
  custom = Console(file=io.StringIO())
  set_console(custom)
  reset_console()
  assert get_console() is not custom


def test_handler_is_replaced_not_added():
  logger = logging.getLogger(LOGGER_NAME)
  before = len(logger.handlers)
  set_console(Console(file=io.StringIO()))
  reset_console()
  assert len(logger.handlers) == before


def test_debug_records_follow_verbosity(buffer):
  child = logging.getLogger(f"{LOGGER_NAME}.core.registry")
  child.debug("hidden reason")
  set_verbosity(True)
  child.debug("shown reason")

  output = buffer.getvalue()
  assert "hidden reason" not in output
  assert "shown reason" in output


def test_print_trace_is_literal(buffer):
  print_trace("Request:", "{'a': [1]} [bold]x[/bold]", "trace.added")
  output = buffer.getvalue()
  assert "Request:" in output
  assert "[bold]x[/bold]" in output
