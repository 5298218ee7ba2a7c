"""
Console Output and Logging for import-shaker.

Everything the package prints goes through one swappable Rich console:

1.  **Log records** of the ``import_shaker`` logger hierarchy (the CLI status
    lines and the debug-level skip reasons of the pass) are rendered by a
    ``RichHandler`` attached to that console.
2.  **Debug traces** of the pass (``print_trace``) are printed to it directly.

Hosts and tests redirect both at once with ``set_console``.

Attributes:
    console (_ConsoleProxy): Stable module-level handle on the active console.
"""

import logging
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.theme import Theme

LOGGER_NAME = "import_shaker"

# Between INFO and WARNING, used for "file written" style messages.
SUCCESS_LEVEL_NUM = 25
logging.addLevelName(SUCCESS_LEVEL_NUM, "SUCCESS")

_THEME = Theme(
  {
    "logging.level.success": "green",
    "path": "bold blue",
    "trace.label": "blue",
    "trace.removed": "red",
    "trace.added": "green",
  }
)

_logger = logging.getLogger(LOGGER_NAME)


class _ConsoleProxy:
  """
  Forwards to a replaceable ``rich.console.Console``.

  Modules import ``console`` once; replacing the backend re-targets both
  direct prints and the log handler without touching those imports.
  """

  def __init__(self) -> None:
    self._backend: Console = Console(theme=_THEME)
    self._handler: Optional[RichHandler] = None
    self._attach_handler()

  @property
  def backend(self) -> Console:
    """The console currently written to."""
    return self._backend

  def set_backend(self, new_console: Console) -> None:
    """
    Routes all output to ``new_console``.

    Args:
        new_console: The console to use from now on.
    """
    self._backend = new_console
    self._attach_handler()

  def reset(self) -> None:
    """Goes back to a fresh standard output console."""
    self.set_backend(Console(theme=_THEME))

  def _attach_handler(self) -> None:
    if self._handler is not None:
      _logger.removeHandler(self._handler)

    handler = RichHandler(
      console=self._backend,
      show_time=False,
      show_path=False,
      markup=True,
      rich_tracebacks=True,
    )
    _logger.addHandler(handler)
    _logger.propagate = False
    if _logger.level == logging.NOTSET:
      _logger.setLevel(logging.INFO)
    self._handler = handler

  def print(self, *args: Any, **kwargs: Any) -> None:
    self._backend.print(*args, **kwargs)

  def __getattr__(self, name: str) -> Any:
    return getattr(self._backend, name)


console = _ConsoleProxy()


def set_console(new_console: Console) -> None:
  """
  Redirects prints and log records to ``new_console``.

  Args:
      new_console (Console): e.g. ``Console(file=io.StringIO())`` to capture output.
  """
  console.set_backend(new_console)


def reset_console() -> None:
  """Restores output to standard output."""
  console.reset()


def get_console() -> Console:
  """
  Returns:
      Console: The console currently written to.
  """
  return console.backend


def set_verbosity(debug: bool) -> None:
  """
  Shows or hides debug records, such as the reason an import was kept.

  Args:
      debug (bool): True for DEBUG level, False for INFO.
  """
  _logger.setLevel(logging.DEBUG if debug else logging.INFO)


def print_trace(label: str, content: str = "", style: str = "") -> None:
  """
  Prints one debug trace entry: a label line followed by a block of code.

  Args:
      label (str): Heading of the entry.
      content (str): Source text shown under the heading, printed literally.
      style (str): Optional theme style for the content (``trace.removed`` or ``trace.added``).
  """
  body = escape(content)
  if style:
    body = f"[{style}]{body}[/{style}]"
  console.print(f"[trace.label]{escape(label)}[/trace.label]\n{body}\n", highlight=False)


def log_info(msg: str) -> None:
  """
  Args:
      msg (str): Message, may contain Rich markup.
  """
  _logger.info(f"ℹ️  {msg}")


def log_success(msg: str) -> None:
  """
  Args:
      msg (str): Message, may contain Rich markup.
  """
  _logger.log(SUCCESS_LEVEL_NUM, f"✅ {msg}")


def log_warning(msg: str) -> None:
  """
  Args:
      msg (str): Message, may contain Rich markup.
  """
  _logger.warning(f"⚠️  {msg}")


def log_error(msg: str) -> None:
  """
  Args:
      msg (str): Message, may contain Rich markup.
  """
  _logger.error(f"❌ {msg}")
