"""
Main Entry Point for the import-shaker CLI.

This module handles argument parsing and dispatches to the command handlers
defined in `import_shaker.cli.handlers`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from import_shaker import __version__
from import_shaker.cli.handlers import handle_shake


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="import-shaker: rewrite namespace imports into direct imports")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: SHAKE ---
  cmd_shake = subparsers.add_parser("shake", help="Rewrite a Python file or directory")
  cmd_shake.add_argument("path", type=Path, help="Input source file or directory")
  cmd_shake.add_argument("--out", type=Path, default=None, help="Output destination (file or dir)")
  cmd_shake.add_argument(
    "--check",
    action="store_true",
    help="Write nothing; exit with status 1 if any file would be rewritten",
  )
  cmd_shake.add_argument(
    "--debug",
    action="store_true",
    default=None,
    help="Trace every rewrite and inserted import (Overrides config)",
  )
  cmd_shake.add_argument(
    "--policy",
    default=None,
    help="Policy callable as 'module:attribute' or 'file.py:attribute' (Overrides config)",
  )

  args = parser.parse_args(argv)

  if args.command == "shake":
    return handle_shake(args.path, args.out, check=args.check, debug=args.debug, policy=args.policy)

  return 1


if __name__ == "__main__":
  sys.exit(main())
