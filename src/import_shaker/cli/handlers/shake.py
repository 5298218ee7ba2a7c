"""
Shake Command Handler.

This module implements the logic for the `import-shaker shake` command.
It orchestrates:
1. Configuration loading (pyproject.toml plus CLI overrides).
2. Policy construction.
3. The tree shaking pass over a file or a directory tree.
4. Output writing, or change detection in ``--check`` mode.
"""

from pathlib import Path
from typing import Dict, List, Optional

from rich.markup import escape
from rich.table import Table

from import_shaker.config import ShakerConfig
from import_shaker.core.engine import ShakeEngine, ShakeResult
from import_shaker.utils.console import console, log_error, log_info, log_success, log_warning, set_verbosity


def handle_shake(
  input_path: Path,
  output_path: Optional[Path],
  check: bool = False,
  debug: Optional[bool] = None,
  policy: Optional[str] = None,
) -> int:
  """
  Handles the 'shake' command execution.

  Args:
      input_path: Path to the source file or directory.
      output_path: Where rewritten code is written (file or directory).
      check: If True, write nothing and fail when a file would change.
      debug: Override for debug tracing.
      policy: Override for the policy reference ('module:attribute').

  Returns:
      int: Exit code (0 for success, 1 for failure or pending changes in check mode).
  """
  if not input_path.exists():
    log_error(f"Input not found: {input_path}")
    return 1

  try:
    config = ShakerConfig.load(
      debug=debug,
      policy=policy,
      search_path=input_path if input_path.is_dir() else input_path.parent,
    )
    engine = ShakeEngine(config)
    set_verbosity(config.debug)
  except Exception as e:
    log_error(f"Invalid configuration: {escape(str(e))}")
    return 1

  batch_results: Dict[str, ShakeResult] = {}

  if input_path.is_file():
    result = _shake_single_file(engine, input_path, output_path, check)
    batch_results[input_path.name] = result

  elif input_path.is_dir():
    if not output_path and not check:
      log_error("Directory processing requires --out destination directory (or --check).")
      return 1

    files = _collect_files(input_path, config.include)
    if not files:
      log_warning(f"No files matching {config.include} found in {input_path}")
      return 0

    log_info(f"Processing {len(files)} files from {input_path}...")
    for src_file in files:
      rel_path = src_file.relative_to(input_path)
      dest_file = output_path / rel_path if output_path else None
      batch_results[str(rel_path)] = _shake_single_file(engine, src_file, dest_file, check)

    _print_batch_summary(batch_results)

  failed = any(not r.success for r in batch_results.values())
  pending = check and any(r.changed for r in batch_results.values())
  return 1 if failed or pending else 0


def _collect_files(directory: Path, patterns: List[str]) -> List[Path]:
  """Returns the files under ``directory`` matching any glob, sorted and unique."""
  found = {path for pattern in patterns for path in directory.rglob(pattern) if path.is_file()}
  return sorted(found)


def _shake_single_file(
  engine: ShakeEngine,
  input_path: Path,
  output_path: Optional[Path],
  check: bool = False,
) -> ShakeResult:
  """
  Helper to run the pass on a single file.

  Args:
      engine: The configured engine.
      input_path: Source file path.
      output_path: Destination file path; stdout if None.
      check: If True, only report whether the file would change.

  Returns:
      ShakeResult: Result object containing status and code.
  """
  try:
    code = input_path.read_text(encoding="utf-8")
  except OSError as e:
    log_error(f"Failed to read {input_path}: {escape(str(e))}")
    return ShakeResult(success=False, errors=[str(e)])

  result = engine.run(code, file_path=str(input_path))
  if not result.success:
    log_error(f"Failed to shake [path]{input_path}[/path]: {escape('; '.join(result.errors))}")
    return result

  if check:
    if result.changed:
      log_warning(f"Would rewrite [path]{input_path}[/path] ({result.rewrites} accesses)")
    return result

  if output_path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(result.code, encoding="utf-8")
    log_success(f"Shaken: [path]{input_path}[/path] -> [path]{output_path}[/path]")
  else:
    print(result.code, end="")

  return result


def _print_batch_summary(results: Dict[str, ShakeResult]) -> None:
  """
  Renders a summary table of results to the console.

  Args:
      results: Dictionary mapping filenames to results.
  """
  total = len(results)
  failures = sum(1 for r in results.values() if not r.success)
  changed = sum(1 for r in results.values() if r.success and r.changed)

  if failures == 0:
    log_success(f"Batch Complete: {total} files processed, {changed} rewritten.")
    return

  table = Table(title="Tree Shaking Report")
  table.add_column("File", style="cyan")
  table.add_column("Status", justify="center")
  table.add_column("Issues", style="red")

  for filename, res in results.items():
    if res.success:
      continue
    issues = "; ".join(res.errors) if res.errors else "Unknown Error"
    table.add_row(escape(filename), "❌ Failed", escape(issues))

  console.print(table)
  console.print(f"\n[bold]Summary:[/bold] {total - failures} Passed, {failures} Failed.")
