"""mailnamer command line entrypoint."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from mailnamer.config import AppConfig, default_config, load_yaml_config, merge_typed_config
from mailnamer.errors import (
    ExitCode,
    MailNamerError,
    ValidationError,
    format_user_error,
)
from mailnamer.message import load_record
from mailnamer.output import copy_message, ensure_directory, resolve_collision
from mailnamer.sanitize import sanitize_filename
from mailnamer.templating import render_filename
from mailnamer.validation import SkippedMessage, report_missing

_VERSION = "0.1.0"

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ArchiveResult:
    """Outcome of one archive run."""

    saved: list[tuple[str, Path]] = field(default_factory=list)
    skipped: list[SkippedMessage] = field(default_factory=list)


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser for the archive command."""
    parser = argparse.ArgumentParser(prog="mailnamer")
    parser.add_argument("messages", nargs="+", help="Paths to .eml message files")
    parser.add_argument("--config", help="Path to YAML config file")
    parser.add_argument("--template", help="Filename template, for example '%%SentOn|yyyy-MM-dd%% %%Subject|60%%'")
    parser.add_argument("--output-dir", help="Archive directory")
    parser.add_argument("--extension", help="Extension for archived files (default: eml)")
    parser.add_argument("--verbose", action="store_true", help="Enable INFO logging")
    parser.add_argument("--debug", action="store_true", help="Enable DEBUG logging")
    parser.add_argument("--dry-run", action="store_true", help="Print planned paths without copying")
    parser.add_argument("--version", action="store_true", help="Print mailnamer version and exit")
    return parser


def _configure_logging(*, debug: bool, verbose: bool) -> None:
    """Configure global logging level based on CLI flags."""
    level = logging.WARNING
    if verbose:
        level = logging.INFO
    if debug:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", force=True)


def _emit_progress(*, event: str, detail: str) -> None:
    """Emit friendly human-readable progress events."""
    print(f"progress: {event} - {detail}")


def _emit_timing_if_enabled(*, args: argparse.Namespace, phase: str, elapsed_seconds: float) -> None:
    """Emit timing events in verbose/debug modes."""
    if args.verbose or args.debug:
        print(f"timing: {phase}={elapsed_seconds:.3f}s")


def _resolve_config(args: argparse.Namespace) -> AppConfig:
    """Layer defaults, the optional YAML file and CLI overrides."""
    yaml_config: dict[str, Any] = load_yaml_config(args.config) if args.config else {}
    cli_args = {
        "output": {
            "directory": args.output_dir,
            "filename_template": args.template,
            "extension": args.extension,
        }
    }
    return merge_typed_config(defaults=default_config(), yaml_config=yaml_config, cli_args=cli_args)


def _print_execution_summary(*, config: AppConfig, message_count: int, dry_run: bool) -> None:
    """Print a concise execution summary for dry-run and transparency."""
    print("mailnamer execution summary")
    print(f"  messages: {message_count}")
    print(f"  directory: {config.output.directory}")
    print(f"  template: {config.output.filename_template}")
    print(f"  extension: {config.output.extension}")
    if dry_run:
        print("  mode: dry-run")


def _prepare_directory(config: AppConfig, *, dry_run: bool) -> Path:
    """Create or check the archive directory."""
    directory = Path(config.output.directory)
    if dry_run:
        return directory
    if config.output.create_directories:
        return ensure_directory(directory)
    if not directory.is_dir():
        raise ValidationError(
            what=f"output directory not found: {directory}",
            why="output.create_directories is disabled",
            remediation="create the directory or set output.create_directories: true",
        )
    return directory


def plan_destination(
    record: Any,
    *,
    config: AppConfig,
    directory: Path,
    reserved: set[Path] | None = None,
) -> Path:
    """Render, sanitize and de-collide the archive path for one record."""
    name = render_filename(record, config.output.filename_template)
    name = sanitize_filename(name, replacement=config.sanitize.replacement, max_length=config.sanitize.max_length)
    return resolve_collision(directory / name, config.output.extension, reserved=reserved or ())


def archive_messages(*, messages: list[str], config: AppConfig, directory: Path, dry_run: bool = False) -> ArchiveResult:
    """Archive each message in order, collecting skips instead of stopping."""
    result = ArchiveResult()
    planned: set[Path] = set()
    template = config.output.filename_template

    for source in messages:
        try:
            record = load_record(source)
        except ValidationError as exc:
            logger.warning("Skipping %s: %s", source, exc.what)
            result.skipped.append(SkippedMessage(source=source, reason=exc.what))
            continue

        if not report_missing(record, template, source=source, skipped=result.skipped):
            continue

        try:
            destination = plan_destination(record, config=config, directory=directory, reserved=planned)
        except MailNamerError as exc:
            logger.warning("Skipping %s: %s", source, exc.what)
            result.skipped.append(SkippedMessage(source=source, reason=exc.what))
            continue

        if dry_run:
            planned.add(destination)
            _emit_progress(event="planned", detail=f"{source} -> {destination}")
        else:
            try:
                copy_message(source=source, destination=destination)
            except OSError as exc:
                logger.warning("Skipping %s: copy failed: %s", source, exc)
                result.skipped.append(SkippedMessage(source=source, reason=f"copy failed: {exc}"))
                continue
            _emit_progress(event="saved", detail=f"{source} -> {destination}")
        result.saved.append((source, destination))

    return result


def _report_skipped(skipped: list[SkippedMessage]) -> None:
    """List skipped messages on stderr."""
    if not skipped:
        return
    print(f"skipped {len(skipped)} message(s):", file=sys.stderr)
    for entry in skipped:
        print(f"  {entry.source}: {entry.reason}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    """Run CLI command and return process status code."""
    raw_argv = argv if argv is not None else sys.argv[1:]
    if "--version" in raw_argv:
        print(f"mailnamer {_VERSION}")
        return int(ExitCode.OK)

    parser = build_parser()
    args = parser.parse_args(raw_argv)
    _configure_logging(debug=args.debug, verbose=args.verbose)

    started = time.perf_counter()
    try:
        config = _resolve_config(args)
        _print_execution_summary(config=config, message_count=len(args.messages), dry_run=args.dry_run)
        directory = _prepare_directory(config, dry_run=args.dry_run)
        _emit_progress(event="loaded", detail="configuration validated")

        result = archive_messages(messages=args.messages, config=config, directory=directory, dry_run=args.dry_run)
        _report_skipped(result.skipped)
        verb = "planned" if args.dry_run else "saved"
        _emit_progress(event="done", detail=f"{len(result.saved)} {verb}, {len(result.skipped)} skipped")
        _emit_timing_if_enabled(args=args, phase="total", elapsed_seconds=time.perf_counter() - started)
        if result.skipped:
            return int(ExitCode.PROCESSING)
        return int(ExitCode.OK)
    except MailNamerError as exc:
        print(str(exc), file=sys.stderr)
        return int(exc.exit_code)
    except Exception as exc:  # pragma: no cover - defensive guard
        print(
            format_user_error(
                what="unexpected runtime failure.",
                why=str(exc),
                how_to_fix="inspect stack trace and re-run with validated inputs",
            ),
            file=sys.stderr,
        )
        return int(ExitCode.INTERNAL)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
