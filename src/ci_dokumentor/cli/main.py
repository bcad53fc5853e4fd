"""Command line entry point for ci-dokumentor."""

from __future__ import annotations

import argparse
import json
import sys
import time
from collections import deque
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from ci_dokumentor import __version__
from ci_dokumentor.adapters.repository import GitHubRepositoryProvider, GitRepositoryProvider
from ci_dokumentor.app.generate import GenerationResult, GeneratorService
from ci_dokumentor.app.migration import MigrationResult, MigrationService
from ci_dokumentor.domain.docs.errors import DokumentorError
from ci_dokumentor.domain.docs.sections import DEFAULT_ORDER, parse_section_list
from ci_dokumentor.settings import SETTINGS
from ci_dokumentor.utils.config import load_config
from ci_dokumentor.utils.telemetry import RunRecord, record_run
from ci_dokumentor.utils.telemetry import clear as telemetry_clear
from ci_dokumentor.utils.telemetry import iter_runs as telemetry_iter
from ci_dokumentor.utils.telemetry import summarize as telemetry_summarize

HELP_OVERVIEW = """\
Generate and maintain README documentation for CI/CD manifests.

Generated sections live between <!-- <section>:start --> and <!-- <section>:end -->
markers; everything outside them is left as written.
"""

DEFAULT_SOURCE = Path("action.yml")


def _build_services(*, github_api: bool = False) -> Tuple[GeneratorService, MigrationService]:
    repository_provider = GitHubRepositoryProvider() if github_api else GitRepositoryProvider()
    return GeneratorService(repository_provider=repository_provider), MigrationService()


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 3)


def _print_error(exc: DokumentorError, *, as_json: bool) -> None:
    if as_json:
        print(json.dumps({"status": "error", "error": exc.to_dict()}, ensure_ascii=False, indent=2))
        return
    print(f"{exc.code}: {exc.message}", file=sys.stderr)
    if exc.remediation:
        print(f"  remediation: {exc.remediation}", file=sys.stderr)


def _print_diff(diff: Optional[str], destination: Path) -> None:
    if diff:
        print(diff, end="" if diff.endswith("\n") else "\n")
    else:
        print(f"{destination.as_posix()}: no changes")


def _log_failure(command: str, destination: Path, exc: DokumentorError, started: float, details: Dict[str, Any]) -> None:
    record_run(
        SETTINGS,
        RunRecord(
            command=command,
            outcome="failed",
            destination=destination.as_posix(),
            duration_ms=_elapsed_ms(started),
            details=details,
            error_code=exc.code,
        ),
    )


# ----------------------------------------------------------------------
# generate
# ----------------------------------------------------------------------


def _generate_cmd(args: argparse.Namespace) -> int:
    generator, _ = _build_services(github_api=getattr(args, "github_api", False))
    as_json = getattr(args, "json", False)
    source = Path(args.source)
    started = time.perf_counter()
    try:
        include = tuple(parse_section_list(args.include_sections))
        exclude = tuple(parse_section_list(args.exclude_sections))
        config_path = Path(args.config) if args.config else None
        config, _ = load_config(Path.cwd(), config_path)
        options: Dict[str, Dict[str, Any]] = {}
        if args.version_ref:
            options["usage"] = {"version": args.version_ref}
            options["examples"] = {"version": args.version_ref}
        config = config.with_overrides(
            cicd=args.cicd,
            output=Path(args.output) if args.output else None,
            include=include,
            exclude=exclude,
            options=options,
        )
        result = generator.generate(source, config=config, dry_run=args.dry_run)
    except DokumentorError as exc:
        _log_failure("generate", Path(args.output) if args.output else source, exc, started, {"source": source.as_posix()})
        _print_error(exc, as_json=as_json)
        return 1

    record_run(
        SETTINGS,
        RunRecord(
            command="generate",
            outcome="previewed" if result.dry_run else "written",
            destination=result.destination.as_posix(),
            duration_ms=_elapsed_ms(started),
            sections=len(result.sections),
            details={"source": source.as_posix(), "platform": result.platform},
        ),
    )
    _emit_generation_result(result, as_json=as_json)
    return 0


def _emit_generation_result(result: GenerationResult, *, as_json: bool) -> None:
    if as_json:
        print(json.dumps({"status": "ok", "result": result.as_dict()}, ensure_ascii=False, indent=2))
        return
    if result.dry_run:
        _print_diff(result.diff, result.destination)
        return
    print(f"Documentation generated: {result.destination.as_posix()}")
    print(f"  sections: {', '.join(identifier.value for identifier in result.sections) or '-'}")


# ----------------------------------------------------------------------
# migrate
# ----------------------------------------------------------------------


def _migrate_cmd(args: argparse.Namespace) -> int:
    _, migration = _build_services()
    as_json = getattr(args, "json", False)
    destination = Path(args.destination)
    started = time.perf_counter()
    try:
        result = migration.migrate(destination, tool=args.tool, dry_run=args.dry_run)
    except DokumentorError as exc:
        _log_failure("migrate", destination, exc, started, {"tool": args.tool} if args.tool else {})
        _print_error(exc, as_json=as_json)
        return 1

    record_run(
        SETTINGS,
        RunRecord(
            command="migrate",
            outcome="previewed" if result.dry_run else "written",
            destination=result.destination.as_posix(),
            duration_ms=_elapsed_ms(started),
            details={"tool": result.tool},
        ),
    )
    _emit_migration_result(result, as_json=as_json)
    return 0


def _emit_migration_result(result: MigrationResult, *, as_json: bool) -> None:
    if as_json:
        print(json.dumps({"status": "ok", "result": result.as_dict()}, ensure_ascii=False, indent=2))
        return
    if result.dry_run:
        _print_diff(result.diff, result.destination)
        return
    print(f"Documentation migrated from {result.tool}: {result.destination.as_posix()}")


# ----------------------------------------------------------------------
# sections / telemetry
# ----------------------------------------------------------------------


def _sections_cmd(args: argparse.Namespace) -> int:
    generator, migration = _build_services()
    payload = {
        "sections": [identifier.value for identifier in DEFAULT_ORDER],
        "platforms": generator.get_supported_platforms(),
        "migrationTools": migration.get_supported_tools(),
    }
    if getattr(args, "json", False):
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0
    print("sections:")
    for name in payload["sections"]:
        print(f"  - {name}")
    print(f"platforms: {', '.join(payload['platforms'])}")
    print(f"migration tools: {', '.join(payload['migrationTools'])}")
    return 0


def _telemetry_cmd(args: argparse.Namespace) -> int:
    if args.telemetry_command == "report":
        recent = getattr(args, "recent", 0)
        if recent and recent > 0:
            runs = list(deque(telemetry_iter(SETTINGS), maxlen=recent))
        else:
            runs = list(telemetry_iter(SETTINGS))
        summary = telemetry_summarize(runs)
        print(json.dumps(summary, indent=2, ensure_ascii=False))
        return 0
    if args.telemetry_command == "clear":
        telemetry_clear(SETTINGS)
        print("Run log cleared")
        return 0
    if args.telemetry_command == "tail":
        for run in deque(telemetry_iter(SETTINGS), maxlen=args.limit):
            print(json.dumps(run, ensure_ascii=False))
        return 0
    print("Unsupported telemetry command", file=sys.stderr)
    return 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ci-dokumentor",
        description=HELP_OVERVIEW,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"ci-dokumentor {__version__}")

    sub = parser.add_subparsers(dest="command", required=True)

    generate_cmd = sub.add_parser("generate", help="Generate documentation for a CI/CD manifest")
    generate_cmd.add_argument("--source", "-s", default=str(DEFAULT_SOURCE), help="Manifest file (default: action.yml)")
    generate_cmd.add_argument("--output", "-o", help="Destination file (default: derived from the source)")
    generate_cmd.add_argument("--cicd", "-c", help="CI/CD platform: github-actions or gitlab-ci (default: from config, then detected from the source)")
    generate_cmd.add_argument("--config", help="Configuration file (default: ./.ci-dokumentor.yaml)")
    generate_cmd.add_argument(
        "--include-sections",
        action="append",
        default=[],
        help="Comma separated sections to generate (repeatable)",
    )
    generate_cmd.add_argument(
        "--exclude-sections",
        action="append",
        default=[],
        help="Comma separated sections to skip (repeatable)",
    )
    generate_cmd.add_argument(
        "--version-ref",
        help="Version identifier used in usage snippets (tag, branch, commit SHA)",
    )
    generate_cmd.add_argument(
        "--github-api",
        action="store_true",
        help="Enrich repository metadata (licence, homepage) from the GitHub API",
    )
    generate_cmd.add_argument("--dry-run", action="store_true", help="Print a unified diff instead of writing")
    generate_cmd.add_argument("--json", action="store_true", help="Emit JSON output")
    generate_cmd.set_defaults(func=_generate_cmd)

    migrate_cmd = sub.add_parser("migrate", help="Convert another tool's markers to ci-dokumentor markers")
    migrate_cmd.add_argument("--destination", "-d", required=True, help="Documentation file to migrate")
    migrate_cmd.add_argument("--tool", "-t", help="Source tool (default: auto-detect)")
    migrate_cmd.add_argument("--dry-run", action="store_true", help="Print a unified diff instead of writing")
    migrate_cmd.add_argument("--json", action="store_true", help="Emit JSON output")
    migrate_cmd.set_defaults(func=_migrate_cmd)

    sections_cmd = sub.add_parser("sections", help="List section identifiers, platforms and migration tools")
    sections_cmd.add_argument("--json", action="store_true", help="Emit JSON output")
    sections_cmd.set_defaults(func=_sections_cmd)

    telemetry_cmd = sub.add_parser("telemetry", help="Inspect the local run log")
    telemetry_sub = telemetry_cmd.add_subparsers(dest="telemetry_command", required=True)

    telemetry_report = telemetry_sub.add_parser("report", help="Print run counts by command, outcome and error code")
    telemetry_report.add_argument(
        "--recent",
        type=int,
        default=0,
        help="Limit aggregation to the last N runs",
    )
    telemetry_report.set_defaults(func=_telemetry_cmd)

    telemetry_clear_cmd = telemetry_sub.add_parser("clear", help="Remove the run log")
    telemetry_clear_cmd.set_defaults(func=_telemetry_cmd)

    telemetry_tail = telemetry_sub.add_parser("tail", help="Print the last N runs")
    telemetry_tail.add_argument("--limit", type=int, default=20)
    telemetry_tail.set_defaults(func=_telemetry_cmd)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
