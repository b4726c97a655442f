# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from iacrecon.app import reconcile_sources
from iacrecon.config import ConfigurationError, configure_logging, get_source_config
from iacrecon.domain.reconciliation import SOURCE_KEYS

from .render import OutputFormat, write_rows

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType
    from typing import TextIO

    from iacrecon.app import ReconciliationReport
    from iacrecon.domain.model import ReconciledRecord
    from iacrecon.domain.reconciliation import ReconciliationResult, Summary, TypeSummary

log = logging.getLogger(__name__)

SORT_RESOURCE_NAME = "resource-name"
SORT_COUNT_PREFIX = "count-"
SORT_COUNT_TOTAL = "count-total"
SORT_COUNT_BOTH = "count-both"
SORT_COUNT_SINGLE = "count-single"
EMPTY_CELL = "-"


def _sort_option(value: str) -> str:
    if value == SORT_RESOURCE_NAME or (
        value.startswith(SORT_COUNT_PREFIX) and len(value) > len(SORT_COUNT_PREFIX)
    ):
        return value
    raise argparse.ArgumentTypeError(
        f"invalid sort {value!r}: use {SORT_RESOURCE_NAME} or {SORT_COUNT_PREFIX}<field>"
    )


def _add_source_arguments(parser: argparse.ArgumentParser, *, nested: bool) -> None:
    # Subcommands accept the same flags; SUPPRESS keeps a value given before the
    # subcommand from being reset by the subparser's default.
    def default(value: object) -> object:
        return argparse.SUPPRESS if nested else value

    parser.add_argument(
        "--aws-config",
        type=str,
        default=default(None),
        help="Path to the AWS Config snapshot JSON file (env: IACRECON_AWS_CONFIG)",
    )
    parser.add_argument(
        "--terraform",
        type=str,
        default=default(None),
        help="Path to a Terraform state file, or a directory with --tf-recursive",
    )
    parser.add_argument(
        "--tf-recursive",
        action="store_true",
        default=default(None),
        help="Search the Terraform path recursively for .tfstate files",
    )
    parser.add_argument(
        "--typemap",
        type=str,
        default=default(None),
        help="Path to a JSON resource type map overriding the packaged one",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=default(False),
        help="Log debug output to stderr",
    )


def _add_ordering_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--sort",
        type=_sort_option,
        default=SORT_RESOURCE_NAME,
        help=(
            f"Sort order: {SORT_RESOURCE_NAME}, {SORT_COUNT_TOTAL}, {SORT_COUNT_BOTH}, "
            f"{SORT_COUNT_SINGLE} or count-<source> (default: %(default)s)"
        ),
    )
    parser.add_argument(
        "--descending",
        action="store_true",
        help="Sort descending instead of ascending",
    )
    parser.add_argument(
        "--top",
        type=int,
        default=0,
        help="Limit to the first N results, 0 for all, negative for the last N",
    )


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="iacrecon",
        description="Reconcile an AWS Config snapshot with Terraform state",
    )
    _add_source_arguments(parser, nested=False)
    subparsers = parser.add_subparsers(dest="command", required=True)

    summarize = subparsers.add_parser("summarize", help="Summarize the resources by source")
    _add_source_arguments(summarize, nested=True)

    detail = subparsers.add_parser("detail", help="Show every resource, optionally by type")
    _add_source_arguments(detail, nested=True)
    detail.add_argument(
        "resource_types",
        nargs="*",
        metavar="TYPE",
        help="Restrict output to these AWS Config resource types",
    )
    detail.add_argument(
        "--format",
        type=OutputFormat,
        choices=list(OutputFormat),
        default=OutputFormat.SPACE_SEPARATED,
        help="Output format (default: %(default)s)",
    )
    _add_ordering_arguments(detail)

    resources = subparsers.add_parser("resources", help="Show counts per resource type")
    _add_source_arguments(resources, nested=True)
    _add_ordering_arguments(resources)

    return parser.parse_args(list(argv))


def _limit[T](items: list[T], top: int) -> list[T]:
    if top > 0:
        return items[:top]
    if top < 0:
        return items[top:]
    return items


def sort_records(
    records: Sequence[ReconciledRecord],
    *,
    sort_by: str,
    descending: bool = False,
) -> list[ReconciledRecord]:
    """Order detail rows; ``count-<source>`` puts records present in that source first."""

    if sort_by.startswith(SORT_COUNT_PREFIX):
        source = sort_by.removeprefix(SORT_COUNT_PREFIX)
        return sorted(
            records,
            key=lambda record: (not record.source(source), record.resource_name, record.key),
            reverse=descending,
        )
    return sorted(
        records,
        key=lambda record: (record.resource_type, record.resource_name, record.key),
        reverse=descending,
    )


def sort_type_summaries(
    summaries: Sequence[TypeSummary],
    *,
    sort_by: str,
    descending: bool = False,
) -> list[TypeSummary]:
    def count(summary: TypeSummary) -> int:
        match sort_by:
            case "count-total":
                return summary.count
            case "count-both":
                return summary.both
            case "count-single":
                return summary.single_only
            case _:
                return summary.sources.get(sort_by.removeprefix(SORT_COUNT_PREFIX), 0)

    ordered = sorted(summaries, key=lambda summary: summary.resource_type)
    if sort_by == SORT_RESOURCE_NAME:
        return list(reversed(ordered)) if descending else ordered
    return sorted(ordered, key=count, reverse=descending)


def _flag(value: bool) -> str:
    return "true" if value else "false"


def detail_rows(records: Sequence[ReconciledRecord]) -> list[list[str]]:
    rows = [["ResourceType", "ResourceName", "ResourceID", "ARN", "owned", *SOURCE_KEYS]]
    for record in records:
        cells = [
            record.resource_type,
            record.resource_name,
            record.resource_id,
            record.arn,
            _flag(record.owned),
        ]
        rows.append(
            [cell or EMPTY_CELL for cell in cells]
            + [_flag(record.source(key)) for key in SOURCE_KEYS]
        )
    return rows


def _print_summary(report: ReconciliationReport, out: TextIO) -> None:
    summary: Summary = report.summary
    print("Summary:", file=out)
    print(f"Both (Config+IaC): {summary.both_count}", file=out)
    print("Source All Only Mapped Unmapped", file=out)
    for source in summary.sources:
        print(
            f"{source.name}: {source.total} {source.only} "
            f"{source.only_mapped} {source.only_unmapped}",
            file=out,
        )
    print(f"Terraform Files: {report.document_count}", file=out)


def _print_detail(result: ReconciliationResult, args: argparse.Namespace, out: TextIO) -> None:
    wanted = set(args.resource_types)
    records = [
        record
        for record in result.visible_records()
        if not wanted or record.resource_type in wanted
    ]
    ordered = sort_records(records, sort_by=args.sort, descending=args.descending)
    write_rows(detail_rows(_limit(ordered, args.top)), out, args.format)


def _print_resources(summary: Summary, args: argparse.Namespace, out: TextIO) -> None:
    ordered = sort_type_summaries(summary.by_type, sort_by=args.sort, descending=args.descending)
    print(f"ResourceType Total Single-Only Both {' '.join(SOURCE_KEYS)}", file=out)
    for item in _limit(ordered, args.top):
        counts = " ".join(str(item.sources[key]) for key in SOURCE_KEYS)
        print(
            f"{item.resource_type}: {item.count} {item.single_only} {item.both} {counts}",
            file=out,
        )


def main(argv: Sequence[str] | None = None, *, out: TextIO | None = None) -> None:
    """Main application entry point."""
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
    try:
        config = get_source_config(
            aws_config=parsed_args.aws_config,
            terraform=parsed_args.terraform,
            tf_recursive=parsed_args.tf_recursive,
            typemap=parsed_args.typemap,
        )
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    stream = out if out is not None else sys.stdout
    try:
        report = reconcile_sources(config)
        match parsed_args.command:
            case "summarize":
                _print_summary(report, stream)
            case "detail":
                _print_detail(report.result, parsed_args, stream)
            case "resources":
                _print_resources(report.summary, parsed_args, stream)
            case _:
                raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except Exception:
        log.exception("Fatal error during reconciliation")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
