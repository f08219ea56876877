from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from contracts.consolidation import ConsolidationIssue, ConsolidationResult
from line_sources import LineSourceError, read_line_groups, read_line_groups_under
from rendering import (
    format_operation_line,
    lenient,
    render_report,
    serialize_consolidation_result,
    write_consolidation_artifact,
)

from .config import NAME_STRATEGIES, ConsolidationConfig
from .engine import consolidate_result
from .errors import ConsolidationError
from .invariants import verify

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="line-groups-consolidate",
        description=(
            "Factor lines shared by several files into shared, nested groups. "
            "Each input file is one group named after the file."
        ),
    )
    p.add_argument("inputs", nargs="+", help="Input files, one group per file.")
    p.add_argument(
        "--data-root",
        type=Path,
        default=None,
        help="Resolve inputs as relative paths under this root (the relpath becomes the group name).",
    )
    p.add_argument("--name-strategy", choices=list(NAME_STRATEGIES), default="uuid")
    p.add_argument("--name-prefix", default="shared-", help="Prefix for counter-strategy group names.")
    p.add_argument("--no-fold", action="store_false", dest="fold_supersets", default=True)
    p.add_argument("--max-passes", type=int, default=None)
    p.add_argument("--format", choices=["text", "json"], default="text", help="stdout format.")
    p.add_argument("--out-json", type=Path, default=None, help="Also write the JSON artifact here.")
    p.add_argument(
        "--operations",
        action="store_true",
        help="Render lines as JSON management operations (/addr=x:op(params)); other lines print as-is.",
    )
    p.add_argument("--verify", action="store_true", help="Check disjointness and content preservation.")
    p.add_argument("-v", "--verbose", action="count", default=0)
    return p


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")


def _failure(code: str, message: str, detail: dict | None, output_format: str) -> int:
    logger.error("%s: %s", code, message)
    if output_format == "json":
        failed = ConsolidationResult(
            ok=False,
            groups={},
            errors=[ConsolidationIssue(code=code, message=message, detail=detail)],
        )
        sys.stdout.write(serialize_consolidation_result(failed))
    else:
        print(f"error: {message}", file=sys.stderr)
    return 2


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        cfg = ConsolidationConfig(
            fold_supersets=args.fold_supersets,
            name_strategy=args.name_strategy,
            name_prefix=args.name_prefix,
            max_passes=args.max_passes,
        )
    except ValueError as e:
        return _failure("INVALID_CONFIG", str(e), None, args.format)

    try:
        if args.data_root is not None:
            inputs = read_line_groups_under(data_root=args.data_root, relpaths=args.inputs)
        else:
            inputs = read_line_groups(Path(p) for p in args.inputs)
    except LineSourceError as e:
        return _failure("INPUT_UNREADABLE", str(e), None, args.format)

    try:
        result = consolidate_result(inputs, cfg)
        if args.verify:
            verify(inputs, result.groups)
    except ConsolidationError as e:
        return _failure(e.code, str(e), e.detail(), args.format)

    if args.out_json is not None:
        write_consolidation_artifact(result=result, out_file=args.out_json)

    if args.format == "json":
        sys.stdout.write(serialize_consolidation_result(result))
    else:
        formatter = lenient(format_operation_line) if args.operations else None
        sys.stdout.write(render_report(result.groups, formatter))

    counts = result.meta["counts"]
    logger.info("%s", json.dumps(counts, sort_keys=True, separators=(",", ":")))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
