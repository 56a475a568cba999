"""Command-line entry point.

Usage:
    cmakelink '"vendor/zlib", "z"' --unit myext
    cmakelink --source vendor/zlib --library z --unit myext --format args
    cmakelink '"tools/codegen"' --unit myext --build-command "ninja"
"""

from __future__ import annotations

import argparse
import json
import shlex
import sys
from collections.abc import Sequence
from dataclasses import replace
from pathlib import Path

from cmakelink.config import ProcessorConfig
from cmakelink.diagnostics import DiagnosticSink
from cmakelink.directive import Token, tokens_from_values
from cmakelink.errors import CmakeLinkError
from cmakelink.models import LinkageDescriptor, Span
from cmakelink.pipeline import DirectiveProcessor

OUTPUT_FORMATS = ("json", "args", "extension")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cmakelink",
        description="Build a CMake project and print the linkage for its library.",
    )
    parser.add_argument(
        "directive",
        nargs="?",
        help='Directive arguments, e.g. \'"vendor/zlib", "z"\'',
    )
    parser.add_argument("--source", help="Source directory, instead of directive text")
    parser.add_argument("--library", help="Library target to build and link (with --source)")
    parser.add_argument("--unit", required=True, help="Compilation unit identifier")
    parser.add_argument("--cache-root", type=Path, help="Root of per-unit output directories")
    parser.add_argument("--cwd", type=Path, help="Directory relative source paths resolve against")
    parser.add_argument("--configure-command", help="Configure tool command line (default: cmake)")
    parser.add_argument("--build-command", help="Build tool command line (default: make)")
    parser.add_argument(
        "--exit-status",
        action="store_true",
        help="Judge tool success by exit status instead of stderr output",
    )
    parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default="json",
        help="json: descriptor; args: linker flags; extension: setuptools.Extension kwargs",
    )
    parser.add_argument("--span", default="<directive>", help="Location reported in diagnostics")
    parser.add_argument("--log-json", type=Path, help="Write structured pipeline logs here")
    parser.add_argument("--diagnostics-json", type=Path, help="Write diagnostics here")
    return parser


def load_config(args: argparse.Namespace) -> ProcessorConfig:
    config = ProcessorConfig.from_env(working_dir=args.cwd)
    overrides: dict[str, object] = {}
    if args.cache_root is not None:
        overrides["cache_root"] = args.cache_root
    if args.configure_command is not None:
        overrides["configure_command"] = tuple(shlex.split(args.configure_command))
    if args.build_command is not None:
        overrides["build_command"] = tuple(shlex.split(args.build_command))
    if args.exit_status:
        overrides["success_policy"] = "exit-status"
    return replace(config, **overrides) if overrides else config


def directive_arguments(
    parser: argparse.ArgumentParser, args: argparse.Namespace
) -> str | list[Token]:
    if args.source is not None:
        if args.directive is not None:
            parser.error("give either directive text or --source, not both")
        if args.library is None:
            return tokens_from_values(args.source)
        return tokens_from_values(args.source, args.library)
    if args.library is not None:
        parser.error("--library requires --source")
    if args.directive is None:
        parser.error("a directive or --source is required")
    return args.directive


def render(linkage: LinkageDescriptor, output_format: str) -> str:
    if output_format == "args":
        return shlex.join(linkage.link_args())
    if output_format == "extension":
        return json.dumps(linkage.extension_kwargs(), indent=2, sort_keys=True)
    return json.dumps(linkage.to_dict(), indent=2, sort_keys=True)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    arguments = directive_arguments(parser, args)

    try:
        config = load_config(args)
    except (CmakeLinkError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    processor = DirectiveProcessor(config)
    sink = DiagnosticSink()
    linkage = processor.process(
        arguments,
        unit=args.unit,
        span=Span.parse(args.span),
        sink=sink,
    )

    for diagnostic in sink.records:
        print(diagnostic.render(), file=sys.stderr)
    if args.log_json is not None:
        processor.logger.to_json_lines(args.log_json)
    if args.diagnostics_json is not None:
        sink.to_json_lines(args.diagnostics_json)

    if linkage is None:
        return 1
    print(render(linkage, args.format))
    return 0


if __name__ == "__main__":
    sys.exit(main())
