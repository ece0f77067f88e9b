"""Command-line entry point for AIA template generation."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from logic.activity_logger import log_user_action
from logic.aia_generator import generate, render_template
from logic.errors import AIATemplateError
from logic.logging_utils import console_level_from_env, enable_console_logging, setup_logging
from logic.output_packager import package_document, save_document
from logic.project_io import load_application
from logic.token_mapper import placeholder_catalog

logger = logging.getLogger("aia_cli")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NO_TEMPLATE = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aia-template",
        description="Fill AIA G702/G703 Excel templates with application data.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="render a local template file")
    render.add_argument("--template", required=True, type=Path)
    render.add_argument("--data", required=True, type=Path, help="application JSON")
    render.add_argument("--out", default=Path.cwd(), type=Path, help="output directory")
    render.add_argument("--review", action="store_true", help="mark as review copy")
    render.add_argument("--empty-schedule", choices=("clear", "keep"), default="clear")

    gen = sub.add_parser("generate", help="use the company's default stored template")
    gen.add_argument("--company", required=True)
    gen.add_argument("--data", required=True, type=Path, help="application JSON")
    gen.add_argument("--out", default=Path.cwd(), type=Path, help="output directory")
    gen.add_argument("--review", action="store_true", help="mark as review copy")

    sub.add_parser("placeholders", help="list the supported placeholders")
    return parser


def _print_placeholders() -> int:
    for category, entries in placeholder_catalog():
        print(category)
        for placeholder, description in entries:
            print(f"  {placeholder:<32} {description}")
    return EXIT_OK


def _render(args: argparse.Namespace) -> int:
    data = load_application(args.data)
    if data is None:
        return EXIT_ERROR
    result = render_template(
        args.template.read_bytes(), data, policy=args.empty_schedule, logger=logger
    )
    document = package_document(
        result.blob, data.application_number, args.review, report=result.report
    )
    path = save_document(document, args.out)
    log_user_action(
        "Template rendered",
        details={"template": str(args.template), "output": str(path)},
        snapshot=result.report.to_mapping(),
    )
    print(path)
    return EXIT_OK


def _generate(args: argparse.Namespace) -> int:
    data = load_application(args.data)
    if data is None:
        return EXIT_ERROR
    document = generate(args.company, data, for_review=args.review, logger=logger)
    if document is None:
        log_user_action("No default template", details={"company": args.company})
        print(f"No default AIA template for company {args.company}", file=sys.stderr)
        return EXIT_NO_TEMPLATE
    path = save_document(document, args.out)
    log_user_action(
        "Document generated",
        details={"company": args.company, "output": str(path)},
        snapshot=document.report.to_mapping(),
    )
    print(path)
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    if args.command == "placeholders":
        return _print_placeholders()

    log_path = setup_logging()
    enable_console_logging(console_level_from_env())
    logger.debug("Log file: %s", log_path)

    try:
        if args.command == "render":
            return _render(args)
        return _generate(args)
    except (AIATemplateError, OSError, ValueError) as exc:
        logger.exception("AIA generation failed")
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
