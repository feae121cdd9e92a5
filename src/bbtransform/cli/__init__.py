"""Command-line interface for the bbtransform library.

This module provides the ``bbtransform`` console script, which renders
BBCode to HTML, reproduces it verbatim, or prints its parsed tree.

Environment Variable Support
----------------------------
Value options accept defaults from ``BBTRANSFORM_<OPTION_NAME>`` variables
(``BBTRANSFORM_FORMAT=tree``). ``BBTRANSFORM_CONFIG`` names a configuration
file. CLI arguments always override environment variables and configuration
files.

Examples
--------
Render a post to HTML::

    $ bbtransform post.bbcode --out post.html

Keep spoilers as literal markup::

    $ bbtransform post.bbcode --keep-tag spoiler

Inspect the parsed tree::

    $ echo "[b]Hi[/b]" | bbtransform --format tree --rich

"""

import argparse
import logging
import os
import sys
from pathlib import Path

from bbtransform import __version__
from bbtransform.ast import Document, TagNode
from bbtransform.cli.actions import EnvDefaultStoreAction, parse_positive_int
from bbtransform.cli.config import load_config_with_priority, options_from_config
from bbtransform.cli.output import format_tree, print_rich_tree, should_use_rich_output
from bbtransform.constants import (
    CONFIG_ENV_VAR,
    EXIT_ERROR,
    EXIT_FILE_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
)
from bbtransform.exceptions import BBTransformError, ConfigError, FileError, InputError, ValidationError
from bbtransform.logging_utils import configure_logging
from bbtransform.options.bbcode import BBCodeParserOptions
from bbtransform.options.html import HtmlRendererOptions
from bbtransform.parsers.bbcode import BBCodeParser
from bbtransform.renderers.html import HtmlRenderer, html_parser_options
from bbtransform.renderers.transformer import BBCodeTransformer

logger = logging.getLogger(__name__)

__all__ = ["main", "create_parser", "get_exit_code_for_exception"]


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="bbtransform",
        description="Render BBCode markup to HTML, reproduce it verbatim, or print its parsed tree.",
    )
    parser.add_argument("input", nargs="?", default="-", help="Input file (default: read standard input)")
    parser.add_argument("--out", "-o", metavar="PATH", help="Write output to PATH instead of standard output")
    parser.add_argument(
        "--format",
        "-f",
        action=EnvDefaultStoreAction,
        choices=["html", "bbcode", "tree"],
        default="html",
        help="Output format (default: html)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    parser_group = parser.add_argument_group("parsing options")
    parser_group.add_argument(
        "--standalone-tag",
        action="append",
        default=[],
        metavar="NAME",
        help="Treat NAME as a tag without body, e.g. an emoticon (repeatable)",
    )
    parser_group.add_argument(
        "--max-depth",
        action=EnvDefaultStoreAction,
        type=parse_positive_int,
        metavar="N",
        help="Maximum tag nesting depth; deeper tags are kept as text",
    )

    html_group = parser.add_argument_group("html options")
    html_group.add_argument(
        "--keep-tag",
        action="append",
        default=[],
        metavar="NAME",
        help="Leave tags named NAME as literal markup (repeatable)",
    )
    html_group.add_argument("--no-escape", action="store_true", help="Do not HTML-escape free text (trusted input)")
    html_group.add_argument("--convert-newlines", action="store_true", help="Convert newlines in text to <br>")
    html_group.add_argument("--sanitize", action="store_true", help="Sanitize the final HTML with bleach")
    html_group.add_argument(
        "--unknown-tags",
        action=EnvDefaultStoreAction,
        choices=["preserve", "strip"],
        help="Keep unknown tags as escaped literal markup, or strip them keeping their content",
    )

    config_group = parser.add_argument_group("configuration")
    config_group.add_argument("--config", metavar="PATH", help=f"Configuration file (default: ${CONFIG_ENV_VAR})")
    config_group.add_argument("--no-config", action="store_true", help="Ignore configuration files")

    output_group = parser.add_argument_group("output and logging")
    output_group.add_argument("--rich", action="store_true", help="Rich terminal output for --format tree")
    output_group.add_argument(
        "--force-rich", action="store_true", help="Use rich output even when standard output is not a terminal"
    )
    output_group.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose output (equivalent to --log-level DEBUG)"
    )
    output_group.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set logging level (default: WARNING). Overrides --verbose if both are specified.",
    )
    output_group.add_argument("--log-file", metavar="PATH", help="Also write log messages to PATH")
    output_group.add_argument("--trace", action="store_true", help="Very verbose logging with timing information")
    return parser


def get_exit_code_for_exception(exception: Exception) -> int:
    """Map an exception to an appropriate CLI exit code."""
    if isinstance(exception, (ValidationError, ConfigError)):
        return EXIT_VALIDATION_ERROR
    if isinstance(exception, FileError):
        return EXIT_FILE_ERROR
    return EXIT_ERROR


def _setup_logging_level(parsed_args: argparse.Namespace) -> None:
    """Set up logging level based on command-line arguments."""
    if parsed_args.trace:
        log_level = logging.DEBUG
    elif parsed_args.verbose and parsed_args.log_level == "WARNING":
        log_level = logging.DEBUG
    else:
        log_level = getattr(logging, parsed_args.log_level.upper())

    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)


def _resolve_options(parsed_args: argparse.Namespace) -> tuple[BBCodeParserOptions, HtmlRendererOptions]:
    """Merge configuration file options with command line overrides."""
    if parsed_args.no_config:
        parser_options, html_options = BBCodeParserOptions(), HtmlRendererOptions()
    else:
        config = load_config_with_priority(parsed_args.config, os.environ.get(CONFIG_ENV_VAR))
        parser_options, html_options = options_from_config(config)

    parser_updates: dict = {}
    if parsed_args.standalone_tag:
        parser_updates["standalone_tags"] = frozenset(parser_options.standalone_tags) | set(parsed_args.standalone_tag)
    if parsed_args.max_depth is not None:
        parser_updates["max_nesting_depth"] = parsed_args.max_depth

    html_updates: dict = {}
    if parsed_args.no_escape:
        html_updates["escape_text"] = False
    if parsed_args.convert_newlines:
        html_updates["convert_newlines"] = True
    if parsed_args.sanitize:
        html_updates["sanitize_output"] = True
    if parsed_args.unknown_tags is not None:
        html_updates["unknown_tag_mode"] = parsed_args.unknown_tags

    try:
        return parser_options.create_updated(**parser_updates), html_options.create_updated(**html_updates)
    except ValueError as e:
        raise ValidationError(str(e), original_error=e) from e


def _read_input(source: str) -> bytes:
    if source == "-":
        return sys.stdin.buffer.read()

    path = Path(source)
    if not path.is_file():
        raise InputError(f"Input file not found: {source}", file_path=source)
    try:
        return path.read_bytes()
    except OSError as e:
        raise InputError(f"Cannot read input file {source}: {e}", file_path=source, original_error=e) from e


def _mark_kept_tags(document: Document, names: list[str]) -> None:
    """Clear the transform flag of every tag whose name is in ``names``."""
    keep = {name.lower() for name in names}

    def visit(node: TagNode) -> None:
        name = document.tag_name(node)
        if name is not None and name.lower() in keep:
            node.transform = False

    document.walk(TagNode, visit)


def _write_output(text: str, out: str | None, end_with_newline: bool = True) -> None:
    if out is None:
        sys.stdout.write(text)
        if end_with_newline and not text.endswith("\n"):
            sys.stdout.write("\n")
        return
    try:
        Path(out).write_text(text, encoding="utf-8")
    except OSError as e:
        raise FileError(f"Cannot write output file {out}: {e}", file_path=out, original_error=e) from e


def _run(parsed_args: argparse.Namespace) -> int:
    parser_options, html_options = _resolve_options(parsed_args)
    data = _read_input(parsed_args.input)

    if parsed_args.format == "html":
        parser_options = html_parser_options(parser_options)
    document = BBCodeParser(parser_options).parse(data)

    if parsed_args.format == "tree":
        if parsed_args.out is None and should_use_rich_output(parsed_args):
            print_rich_tree(document)
        else:
            _write_output(format_tree(document), parsed_args.out)
        return EXIT_SUCCESS

    if parsed_args.format == "bbcode":
        markup = BBCodeTransformer().transform(document, lambda node: False)
        _write_output(markup, parsed_args.out, end_with_newline=False)
        return EXIT_SUCCESS

    if parsed_args.keep_tag:
        _mark_kept_tags(document, parsed_args.keep_tag)
    _write_output(HtmlRenderer(html_options).render_to_string(document), parsed_args.out)
    return EXIT_SUCCESS


def main(args: list[str] | None = None) -> int:
    """Execute the main CLI entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    _setup_logging_level(parsed_args)

    try:
        return _run(parsed_args)
    except BBTransformError as e:
        print(f"Error: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
