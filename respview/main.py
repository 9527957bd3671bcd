"""
respview - Main entry point.
Pretty-prints a response body read from a file or stdin.
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from respview import __version__
from respview.config import Config
from respview.detector import detect
from respview.formats import FormatTag
from respview.pipeline import run


def format_summary(declared_type: Optional[str], tag: FormatTag) -> str:
    """
    Header shown above the body.

    The detected format is only listed when the declared type does not
    already mention it.
    """
    lines = [f"Content-Type: {declared_type or ''}"]
    if tag.value not in (declared_type or "").lower():
        lines.append(f"Detected Format: {tag.value.upper()}")
    return "\n".join(lines) + "\n\n"


def _read_body(path: Optional[str]) -> bytes:
    if path is None or path == "-":
        return sys.stdin.buffer.read()
    with open(path, "rb") as f:
        return f.read()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="respview",
        description="respview - detect, reformat and colour HTTP response bodies",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  curl -s https://api.github.com | respview -t application/json
  respview page.html                 Detect the format from the content
  respview body.bin --detect-only    Print only the detected format
  respview -i                        Interactive viewer
        """
    )

    parser.add_argument(
        'file',
        nargs='?',
        help='File holding the response body (default: stdin)'
    )

    parser.add_argument(
        '-t', '--content-type',
        help='Declared media type, e.g. "application/json; charset=utf-8"'
    )

    parser.add_argument(
        '--detect-only',
        action='store_true',
        help='Print the detected format and exit'
    )

    parser.add_argument(
        '--no-color',
        action='store_true',
        help='Reformat without colouring'
    )

    parser.add_argument(
        '--no-summary',
        action='store_true',
        help='Omit the Content-Type / Detected Format header'
    )

    parser.add_argument(
        '-i', '--interactive',
        action='store_true',
        help='Prompt for files to view'
    )

    parser.add_argument(
        '--config-dir',
        type=str,
        help='Custom configuration directory (default: ~/.respview)'
    )

    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'respview {__version__}'
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for respview."""
    args = build_parser().parse_args(argv)

    debug = args.debug or bool(os.getenv("DEBUG"))
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = Config(config_dir=args.config_dir)
        if args.no_color:
            config.settings["color"] = False
        if args.no_summary:
            config.settings["show_summary"] = False

        if args.interactive:
            from respview.prompt import ViewerPrompt
            ViewerPrompt(config).loop()
            return 0

        body = _read_body(args.file)

        if args.detect_only:
            print(detect(body, args.content_type).value)
            return 0

        result = run(body, args.content_type, config=config)
        if config.show_summary:
            sys.stdout.write(format_summary(args.content_type, result.tag))
        sys.stdout.write(result.output)
        if result.output and not result.output.endswith("\n"):
            sys.stdout.write("\n")
        return 0

    except KeyboardInterrupt:
        print("\n\nInterrupted. Goodbye!")
        return 130
    except OSError as e:
        print(f"[Error] {e}", file=sys.stderr)
        if debug:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == '__main__':
    sys.exit(main())
