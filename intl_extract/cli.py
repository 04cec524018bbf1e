"""
CLI -- intl-extract command

Extracts Intl messages from Dart files and writes them as JSON.

Usage:
    intl-extract lib/messages.dart lib/other.dart --output messages.json
    intl-extract lib/*.dart --warnings-are-errors --no-embedded-plurals

Settings come from ~/.intl_extract/config.yaml, then intl_extract.yaml in
the project directory, then INTL_EXTRACT_* environment variables; flags
given on the command line win over all of them.
"""

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from . import __version__
from .config import ConfigManager, ExtractionConfig
from .extraction import ExtractionSession, SourceParseError
from .messages import MainMessage


# Flag -> (config field, value it sets)
FLAG_SETTINGS = {
    'suppress_warnings': ('suppress_warnings', True),
    'warnings_are_errors': ('warnings_are_errors', True),
    'no_embedded_plurals': ('allow_embedded_plurals_and_genders', False),
    'require_examples': ('examples_required', True),
    'require_description': ('description_required', True),
    'include_source_text': ('include_source_text', True),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="intl-extract",
        description="Extract Intl.message definitions from Dart source",
    )
    parser.add_argument('files', nargs='+', help='Dart source files')
    parser.add_argument(
        '--output', '-o',
        help='Write JSON here instead of stdout'
    )
    parser.add_argument(
        '--project', '-p',
        default=os.environ.get("INTL_EXTRACT_PROJECT_PATH", "."),
        help='Project directory holding intl_extract.yaml (default: current)'
    )
    parser.add_argument(
        '--generate-names',
        action='store_true',
        help='Take message names and args from the enclosing declaration'
    )
    parser.add_argument('--suppress-warnings', action='store_true',
                        help='Do not print warnings')
    parser.add_argument('--warnings-are-errors', action='store_true',
                        help='Exit with status 1 if any warning was reported')
    parser.add_argument('--no-embedded-plurals', action='store_true',
                        help='Reject plurals/genders embedded in larger strings')
    parser.add_argument('--require-examples', action='store_true',
                        help='Messages with parameters must have examples')
    parser.add_argument('--require-description', action='store_true',
                        help='Every message must have a description')
    parser.add_argument('--include-source-text', action='store_true',
                        help='Include the source of each call in the output')
    parser.add_argument(
        '--version', '-V',
        action='version',
        version=f'intl-extract {__version__}'
    )
    return parser


def resolve_config(args: argparse.Namespace) -> ExtractionConfig:
    """Layered config with command line flags applied on top."""
    config = ConfigManager(Path(args.project)).load()
    values = config.to_dict()
    for flag, (setting, value) in FLAG_SETTINGS.items():
        if getattr(args, flag):
            values[setting] = value
    return ExtractionConfig.from_dict(values)


def _print_warning(text: str) -> None:
    # stdout may be carrying the JSON output
    print(text, file=sys.stderr)


def extract_files(files: List[str], config: ExtractionConfig,
                  generate_names: bool = False) -> Tuple[Dict[str, MainMessage], bool]:
    """
    Extract every file with its own session.

    Returns:
        (merged messages, whether the run failed)
    """
    messages: Dict[str, MainMessage] = {}
    failed = False
    for file in files:
        session = ExtractionSession(config, on_message=_print_warning)
        try:
            found = session.parse_file(file, generate_names)
        except SourceParseError as e:
            for error in e.errors:
                print(f"    {error}", file=sys.stderr)
            failed = True
            continue
        except OSError as e:
            print(f"Error: cannot read {file}: {e}", file=sys.stderr)
            failed = True
            continue
        for name, message in found.items():
            # First file wins
            messages.setdefault(name, message)
        failed = failed or session.failed
    return messages, failed


def write_messages(messages: Dict[str, MainMessage], output: Optional[str]) -> None:
    data = {name: message.to_json() for name, message in messages.items()}
    text = json.dumps(data, indent=2, ensure_ascii=False, default=str)
    if output:
        Path(output).write_text(text + "\n", encoding='utf-8')
    else:
        print(text)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for intl-extract.

    Returns:
        Process exit status
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    config = resolve_config(args)
    error = config.validate()
    if error:
        print(f"Error: {error}", file=sys.stderr)
        return 2

    messages, failed = extract_files(args.files, config, args.generate_names)
    write_messages(messages, args.output)
    return 1 if failed else 0


if __name__ == '__main__':
    sys.exit(main())
