#!/usr/bin/env python
'''
@File    :   main.py
@Version :   1.0
@Desc    :   DotDay to iCalendar converter
'''
import argparse
import importlib
import importlib.util
import json
import logging
import os
import sys
from pathlib import Path
from typing import Protocol, Sequence

from icalendar import Calendar

from .errors import DotDayError
from .exporter import build_calendar
from .models import Day
from .parser import DATE_SOURCES, parse_batch

DEFAULT_CALENDAR_NAME = 'dotday'
STDIN_SOURCE_ID = '<stdin>'


class BaseHandler(Protocol):
    def __call__(self, calendar: Calendar, days: Sequence[Day]) -> None: ...


def load_sources(input_paths: list[str]) -> list[tuple[str, str]]:
    """Read DotDay sources from files, directories, or stdin.

    Directories are not searched recursively; only regular files directly
    inside them are read, in name order. A source's id is its file name.

    Args:
        input_paths: List of file paths or directories. If empty, reads from stdin.

    Returns:
        (source_id, text) pairs in input order
    """
    sources: list[tuple[str, str]] = []

    if not input_paths:
        content = sys.stdin.read()
        if content.strip():
            sources.append((STDIN_SOURCE_ID, content))
        else:
            logging.warning("No content read from stdin.")

    for path_str in input_paths:
        path = Path(path_str)

        if not path.exists():
            logging.warning(f"Path '{path}' does not exist, skipped.")
            continue

        if path.is_file():
            files = [path]
        elif path.is_dir():
            files = sorted(p for p in path.iterdir() if p.is_file())
        else:
            logging.warning(f"Path '{path}' is not a file or directory, skipped.")
            continue

        for source_file in files:
            try:
                with source_file.open('r', encoding='utf-8') as f:
                    sources.append((source_file.name, f.read()))
            except (OSError, UnicodeDecodeError) as e:
                logging.warning(f"Error reading file {source_file}: {e}")

    return sources


def default_calendar_name(input_paths: list[str]) -> str:
    """Name of the first input directory, or of the directory holding the first file."""
    if not input_paths:
        return DEFAULT_CALENDAR_NAME
    path = Path(input_paths[0]).resolve()
    directory = path if path.is_dir() else path.parent
    return directory.name or DEFAULT_CALENDAR_NAME


def load_handler(handler_name: str, handler_params: dict | None = None) -> BaseHandler:
    """Load and instantiate an output handler module.

    Args:
        handler_name: Module name or path to handler script
        handler_params: Optional parameters to pass to handler constructor

    Returns:
        Callable handler instance
    """
    handler_file = Path(handler_name)
    if handler_file.is_file() and handler_file.suffix == '.py':
        spec = importlib.util.spec_from_file_location(handler_file.stem, handler_name)
        if spec is None or spec.loader is None:
            raise ImportError(f"Cannot load handler from {handler_name}")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
    else:
        try:
            module = importlib.import_module(f'dotday.handlers.{handler_name}')
        except ImportError:
            module = importlib.import_module(handler_name)

    handler_class = getattr(module, 'Handler')

    if handler_params:
        return handler_class(**handler_params)
    else:
        return handler_class()


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='dotday',
        description='Convert DotDay day notes to an iCalendar file'
    )

    parser.add_argument(
        'path',
        nargs='*',
        help='path to a DotDay file or directory of DotDay files; if omitted, reads from stdin'
    )

    parser.add_argument(
        '-D', '--date-source',
        choices=sorted(DATE_SOURCES),
        default='external',
        help='where the day\'s date comes from: the file name ("2020-05-04.day") or '
             'a "= 4 May 2020 =" title line (default: external)'
    )

    parser.add_argument(
        '-n', '--name',
        type=str,
        help='calendar name; also seeds event UIDs (default: name of the input directory)'
    )

    parser.add_argument(
        '-m', '--module',
        type=str,
        help='output handler module name: console, file, formatter, dump, '
             'or a module path (default: console)'
    )

    parser.add_argument(
        '-p', '--params',
        type=str,
        help='handler initialization parameters in JSON format'
    )

    parser.add_argument(
        '--strict',
        action='store_true',
        help='abort on the first malformed source instead of skipping it'
    )

    parser.add_argument(
        '-l', '--log-level',
        type=str.upper,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default='INFO',
        help='set the logging level (default: INFO)'
    )

    parser.add_argument(
        '-v', '--version',
        action='version',
        version='dotday 1.0.0',
        help='show program version and exit'
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the DotDay converter."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    if args.params:
        try:
            params = json.loads(args.params)
        except json.JSONDecodeError as e:
            logging.error(f"Invalid JSON format for handler parameters: {e}")
            return 1
        if not isinstance(params, dict):
            logging.error("Params must be a JSON object (dict)")
            return 1
    else:
        params = None

    try:
        handler = load_handler(args.module or 'console', params)
    except Exception as e:
        logging.error(f"Error loading handler module: {e}")
        return 1

    if not args.path and sys.stdin.isatty():
        parser.print_help()
        return 1

    sources = load_sources(args.path)
    date_source = DATE_SOURCES[args.date_source]()

    try:
        result = parse_batch(sources, date_source, strict=args.strict)
    except DotDayError as e:
        logging.error(f"Aborting: {e}")
        return 1

    if sources and not result.days:
        logging.error("No source could be parsed.")
        return 2

    calendar_name = args.name or default_calendar_name(args.path)
    calendar = build_calendar(result.days, calendar_name)
    logging.info(f"Exporting {len(calendar.subcomponents)} event(s) as '{calendar_name}'")

    handler(calendar, result.days)
    return 0


def run():
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print(file=sys.stderr)
        sys.exit(130)
    except BrokenPipeError:
        sys.stderr = open(os.devnull, 'w')
        sys.exit(1)


if __name__ == "__main__":
    run()
