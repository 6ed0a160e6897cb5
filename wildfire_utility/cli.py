#!/usr/bin/env python3
"""
Command line interface for the WildFire utility

    wildfire-utility submit --apikey KEY --file sample.exe
    wildfire-utility verdict --hashes hashes.txt --csv verdicts.csv
"""

import argparse
import logging
import sys
from typing import List, Optional

from .config import Config
from .dispatcher import Dispatcher
from .exceptions import ParameterError, WildFireError
from .logger_config import setup_logging
from .pdf_generator import generate_pdf_report
from .schemas import ApiOption
from .wildfire_client import WildFireClient

logger = logging.getLogger(__name__)

API_KEY_LENGTH = 64

# (flag, metavar, help, option) per subcommand
SUBMIT_SOURCES = [
    ("--file", "FILE", "Submit <FILE>", ApiOption.SUBMIT_FILE),
    ("--files", "FOLDER", "Submit the file(s) in <FOLDER>", ApiOption.SUBMIT_FOLDER),
    ("--link", "LINK", "Submit <LINK>", ApiOption.SUBMIT_LINK),
    ("--links", "FILE", "Submit the link(s) in <FILE>", ApiOption.SUBMIT_LINKFILE),
]

VERDICT_SOURCES = [
    ("--hash", "HASH", "Obtain the verdict for MD5/SHA-256 <HASH>", ApiOption.VERDICT_HASH),
    ("--hashes", "FILE", "Obtain the verdict for MD5/SHA-256 hash(es) in <FILE>", ApiOption.VERDICT_HASHFILE),
    ("--link", "LINK", "Obtain the verdict for <LINK>", ApiOption.VERDICT_LINK),
    ("--links", "FILE", "Obtain the verdict for link(s) in <FILE>", ApiOption.VERDICT_LINKFILE),
    ("--log", "CSV", "Obtain the verdict for every sha256 in a CSV written by 'submit'", ApiOption.VERDICT_LOGFILE),
]


def _add_common_options(parser: argparse.ArgumentParser):
    parser.add_argument('--apikey', metavar='APIKEY',
                        help='WildFire API key (default: $WILDFIRE_API_KEY)')
    parser.add_argument('--host', help='WildFire host URL, for other regions')
    parser.add_argument('--csv', metavar='FILE', help='Write results to a CSV file')
    parser.add_argument('--append', action='store_true', help='Append to the CSV file instead of replacing it')
    parser.add_argument('--pdf', metavar='FILE', help='Write results to a PDF report')
    parser.add_argument('--check', action='store_true', help='Verify the host is reachable first')
    parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])
    parser.add_argument('--log-file', metavar='FILE', help='Also write log records to FILE')


def _add_sources(parser: argparse.ArgumentParser, sources):
    group = parser.add_mutually_exclusive_group(required=True)
    for flag, metavar, help_text, option in sources:
        group.add_argument(flag, metavar=metavar, help=help_text, dest='value',
                           action=_SourceAction, option=option)


class _SourceAction(argparse.Action):
    """Stores the value and remembers which API option selected it"""

    def __init__(self, option_strings, dest, option=None, **kwargs):
        self.option = option
        super().__init__(option_strings, dest, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        setattr(namespace, self.dest, values)
        namespace.api_option = self.option


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='wildfire-utility', description='WildFire API Utility')
    subparsers = parser.add_subparsers(dest='command', required=True)

    submit = subparsers.add_parser('submit', help='Submit file(s)/link(s) to WildFire for analysis')
    _add_sources(submit, SUBMIT_SOURCES)
    _add_common_options(submit)

    verdict = subparsers.add_parser('verdict', help='Obtain the verdict for file(s)/link(s)')
    _add_sources(verdict, VERDICT_SOURCES)
    _add_common_options(verdict)

    return parser


def validate_api_key(api_key: Optional[str]) -> str:
    if not api_key:
        raise ParameterError("<APIKEY> is required (--apikey or WILDFIRE_API_KEY).")
    if len(api_key) != API_KEY_LENGTH or not api_key.isalnum():
        raise ParameterError("<APIKEY> has an incorrect length and/or contains invalid characters.")
    return api_key


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)

    config = Config.load()
    setup_logging(args.log_level or config.output.log_level, args.log_file or config.output.log_file)

    wildfire_config = config.wildfire
    if args.host:
        wildfire_config.host = args.host
    if args.apikey:
        wildfire_config.api_key = args.apikey
    csv_file = args.csv or config.output.csv_file
    pdf_file = args.pdf or config.output.pdf_file

    try:
        validate_api_key(wildfire_config.api_key)
    except ParameterError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    client = WildFireClient(wildfire_config)
    try:
        if args.check and not client.health_check():
            print(f"Error: {wildfire_config.base_url} is not reachable.", file=sys.stderr)
            return 1

        report = Dispatcher(client).run(args.api_option, args.value)
    except WildFireError as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        client.close()

    sys.stdout.write(report.render())

    status = 0
    if csv_file:
        status |= _write_output(report.write_csv, csv_file, append=args.append)
    if pdf_file:
        status |= _write_output(generate_pdf_report, report, pdf_file)

    return status


def _write_output(writer, *args, **kwargs) -> int:
    """Run an output writer; a failed write is reported without losing the other outputs"""
    try:
        writer(*args, **kwargs)
    except OSError as e:
        logger.error(f"Could not write output: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
