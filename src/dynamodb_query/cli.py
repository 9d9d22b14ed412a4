"""Command-line interface for DynamoDB Query Tool."""

import argparse
import sys

import argcomplete
from botocore.exceptions import BotoCoreError, ClientError

from .client import create_store
from .prompts import Prompter
from .session import InteractiveSession
from .utils import debug_print, error_print, positive_int, set_debug_enabled

DEFAULT_PAGE_SIZE = 25


def table_name_completer(prefix, parsed_args, **kwargs):
    """Autocomplete table names from the configured region/endpoint"""
    try:
        store = create_store(
            region=getattr(parsed_args, "region", None),
            endpoint=getattr(parsed_args, "endpoint", None),
            profile=getattr(parsed_args, "profile", None),
        )
        return [name for name in store.list_tables() if name.startswith(prefix)]
    except (BotoCoreError, ClientError):
        return []


def build_parser():
    parser = argparse.ArgumentParser(
        prog="dynamodb-query",
        description="Interactively scan or query DynamoDB tables",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  dynamodb-query --region eu-west-1
  dynamodb-query --table-name Orders --page-size 10
  dynamodb-query --endpoint http://localhost:8000 --region us-east-1  (local emulator)
  dynamodb-query --table-name Orders --table  (render pages as tables)

Autocomplete Setup:
  Bash:  eval "$(register-python-argcomplete dynamodb-query)"
""",
    )
    parser.add_argument("--region", help="AWS region to use for requests")
    parser.add_argument("--endpoint", help="Override the DynamoDB endpoint URL")
    parser.add_argument("--profile", help="AWS profile to use for requests")
    parser.add_argument(
        "--page-size",
        type=positive_int,
        default=DEFAULT_PAGE_SIZE,
        help=f"Items per page (default: {DEFAULT_PAGE_SIZE})",
    )
    table_arg = parser.add_argument("--table-name", help="Skip the table prompt and use this table")
    table_arg.completer = table_name_completer  # type: ignore[attr-defined]
    parser.add_argument(
        "--convert-empty-values",
        action="store_true",
        help="Send empty strings, binaries and sets as NULL",
    )
    parser.add_argument(
        "-t", "--table", action="store_true", help="Output pages as tables instead of JSON"
    )
    parser.add_argument("-d", "--debug", action="store_true", help="Enable debug output")
    return parser


def main(argv=None):
    parser = build_parser()
    argcomplete.autocomplete(parser)
    args = parser.parse_args(argv)

    set_debug_enabled(args.debug)
    debug_print(f"Parsed arguments: {vars(args)}")  # pragma: no mutate

    try:
        store = create_store(
            region=args.region,
            endpoint=args.endpoint,
            profile=args.profile,
            convert_empty_values=args.convert_empty_values,
        )
        session = InteractiveSession(
            store,
            Prompter(),
            page_size=args.page_size,
            table_name=args.table_name,
            output_format="table" if args.table else "json",
        )
        session.run()
    except (KeyboardInterrupt, EOFError):
        print("\nOperation cancelled by user.", file=sys.stderr)
        sys.exit(1)
    except (BotoCoreError, ClientError, ValueError, KeyError) as e:
        error_print(e)
        sys.exit(1)


if __name__ == "__main__":
    main()
