"""Command line entry point.

``tofile`` is the only public command. It relays to ``_tofile``, which does
the actual extraction and is dispatched here only when it is the first
argument; it is never registered on the public parser.
"""

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from apidump import __version__
from apidump.core.config import settings
from apidump.core.exceptions import ApiDumpError, handle_error
from apidump.core.logging import configure_logging
from apidump.schemas import InvocationRequest
from apidump.services.extractor_service import InMemoryExtractor
from apidump.services.relay_service import PUBLIC_COMMAND, RelayLauncher

TOFILE_HELP = "retrieves an API document from a startup module, and writes to file"


def _add_tofile_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "startupassembly",
        help="relative path to the application's startup module",
    )
    parser.add_argument(
        "documenturi",
        help="relative uri where the application exposes its API document",
    )
    parser.add_argument(
        "output",
        help="relative path where the document will be output",
    )
    parser.add_argument(
        "--baseaddress",
        default=None,
        help="base uri to pass to the document provider",
    )


def build_parser() -> argparse.ArgumentParser:
    """Public command surface."""
    parser = argparse.ArgumentParser(
        prog="apidump",
        description="API document command line tools",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", metavar="command")
    subparsers.required = True

    tofile = subparsers.add_parser(PUBLIC_COMMAND, help=TOFILE_HELP, description=TOFILE_HELP)
    _add_tofile_arguments(tofile)
    return parser


def build_private_parser() -> argparse.ArgumentParser:
    """Parser for the relay-only command."""
    parser = argparse.ArgumentParser(
        prog=f"apidump {settings.relay.private_name(PUBLIC_COMMAND)}",
        description=TOFILE_HELP,
    )
    _add_tofile_arguments(parser)
    return parser


def _to_request(args: argparse.Namespace, relayed: bool) -> InvocationRequest:
    return InvocationRequest(
        startup_reference=Path(args.startupassembly),
        document_path=args.documenturi,
        output_path=Path(args.output),
        base_address=args.baseaddress,
        relayed=relayed,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Run the tool and return the process exit code."""
    args_list = list(sys.argv[1:] if argv is None else argv)
    configure_logging(settings.app)

    private_name = settings.relay.private_name(PUBLIC_COMMAND)
    if args_list and args_list[0] == private_name:
        request = _to_request(build_private_parser().parse_args(args_list[1:]), relayed=True)
        try:
            output = InMemoryExtractor(settings.dispatch).run(request)
        except ApiDumpError as e:
            return handle_error(e)
        print(f"Document successfully written to {output}")
        return 0

    request = _to_request(build_parser().parse_args(args_list), relayed=False)
    try:
        return RelayLauncher(settings.relay).run(request)
    except ApiDumpError as e:
        return handle_error(e)
