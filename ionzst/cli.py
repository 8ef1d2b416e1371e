"""Command line interface: ``ionzst -f bucket/path.ion.zst -e endpoint``."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .api import convert
from .config import DEFAULT_CHUNK_SIZE, ConvertConfig, ObjectLocation
from .errors import ConfigurationError, IonZstError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ionzst",
        description="Dump a remote .ion.zst object as Ion text on standard output.",
    )
    parser.add_argument(
        "-f", "--file", required=True, metavar="BUCKET/PATH", help="bucket/path-to-object"
    )
    parser.add_argument(
        "-e", "--endpoint", required=True, metavar="HOST", help="S3 endpoint hostname"
    )
    parser.add_argument(
        "--profile", help="profile in ~/.aws/credentials (default profile if omitted)"
    )
    parser.add_argument(
        "--insecure", action="store_true", help="talk plain HTTP to the endpoint"
    )
    parser.add_argument(
        "--indent", help="pretty-print values with this indentation string"
    )
    parser.add_argument(
        "--chunk-size", type=int, default=DEFAULT_CHUNK_SIZE, help=argparse.SUPPRESS
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="log progress to stderr"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = ConvertConfig(
            location=ObjectLocation.parse(args.file),
            endpoint=args.endpoint,
            secure=not args.insecure,
            profile=args.profile,
            chunk_size=args.chunk_size,
            indent=args.indent,
        )
    except ConfigurationError as e:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: {e}", file=sys.stderr)
        return 1

    try:
        convert(config, sys.stdout.buffer)
    except (IonZstError, OSError) as e:
        logger.debug("Conversion failed", exc_info=True)
        print(f"{parser.prog}: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
