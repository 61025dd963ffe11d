"""Compact JWT CLI."""
import argparse
import json
import logging
import sys
from typing import Any
from typing import Dict
from typing import List
from typing import Optional

import josepy as jose

from joseutils import b64
from joseutils import compact
from joseutils import constants


class CLI:
    """Compact JWT CLI."""

    @classmethod
    def encode(cls, args: argparse.Namespace) -> int:
        """Encode a JSON payload from stdin as an unsigned compact JWT."""
        header = dict(args.header)
        if args.zip:
            header[constants.HEADER_COMPRESSION] = constants.COMPRESSION_DEFLATE
        try:
            payload = json.loads(sys.stdin.read())
        except ValueError as error:
            print('Invalid JSON payload: {0}'.format(error))
            return 1

        print(compact.build_unsigned(header, payload).compact())
        return 0

    @classmethod
    def decode(cls, args: argparse.Namespace) -> int:  # pylint: disable=unused-argument
        """Decode a compact JWT from stdin."""
        try:
            data = compact.get_data(sys.stdin.read().strip())
        except jose.DeserializationError as error:
            print(error)
            return 1

        signature = None if data.signature is None else b64.encode(data.signature)
        print(json.dumps({
            'header': data.header,
            'payload': data.payload,
            'signature': signature,
        }, sort_keys=True, indent=4, separators=(',', ': ')))
        return 0

    @classmethod
    def _header_type(cls, arg: str) -> Dict[str, Any]:
        try:
            header = json.loads(arg)
        except ValueError as error:
            raise argparse.ArgumentTypeError('invalid JSON: {0}'.format(error))
        if not isinstance(header, dict):
            raise argparse.ArgumentTypeError('header must be a JSON object')
        return header

    @classmethod
    def run(cls, args: Optional[List[str]] = None) -> int:
        """Parse arguments and encode/decode."""
        parser = argparse.ArgumentParser(prog='joseutils')
        parser.add_argument('-v', '--verbose', action='count', default=0)

        subparsers = parser.add_subparsers(dest='command', required=True)
        parser_encode = subparsers.add_parser('encode')
        parser_encode.set_defaults(func=cls.encode)
        parser_encode.add_argument(
            '--header', type=cls._header_type, default={})
        parser_encode.add_argument('--zip', action='store_true')

        parser_decode = subparsers.add_parser('decode')
        parser_decode.set_defaults(func=cls.decode)

        parsed = parser.parse_args(args)
        logging.basicConfig(level=max(logging.DEBUG,
                                      logging.WARNING - 10 * parsed.verbose))
        return parsed.func(parsed)


def main(args: Optional[List[str]] = None) -> int:
    """Command line entry point."""
    return CLI.run(args)


if __name__ == '__main__':
    sys.exit(main())  # pragma: no cover
