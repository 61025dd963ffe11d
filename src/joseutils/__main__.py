"""Runs the joseutils CLI."""
import sys

from joseutils import cli

if __name__ == '__main__':
    sys.exit(cli.main())
