"""
jsonnlp-util subcommands
"""

# License: BSD3

import argparse
import logging

from jsonnlp.util import add_subcommand
from . import (count,
               normalize)

SUBCOMMANDS = [normalize,
               count]


def main(argv=None):
    """
    Entry point for the `jsonnlp-util` script

    :param argv: command line arguments (defaults to `sys.argv[1:]`)
    """
    parser = argparse.ArgumentParser(
        description="Inspect and normalise JSON-NLP files")
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='show debugging messages')
    subparsers = parser.add_subparsers(dest='subcommand',
                                       help='sub-command help')
    subparsers.required = True
    for module in SUBCOMMANDS:
        subparser = add_subcommand(subparsers, module)
        module.config_argparser(subparser)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s - %(levelname)s - %(message)s")
    args.func(args)
