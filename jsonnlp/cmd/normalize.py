"""Rewrite a JSON-NLP file in canonical form

Fields come out in schema order, empty strings are dropped and missing
fields are filled in with their defaults. Unknown keys are lost.
"""

import logging
import sys

from jsonnlp.codec import (EncodingError, MalformedInput,
                           read_file, render, write_file)

NAME = 'normalize'

_LOG = logging.getLogger(__name__)


def config_argparser(parser):
    """
    Subcommand flags.

    You should create and pass in the subparser to which the flags
    are to be added.
    """
    parser.add_argument('input', metavar='FILE',
                        help='JSON-NLP file to read')
    parser.add_argument('--output', '-o', metavar='FILE',
                        help='write here instead of stdout')
    parser.add_argument('--indent', type=int, default=None,
                        help='pretty print with this many spaces')
    parser.set_defaults(func=main)


def main(args):
    """
    Subcommand main.

    You shouldn't need to call this yourself if you're using
    `config_argparser`
    """
    try:
        doc = read_file(args.input)
        if args.output:
            write_file(doc, args.output, indent=args.indent)
            _LOG.info("wrote %s", args.output)
        else:
            print(render(doc, indent=args.indent))
    except (MalformedInput, EncodingError, OSError) as err:
        sys.exit("%s: %s" % (args.input, err))
