"""Count annotations in JSON-NLP files

One row per document, one column per kind of annotation.
"""

import sys

from tabulate import tabulate

from jsonnlp.codec import EncodingError, MalformedInput, read_file
from jsonnlp.schema import Document, Kind

NAME = 'count'

COLLECTIONS = [f for f in Document.FIELDS if f.kind is Kind.record_list]
"document fields we count the items of"


def config_argparser(parser):
    """
    Subcommand flags.

    You should create and pass in the subparser to which the flags
    are to be added.
    """
    parser.add_argument('inputs', metavar='FILE', nargs='+',
                        help='JSON-NLP file(s) to read')
    parser.set_defaults(func=main)


def count_rows(path, collection):
    """
    Table rows (filename, document id, then one count per collection)
    for each document in a JSON-NLP collection
    """
    return [[path, doc.id] + [len(getattr(doc, f.name)) for f in COLLECTIONS]
            for doc in collection.docs]


def main(args):
    """
    Subcommand main.

    You shouldn't need to call this yourself if you're using
    `config_argparser`
    """
    rows = []
    for path in args.inputs:
        try:
            rows.extend(count_rows(path, read_file(path)))
        except (MalformedInput, EncodingError, OSError) as err:
            sys.exit("%s: %s" % (path, err))
    headers = ['file', 'id'] + [f.wire for f in COLLECTIONS]
    print(tabulate(rows, headers=headers))
