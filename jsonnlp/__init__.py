"""
The jsonnlp library reads and writes JSON-NLP_, an interchange format
for detailed natural language processing annotations of text (tokens,
sentences, clauses, dependency and constituent parses, coreference,
entities, relations and knowledge graph triples).

It has two layers:

* the document model (`jsonnlp.schema`): immutable records, one per
  kind of annotation, each described by a table of field descriptors
  giving its JSON key and the sort of value it holds

* the codec (`jsonnlp.codec`): a generic reader and writer driven by
  those tables; `parse`/`read_file` to get a `JsonNlp` from JSON text,
  `render`/`write_file` to go back

There is also a small command line tool, `jsonnlp-util`, for
normalising and summarising JSON-NLP files (`jsonnlp.cmd`).

Annotations refer to each other by integer ids. We keep them as ids:
nothing is resolved or checked when reading, but see
`Document.lookup`.

.. _JSON-NLP: https://github.com/SemiringInc/JSON-NLP
"""

from .codec import (JsonNlpException, MalformedInput, EncodingError,
                    parse, parse_from_source, read_file,
                    render, dump, write_file)
from .schema import (Kind, Field,
                     Meta, TokenFeatures, Token,
                     Sentence, Clause, Paragraph,
                     Dependency, DependencyTree,
                     CoreferenceRepresentative, CoreferenceReferent,
                     Coreference,
                     Scope, ConstituentParse,
                     Expression, Attribute, Entity, Relation, Triple,
                     Document, JsonNlp)

__all__ = ['JsonNlpException', 'MalformedInput', 'EncodingError',
           'parse', 'parse_from_source', 'read_file',
           'render', 'dump', 'write_file',
           'Kind', 'Field',
           'Meta', 'TokenFeatures', 'Token',
           'Sentence', 'Clause', 'Paragraph',
           'Dependency', 'DependencyTree',
           'CoreferenceRepresentative', 'CoreferenceReferent',
           'Coreference',
           'Scope', 'ConstituentParse',
           'Expression', 'Attribute', 'Entity', 'Relation', 'Triple',
           'Document', 'JsonNlp']
