# License: BSD3

"""
The JSON-NLP document model.

Every record here is an immutable `namedtuple` whose fields are described
by a table of `Field` descriptors (`Record.FIELDS`). The descriptors carry
the wire name of each field and what kind of value it holds; they are
all the codec in `jsonnlp.codec` needs to read and write a record, so
there is no per-field reading or writing code anywhere.

Records refer to each other by integer ids (a sentence lists the ids of
its tokens, a triple names the ids of its entities). These are plain
numbers: nothing here checks that they resolve. See `Document.lookup`
if you want to follow them.

You can build records with keyword arguments; any field you leave out
takes its zero value ::

    Token(id=1, text="Hi", lemma="hi").xpos_prob == 0.0
"""

# pylint: disable=too-few-public-methods

from collections import namedtuple
from enum import Enum

from frozendict import frozendict
from nltk.tree import Tree


class Kind(Enum):
    """
    What sort of value a field holds
    """
    string = 1
    integer = 2
    small_integer = 3
    float = 4
    boolean = 5
    id_list = 6
    record = 7
    record_list = 8


class Field(namedtuple("Field", "name wire kind required record")):
    """
    Description of a single record field

    :param name: attribute name on the Python side
    :param wire: key in the JSON object (defaults to `name`)
    :param kind: a `Kind`
    :param required: if True, parsing fails when the key is absent
    :param record: record class for `Kind.record` and `Kind.record_list`
    """
    def __new__(cls, name, kind, wire=None, required=False, record=None):
        return super(Field, cls).__new__(cls, name, wire or name, kind,
                                         required, record)

    @property
    def omit_when_empty(self):
        """
        True if the field is left out of the JSON when it is empty.
        Only string fields are; zeros, False and empty lists are
        always written out
        """
        return self.kind is Kind.string

    def zero(self):
        "Value the field takes when nobody says otherwise"
        if self.kind is Kind.string:
            return ''
        elif self.kind in (Kind.integer, Kind.small_integer):
            return 0
        elif self.kind is Kind.float:
            return 0.0
        elif self.kind is Kind.boolean:
            return False
        elif self.kind is Kind.record:
            return self.record()
        else:
            return ()

    def normalise(self, value):
        "Freeze sequence values so that records stay immutable"
        if self.kind in (Kind.id_list, Kind.record_list):
            return tuple(value)
        return value


def _record(typename, fields):
    """
    Base class for a record with the given fields: a namedtuple which
    can be built from keyword arguments, defaulting whatever is missing
    """
    fields = tuple(fields)
    base = namedtuple(typename, [f.name for f in fields])

    class _Record(base):
        __slots__ = ()

        FIELDS = fields
        "field descriptors, in the order they are written out"

        BY_WIRE = frozendict((f.wire, f) for f in fields)
        "field descriptors by JSON key"

        def __new__(cls, *args, **kwargs):
            if len(args) > len(fields):
                raise TypeError("%s takes at most %d fields (%d given)" %
                                (typename, len(fields), len(args)))
            given = dict(zip(base._fields, args))
            clashes = [k for k in kwargs if k in given]
            unknown = [k for k in kwargs if k not in base._fields]
            if clashes:
                raise TypeError("%s got field(s) %s twice" %
                                (typename, ", ".join(sorted(clashes))))
            if unknown:
                raise TypeError("%s has no field(s) %s" %
                                (typename, ", ".join(sorted(unknown))))
            given.update(kwargs)
            values = [f.normalise(given[f.name]) if f.name in given
                      else f.zero()
                      for f in fields]
            return base.__new__(cls, *values)

        def replace(self, **kwargs):
            """
            A copy of this record with some fields changed
            """
            values = self._asdict()
            values.update(kwargs)
            return type(self)(**values)

    return _Record


# ---------------------------------------------------------------------
# metadata
# ---------------------------------------------------------------------


class Meta(_record("Meta", [
        Field("conforms_to", Kind.string, wire="DC.conformsTo"),
        Field("author", Kind.string, wire="DC.author"),
        Field("created", Kind.string, wire="DC.created"),
        Field("date", Kind.string, wire="DC.date"),
        Field("source", Kind.string, wire="DC.source"),
        Field("language", Kind.string, wire="DC.language"),
        Field("creator", Kind.string, wire="DC.creator"),
        Field("publisher", Kind.string, wire="DC.publisher"),
        Field("title", Kind.string, wire="DC.title"),
        Field("description", Kind.string, wire="DC.description"),
        Field("identifier", Kind.string, wire="DC.identifier"),
])):
    """
    Dublin Core metadata, for the whole collection or a single document
    """
    __slots__ = ()


# ---------------------------------------------------------------------
# tokens
# ---------------------------------------------------------------------


class TokenFeatures(_record("TokenFeatures", [
        Field("overt", Kind.boolean),
        Field("stop", Kind.boolean),
        Field("alpha", Kind.boolean),
        Field("number", Kind.small_integer),
        Field("gender", Kind.string),
        Field("person", Kind.small_integer),
        Field("tense", Kind.string),
        Field("perfect", Kind.boolean),
        Field("continuous", Kind.boolean),
        Field("progressive", Kind.boolean),
        Field("case", Kind.string),
        Field("human", Kind.boolean),
        Field("animate", Kind.boolean),
        Field("negated", Kind.boolean),
        Field("countable", Kind.boolean),
        Field("factive", Kind.boolean),
        Field("counterfactive", Kind.boolean),
        Field("irregular", Kind.boolean),
        Field("phrasal_verb", Kind.boolean, wire="phrasalVerb"),
        Field("mood", Kind.string),
        Field("foreign", Kind.boolean),
        Field("space_after", Kind.boolean, wire="spaceAfter"),
])):
    """
    Morpho-syntactic, semantic and orthographic features of a token
    """
    __slots__ = ()


class Token(_record("Token", [
        Field("id", Kind.integer, required=True),
        Field("sentence_id", Kind.integer),
        Field("text", Kind.string, required=True),
        Field("lemma", Kind.string, required=True),
        Field("xpos", Kind.string),
        Field("xpos_prob", Kind.float),
        Field("upos", Kind.string),
        Field("upos_prob", Kind.float),
        Field("entity_iob", Kind.string),
        Field("char_offset_begin", Kind.integer,
              wire="characterOffsetBegin"),
        Field("char_offset_end", Kind.integer, wire="characterOffsetEnd"),
        Field("prop_id", Kind.string, wire="propID"),
        Field("prop_id_prob", Kind.float, wire="propIDProbability"),
        Field("frame_id", Kind.integer, wire="frameID"),
        Field("frame_id_prob", Kind.float, wire="frameIDProb"),
        Field("wordnet_id", Kind.integer, wire="wordNetID"),
        Field("wordnet_id_prob", Kind.float, wire="wordNetIDProb"),
        Field("verbnet_id", Kind.integer, wire="verbNetID"),
        Field("verbnet_id_prob", Kind.float, wire="verbNetIDProb"),
        Field("lang", Kind.string),
        Field("features", Kind.record, record=TokenFeatures),
        Field("shape", Kind.string),
        Field("entity", Kind.string),
])):
    """
    A single token.

    Everything else in a document points back at tokens by their `id`.
    Character offsets are relative to the document text, which JSON-NLP
    itself does not carry.
    """
    __slots__ = ()


# ---------------------------------------------------------------------
# sentences, clauses, paragraphs
# ---------------------------------------------------------------------


class Sentence(_record("Sentence", [
        Field("id", Kind.integer),
        Field("token_from", Kind.integer, wire="tokenFrom"),
        Field("token_to", Kind.integer, wire="tokenTo"),
        Field("tokens", Kind.id_list),
        Field("clauses", Kind.id_list),
        Field("type", Kind.string),
        Field("sentiment", Kind.string),
        Field("sentiment_prob", Kind.float, wire="sentimentProb"),
])):
    """
    A sentence: a token range, plus the ids of its tokens and clauses
    """
    __slots__ = ()


class Clause(_record("Clause", [
        Field("id", Kind.integer),
        Field("sentence_id", Kind.integer, wire="sentenceId"),
        Field("token_from", Kind.integer, wire="tokenFrom"),
        Field("token_to", Kind.integer, wire="tokenTo"),
        Field("tokens", Kind.id_list),
        Field("main", Kind.boolean),
        Field("gov", Kind.integer),
        Field("head", Kind.integer),
        Field("neg", Kind.boolean),
        Field("tense", Kind.string),
        Field("mood", Kind.string),
        Field("perfect", Kind.boolean),
        Field("continuous", Kind.boolean),
        Field("aspect", Kind.string),
        Field("voice", Kind.string),
        Field("sentiment", Kind.string),
        Field("sentiment_prob", Kind.float, wire="sentimentProb"),
])):
    """
    A clause within a sentence (a sentence has one or more of them).

    `gov` and `head` are token ids
    """
    __slots__ = ()


class Paragraph(_record("Paragraph", [
        Field("id", Kind.integer),
        Field("token_from", Kind.integer, wire="tokenFrom"),
        Field("token_to", Kind.integer, wire="tokenTo"),
        Field("tokens", Kind.id_list),
        Field("sentences", Kind.id_list),
])):
    "A paragraph, given as token and sentence ids"
    __slots__ = ()


# ---------------------------------------------------------------------
# dependencies
# ---------------------------------------------------------------------


class Dependency(_record("Dependency", [
        Field("lab", Kind.string, required=True),
        Field("gov", Kind.integer, required=True),
        Field("dep", Kind.integer, required=True),
        Field("prob", Kind.float),
])):
    """
    A labelled edge from a governor token to a dependent token,
    with an optional confidence score
    """
    __slots__ = ()


class DependencyTree(_record("DependencyTree", [
        Field("sentence_id", Kind.integer, wire="sentenceId"),
        Field("style", Kind.string),
        Field("dependencies", Kind.record_list, record=Dependency),
        Field("prob", Kind.float),
])):
    """
    All dependencies for one sentence in a given annotation style
    (eg. universal dependencies)
    """
    __slots__ = ()


# ---------------------------------------------------------------------
# coreference
# ---------------------------------------------------------------------


class CoreferenceRepresentative(_record("CoreferenceRepresentative", [
        Field("tokens", Kind.id_list),
        Field("head", Kind.integer),
])):
    "The representative mention of a coreference chain"
    __slots__ = ()


class CoreferenceReferent(_record("CoreferenceReferent", [
        Field("tokens", Kind.id_list),
        Field("head", Kind.integer),
        Field("prob", Kind.float),
])):
    "An expression referring back to the representative"
    __slots__ = ()


class Coreference(_record("Coreference", [
        Field("id", Kind.integer),
        Field("representative", Kind.record,
              record=CoreferenceRepresentative),
        Field("referents", Kind.record_list, record=CoreferenceReferent),
])):
    """
    A coreference chain: one representative and the expressions
    that refer to it
    """
    __slots__ = ()


# ---------------------------------------------------------------------
# constituency
# ---------------------------------------------------------------------


class Scope(_record("Scope", [
        Field("id", Kind.integer),
        Field("gov", Kind.id_list),
        Field("dep", Kind.id_list),
        Field("terminals", Kind.id_list),
])):
    """
    Scope relation between tokens or phrases of a sentence
    """
    __slots__ = ()


class ConstituentParse(_record("ConstituentParse", [
        Field("sentence_id", Kind.integer, wire="sentenceId"),
        Field("type", Kind.string),
        Field("labeled_bracketing", Kind.string, wire="labeledBracketing"),
        Field("prob", Kind.float),
        Field("scopes", Kind.record_list, record=Scope),
])):
    """
    Constituent parse of a sentence, kept in its labelled bracketing
    form, eg. `(S (NP (DT The) (NN dog)) (VP (VBZ barks)))`
    """
    __slots__ = ()

    def tree(self):
        """
        The labelled bracketing as an NLTK tree, or None if there is no
        bracketing.

        Raises ValueError if the bracketing is not well formed
        """
        if not self.labeled_bracketing:
            return None
        return Tree.fromstring(self.labeled_bracketing)


# ---------------------------------------------------------------------
# expressions, entities and relations
# ---------------------------------------------------------------------


class Expression(_record("Expression", [
        Field("id", Kind.integer),
        Field("type", Kind.string),
        Field("head", Kind.integer),
        Field("dependency", Kind.string),
        Field("token_from", Kind.integer, wire="tokenFrom"),
        Field("token_to", Kind.integer, wire="tokenTo"),
        Field("tokens", Kind.id_list),
        Field("prob", Kind.float),
])):
    "A chunk or phrase"
    __slots__ = ()


class Attribute(_record("Attribute", [
        Field("lab", Kind.string),
        Field("val", Kind.string),
])):
    """
    Label/value pair, for attribute value matrix (AVM) style
    properties on entities and relations
    """
    __slots__ = ()


class Entity(_record("Entity", [
        Field("id", Kind.integer),
        Field("label", Kind.string),
        Field("type", Kind.string),
        Field("url", Kind.string),
        Field("head", Kind.integer),
        Field("token_from", Kind.integer, wire="tokenFrom"),
        Field("token_to", Kind.integer, wire="tokenTo"),
        Field("tokens", Kind.id_list),
        Field("triple_id", Kind.integer, wire="tripleID"),
        Field("sentiment", Kind.string),
        Field("sentiment_prob", Kind.float, wire="sentimentProb"),
        Field("count", Kind.integer),
        Field("attributes", Kind.record_list, record=Attribute),
])):
    """
    An entity (named or otherwise); `count` is its number of mentions
    """
    __slots__ = ()


class Relation(_record("Relation", [
        Field("id", Kind.integer),
        Field("label", Kind.string),
        Field("type", Kind.string),
        Field("url", Kind.string),
        Field("head", Kind.integer),
        Field("token_from", Kind.integer, wire="tokenFrom"),
        Field("token_to", Kind.integer, wire="tokenTo"),
        Field("tokens", Kind.id_list),
        Field("sentiment", Kind.string),
        Field("sentiment_prob", Kind.float, wire="sentimentProb"),
        Field("count", Kind.integer),
        Field("attributes", Kind.record_list, record=Attribute),
])):
    """
    A relation in an entity, concept or knowledge graph
    """
    __slots__ = ()


class Triple(_record("Triple", [
        Field("id", Kind.integer),
        Field("from_entity", Kind.integer, wire="fromEntity"),
        Field("to_entity", Kind.integer, wire="toEntity"),
        Field("rel", Kind.integer),
        Field("clause_id", Kind.id_list, wire="clauseID"),
        Field("sentence_id", Kind.id_list, wire="sentenceID"),
        Field("directional", Kind.boolean),
        Field("event_id", Kind.integer, wire="eventID"),
        Field("temp_seq", Kind.integer, wire="tempSeq"),
        Field("prob", Kind.float),
        Field("syntactic", Kind.boolean),
        Field("implied", Kind.boolean),
        Field("presupposed", Kind.boolean),
        Field("count", Kind.integer),
])):
    """
    A knowledge graph edge (as in RDF or JSON-LD): `from_entity` and
    `to_entity` are entity ids, `rel` is a relation id.

    Note that unlike everywhere else, `sentence_id` is a list here
    """
    __slots__ = ()


# ---------------------------------------------------------------------
# documents
# ---------------------------------------------------------------------


class Document(_record("Document", [
        Field("meta", Kind.record, record=Meta),
        Field("id", Kind.integer),
        Field("token_list", Kind.record_list, wire="tokenList",
              record=Token),
        Field("clauses", Kind.record_list, record=Clause),
        Field("sentences", Kind.record_list, record=Sentence),
        Field("paragraphs", Kind.record_list, record=Paragraph),
        Field("dependency_trees", Kind.record_list, wire="dependencyTrees",
              record=DependencyTree),
        Field("coreferences", Kind.record_list, record=Coreference),
        Field("constituents", Kind.record_list, record=ConstituentParse),
        Field("expressions", Kind.record_list, record=Expression),
        Field("entities", Kind.record_list, record=Entity),
        Field("relations", Kind.record_list, record=Relation),
        Field("triples", Kind.record_list, record=Triple),
])):
    """
    All annotations for a single document
    """
    __slots__ = ()

    LOOKUP_COLLECTIONS = frozenset(["token_list",
                                    "clauses",
                                    "sentences",
                                    "paragraphs",
                                    "coreferences",
                                    "expressions",
                                    "entities",
                                    "relations",
                                    "triples"])
    "collections whose items have an `id`"

    def lookup(self, collection):
        """
        Map from id to item for one of the collections in
        `LOOKUP_COLLECTIONS`, eg. ::

            doc.lookup('token_list')[sentence.tokens[0]]

        If two items share an id, the later one wins. Ids that point
        nowhere are simply absent.
        """
        if collection not in self.LOOKUP_COLLECTIONS:
            raise ValueError("Can't look up items by id in %s" % collection)
        return frozendict((x.id, x) for x in getattr(self, collection))


class JsonNlp(_record("JsonNlp", [
        Field("meta", Kind.record, record=Meta),
        Field("docs", Kind.record_list, record=Document),
])):
    """
    A JSON-NLP collection: some metadata and a list of documents
    """
    __slots__ = ()
