# -*- coding: utf-8 -*-
#
# License: BSD3
# pylint: disable=too-many-public-methods, invalid-name

"""
Tests for jsonnlp
"""

import io
import json
import os
import shutil
import tempfile
import unittest

from jsonnlp.codec import (MalformedInput, EncodingError,
                           parse, parse_from_source, read_file,
                           render, dump, write_file)
from jsonnlp.schema import (Kind, Meta, TokenFeatures, Token,
                            Sentence, Clause, Paragraph,
                            Dependency, DependencyTree,
                            CoreferenceRepresentative, CoreferenceReferent,
                            Coreference, Scope, ConstituentParse,
                            Expression, Attribute, Entity, Relation, Triple,
                            Document, JsonNlp)


def mk_token(tid, text, **kwargs):
    "token with its lemma set to the lowercased text"
    return Token(id=tid, sentence_id=1, text=text, lemma=text.lower(),
                 **kwargs)


def wrap_doc(**kwargs):
    "JSON text for a collection with a single document"
    doc = {"meta": {}, "id": 1}
    doc.update(kwargs)
    return json.dumps({"meta": {}, "docs": [doc]})


def wrap_tokens(*tokens):
    "JSON text for a collection with a single document with the tokens"
    return wrap_doc(tokenList=list(tokens))


# this is meant to exercise every record type and most of the fields;
# all strings are non-empty so that it survives a round trip unchanged
FULL_DOC = JsonNlp(
    meta=Meta(conforms_to="0.0.4",
              author="tests",
              created="2021-01-01",
              date="2021-01-02",
              source="unit tests",
              language="en",
              creator="jsonnlp",
              publisher="nobody",
              title="full document",
              description="every record type",
              identifier="doc-0"),
    docs=[Document(
        meta=Meta(title="first"),
        id=7,
        token_list=[
            mk_token(1, "The", xpos="DT", xpos_prob=0.9, upos="DET",
                     char_offset_begin=0, char_offset_end=3,
                     features=TokenFeatures(overt=True, stop=True,
                                            alpha=True)),
            mk_token(2, "dogs", xpos="NNS", upos="NOUN", entity_iob="O",
                     char_offset_begin=4, char_offset_end=8,
                     wordnet_id=2084071, wordnet_id_prob=0.75,
                     lang="en", shape="xxxx", entity="ANIMAL",
                     features=TokenFeatures(number=2, gender="n",
                                            person=3, case="nom",
                                            animate=True, countable=True,
                                            space_after=True)),
            mk_token(3, "barked", xpos="VBD", upos="VERB",
                     prop_id="bark.01", prop_id_prob=0.5,
                     frame_id=12, frame_id_prob=0.25,
                     verbnet_id=38, verbnet_id_prob=0.125,
                     features=TokenFeatures(tense="past", mood="ind",
                                            perfect=False,
                                            phrasal_verb=False,
                                            irregular=True)),
        ],
        clauses=[Clause(id=1, sentence_id=1, token_from=1, token_to=3,
                        tokens=[1, 2, 3], main=True, gov=3, head=3,
                        neg=False, tense="past", mood="ind",
                        aspect="simple", voice="active",
                        sentiment="neutral", sentiment_prob=0.6)],
        sentences=[Sentence(id=1, token_from=1, token_to=3,
                            tokens=[1, 2, 3], clauses=[1],
                            type="declarative", sentiment="neutral",
                            sentiment_prob=0.6)],
        paragraphs=[Paragraph(id=1, token_from=1, token_to=3,
                              tokens=[1, 2, 3], sentences=[1])],
        dependency_trees=[DependencyTree(
            sentence_id=1, style="universal", prob=0.8,
            dependencies=[Dependency(lab="det", gov=2, dep=1, prob=0.9),
                          Dependency(lab="nsubj", gov=3, dep=2),
                          Dependency(lab="root", gov=0, dep=3)])],
        coreferences=[Coreference(
            id=1,
            representative=CoreferenceRepresentative(tokens=[1, 2],
                                                     head=2),
            referents=[CoreferenceReferent(tokens=[2], head=2,
                                           prob=0.3)])],
        constituents=[ConstituentParse(
            sentence_id=1, type="PTB",
            labeled_bracketing="(S (NP (DT The) (NNS dogs)) "
                               "(VP (VBD barked)))",
            prob=0.7,
            scopes=[Scope(id=1, gov=[3], dep=[1, 2], terminals=[1, 2, 3])])],
        expressions=[Expression(id=1, type="NP", head=2,
                                dependency="nsubj", token_from=1,
                                token_to=2, tokens=[1, 2], prob=0.95)],
        entities=[Entity(id=1, label="dogs", type="ANIMAL",
                         url="http://example.org/dog", head=2,
                         token_from=2, token_to=2, tokens=[2],
                         triple_id=1, sentiment="neutral",
                         sentiment_prob=0.5, count=1,
                         attributes=[Attribute(lab="plural", val="yes")])],
        relations=[Relation(id=1, label="bark", type="EVENT",
                            url="http://example.org/bark", head=3,
                            token_from=3, token_to=3, tokens=[3],
                            sentiment="negative", sentiment_prob=0.2,
                            count=1,
                            attributes=[Attribute(lab="tense",
                                                  val="past")])],
        triples=[Triple(id=1, from_entity=1, to_entity=1, rel=1,
                        clause_id=[1], sentence_id=[1], directional=True,
                        event_id=4, temp_seq=1, prob=0.6, syntactic=True,
                        implied=False, presupposed=False, count=1)],
    )])


# ---------------------------------------------------------------------
# model
# ---------------------------------------------------------------------


class ModelTest(unittest.TestCase):
    "building records by hand"

    def test_defaults(self):
        "omitted fields take their zero value"
        tok = Token(id=1, text="Hi", lemma="hi")
        self.assertEqual(0, tok.sentence_id)
        self.assertEqual("", tok.xpos)
        self.assertEqual(0.0, tok.xpos_prob)
        self.assertEqual(TokenFeatures(), tok.features)
        self.assertFalse(tok.features.overt)
        self.assertEqual((), Document().token_list)
        self.assertEqual(Meta(), JsonNlp().meta)

    def test_sequences_frozen(self):
        "lists become tuples"
        sent = Sentence(id=1, tokens=[1, 2, 3])
        self.assertEqual((1, 2, 3), sent.tokens)
        doc = Document(token_list=[Token(id=1, text="a", lemma="a")])
        self.assertIsInstance(doc.token_list, tuple)

    def test_immutable(self):
        "records can't be modified in place"
        tok = Token(id=1, text="Hi", lemma="hi")
        with self.assertRaises(AttributeError):
            tok.text = "Bye"
        with self.assertRaises(AttributeError):
            tok.extra = 1

    def test_unknown_field(self):
        "typos in field names are caught"
        with self.assertRaises(TypeError):
            Token(id=1, txt="Hi")

    def test_positional(self):
        "fields can also be given in declared order"
        self.assertEqual(Attribute(lab="a", val="b"), Attribute("a", "b"))
        with self.assertRaises(TypeError):
            Attribute("a", "b", "c")
        with self.assertRaises(TypeError):
            Attribute("a", lab="b")

    def test_replace(self):
        "replace builds a modified copy"
        sent = Sentence(id=1, tokens=[1])
        sent2 = sent.replace(tokens=[1, 2])
        self.assertEqual((1,), sent.tokens)
        self.assertEqual((1, 2), sent2.tokens)
        self.assertEqual(1, sent2.id)

    def test_omittable_fields(self):
        "only string fields are ever left out"
        for cls in [Meta, TokenFeatures, Token, Clause, Triple, Document]:
            for field in cls.FIELDS:
                self.assertEqual(field.kind is Kind.string,
                                 field.omit_when_empty)

    def test_lookup(self):
        "looking up annotations by id"
        doc = FULL_DOC.docs[0]
        tokens = doc.lookup('token_list')
        sentence = doc.sentences[0]
        self.assertEqual(["The", "dogs", "barked"],
                         [tokens[i].text for i in sentence.tokens])
        self.assertNotIn(42, tokens)
        self.assertEqual("bark", doc.lookup('relations')[1].label)
        with self.assertRaises(ValueError):
            doc.lookup('dependency_trees')

    def test_lookup_duplicates(self):
        "later items win"
        doc = Document(entities=[Entity(id=1, label="a"),
                                 Entity(id=1, label="b")])
        self.assertEqual("b", doc.lookup('entities')[1].label)

    def test_tree(self):
        "constituent parses as NLTK trees"
        tree = FULL_DOC.docs[0].constituents[0].tree()
        self.assertEqual("S", tree.label())
        self.assertEqual(["The", "dogs", "barked"], tree.leaves())
        self.assertIsNone(ConstituentParse().tree())


# ---------------------------------------------------------------------
# writing
# ---------------------------------------------------------------------


class RenderTest(unittest.TestCase):
    "JSON output"

    def test_empty(self):
        "compact output"
        self.assertEqual('{"meta":{},"docs":[]}', render(JsonNlp()))

    def test_indent(self):
        "pretty printing"
        txt = render(JsonNlp(), indent=2)
        self.assertEqual('{\n  "meta": {},\n  "docs": []\n}', txt)

    def test_dublin_core_names(self):
        "metadata keys are Dublin Core terms"
        obj = json.loads(render(Meta(author="X", conforms_to="0.4")))
        self.assertEqual({"DC.author": "X", "DC.conformsTo": "0.4"}, obj)

    def test_acronym_names(self):
        "keys keep their acronyms"
        tok = Token(id=1, text="a", lemma="a", prop_id="a.01",
                    prop_id_prob=0.5, wordnet_id_prob=0.25)
        obj = json.loads(render(tok))
        self.assertEqual("a.01", obj["propID"])
        self.assertEqual(0.5, obj["propIDProbability"])
        self.assertEqual(0.25, obj["wordNetIDProb"])
        self.assertIn("characterOffsetBegin", obj)
        self.assertIn("phrasalVerb", obj["features"])
        self.assertIn("spaceAfter", obj["features"])
        self.assertIn("sentence_id", obj)
        obj = json.loads(render(Clause()))
        self.assertIn("sentenceId", obj)
        obj = json.loads(render(Triple()))
        self.assertIn("sentenceID", obj)
        self.assertIn("clauseID", obj)

    def test_omit_empty_strings(self):
        "empty strings are left out, others are not"
        tok = Token(id=1, text="Hi", lemma="hi", upos="INTJ")
        obj = json.loads(render(tok))
        for key in ["xpos", "entity_iob", "propID", "lang", "shape",
                    "entity"]:
            self.assertNotIn(key, obj)
        self.assertEqual("INTJ", obj["upos"])
        for key in ["gender", "tense", "case", "mood"]:
            self.assertNotIn(key, obj["features"])

    def test_keep_zeros(self):
        "zeros, False and empty lists are always written"
        obj = json.loads(render(Token(id=0, text="a", lemma="a")))
        self.assertEqual(0, obj["id"])
        self.assertEqual(0.0, obj["xpos_prob"])
        self.assertEqual(0, obj["frameID"])
        self.assertIs(False, obj["features"]["overt"])
        self.assertEqual(0, obj["features"]["number"])
        obj = json.loads(render(Sentence()))
        self.assertEqual([], obj["tokens"])
        self.assertEqual([], obj["clauses"])
        obj = json.loads(render(Document()))
        self.assertEqual({}, obj["meta"])
        for key in ["tokenList", "clauses", "sentences", "paragraphs",
                    "dependencyTrees", "coreferences", "constituents",
                    "expressions", "entities", "relations", "triples"]:
            self.assertEqual([], obj[key])

    def test_empty_text_omitted(self):
        "even required strings are left out when empty"
        obj = json.loads(render(Token(id=1)))
        self.assertNotIn("text", obj)
        self.assertNotIn("lemma", obj)

    def test_field_order(self):
        "keys come out in declared order"
        obj = json.loads(render(FULL_DOC))
        self.assertEqual(["meta", "docs"], list(obj))
        doc = obj["docs"][0]
        self.assertEqual([f.wire for f in Document.FIELDS], list(doc))
        # the second token has no propID or entity: these are left
        # out, but the rest keep their order
        tok = doc["tokenList"][1]
        self.assertNotIn("propID", tok)
        self.assertEqual([f.wire for f in Token.FIELDS if f.wire in tok],
                         list(tok))
        tok = doc["tokenList"][2]
        self.assertEqual([f.wire for f in Token.FIELDS if f.wire in tok],
                         list(tok))
        self.assertEqual(render(FULL_DOC), render(FULL_DOC))

    def test_float_fields(self):
        "probabilities are written as floats"
        txt = render(Dependency(lab="root", gov=0, dep=1, prob=1))
        self.assertEqual('{"lab":"root","gov":0,"dep":1,"prob":1.0}', txt)

    def test_non_ascii(self):
        "non-ASCII text is written as is"
        txt = render(Token(id=1, text=u"café", lemma=u"café"))
        self.assertIn(u'"text":"café"', txt)

    def test_bad_surrogates(self):
        "strings that are not valid unicode"
        tok = Token(id=1, text=u"\ud800", lemma="x")
        with self.assertRaises(EncodingError):
            render(JsonNlp(docs=[Document(token_list=[tok])]))

    def test_nan(self):
        "NaN has no JSON representation"
        dep = Dependency(lab="root", gov=0, dep=1, prob=float('nan'))
        with self.assertRaises(EncodingError):
            render(DependencyTree(dependencies=[dep]))
        with self.assertRaises(EncodingError):
            render(Token(id=1, text="a", lemma="a",
                         upos_prob=float('inf')))

    def test_dump(self):
        "writing to a stream"
        stream = io.StringIO()
        dump(FULL_DOC, stream)
        self.assertEqual(render(FULL_DOC), stream.getvalue())


# ---------------------------------------------------------------------
# reading
# ---------------------------------------------------------------------


class ParseTest(unittest.TestCase):
    "JSON input"

    def test_scenario(self):
        "small document from start to finish"
        txt = ('{"meta":{},"docs":[{"meta":{},"id":1,"tokenList":'
               '[{"id":1,"sentence_id":1,"text":"Hi","lemma":"hi",'
               '"features":{}}]}]}')
        res = parse(txt)
        self.assertEqual(1, len(res.docs))
        doc = res.docs[0]
        self.assertEqual(1, doc.id)
        self.assertEqual(1, len(doc.token_list))
        tok = doc.token_list[0]
        self.assertEqual("Hi", tok.text)
        self.assertEqual(0.0, tok.xpos_prob)
        self.assertEqual("", tok.xpos)
        self.assertNotIn('"xpos"', render(res))
        self.assertIn('"xpos_prob":0.0', render(res))

    def test_bytes(self):
        "UTF-8 bytes are fine too"
        txt = wrap_tokens({"id": 1, "text": u"été", "lemma": u"été"})
        res = parse(txt.encode('utf-8'))
        self.assertEqual(u"été", res.docs[0].token_list[0].text)

    def test_defaults(self):
        "missing fields take their zero value"
        res = parse(wrap_doc(sentences=[{}], clauses=[{"id": 2}],
                             triples=[{}], coreferences=[{}]))
        doc = res.docs[0]
        self.assertEqual(Sentence(), doc.sentences[0])
        self.assertEqual(Clause(id=2), doc.clauses[0])
        self.assertEqual((), doc.triples[0].clause_id)
        self.assertIs(False, doc.triples[0].directional)
        self.assertEqual(CoreferenceRepresentative(),
                         doc.coreferences[0].representative)
        self.assertEqual((), doc.entities)

    def test_defaults_token(self):
        "a token needs little more than its text"
        res = parse(wrap_tokens({"id": 3, "text": "a", "lemma": "a"}))
        self.assertEqual(Token(id=3, text="a", lemma="a"),
                         res.docs[0].token_list[0])

    def test_defaults_top(self):
        "even the top level keys can be left out"
        self.assertEqual(JsonNlp(), parse('{}'))
        self.assertEqual(Document(), parse('{"docs": [{}]}').docs[0])

    def test_required_token(self):
        "tokens must have an id, text, and lemma"
        complete = {"id": 1, "text": "a", "lemma": "a"}
        for key in complete:
            tok = dict(complete)
            del tok[key]
            with self.assertRaises(MalformedInput):
                parse(wrap_tokens(tok))

    def test_required_dependency(self):
        "dependencies must have a label, governor, and dependent"
        complete = {"lab": "det", "gov": 2, "dep": 1}
        for key in complete:
            dep = dict(complete)
            del dep[key]
            txt = wrap_doc(dependencyTrees=[{"dependencies": [dep]}])
            with self.assertRaises(MalformedInput):
                parse(txt)
        txt = wrap_doc(dependencyTrees=[{"dependencies": [complete]}])
        dtree = parse(txt).docs[0].dependency_trees[0]
        self.assertEqual(Dependency(lab="det", gov=2, dep=1),
                         dtree.dependencies[0])

    def test_error_path(self):
        "errors say where the problem is"
        txt = wrap_tokens({"id": 1, "text": "a", "lemma": "a"},
                          {"id": 2, "text": "b"})
        with self.assertRaises(MalformedInput) as cm:
            parse(txt)
        self.assertIn("docs[0].tokenList[1].lemma", str(cm.exception))

    def test_not_json(self):
        "syntax errors"
        for txt in ['', '{', '{"meta":}', 'null x']:
            with self.assertRaises(MalformedInput):
                parse(txt)

    def test_huge_literals(self):
        "integer literals too long to read"
        with self.assertRaises(MalformedInput):
            parse('{"docs":[{"id":' + '9' * 5000 + '}]}')

    def test_deep_nesting(self):
        "nesting too deep to read, even under an unknown key"
        depth = 100000
        with self.assertRaises(MalformedInput):
            parse('{"misc":' + '[' * depth + ']' * depth + '}')

    def test_lone_surrogates(self):
        "escapes that don't make a valid string"
        for txt in ['{"meta":{"DC.author":"\\ud800"}}',
                    wrap_tokens({"id": 1, "text": u"\udc80", "lemma": "a"})]:
            with self.assertRaises(MalformedInput):
                parse(txt)
        # a proper surrogate pair is fine
        res = parse('{"meta":{"DC.author":"\\ud83d\\ude00"}}')
        self.assertEqual(u"\U0001F600", res.meta.author)
        self.assertIn(u"\U0001F600", render(res))

    def test_duplicate_keys(self):
        "a field given twice"
        with self.assertRaises(MalformedInput) as cm:
            parse('{"docs":[{"id":1,"id":2}]}')
        self.assertIn("docs[0]", str(cm.exception))
        with self.assertRaises(MalformedInput):
            parse(wrap_doc(sentences=[{"tokens": [1]}]).replace(
                '"tokens": [1]', '"tokens": [1], "tokens": [2]'))
        # repeated unknown keys are skipped like any other unknown key
        res = parse('{"docs":[{"id":1,"x":1,"x":2}]}')
        self.assertEqual(Document(id=1), res.docs[0])

    def test_not_utf8(self):
        "undecodable bytes"
        with self.assertRaises(MalformedInput):
            parse(b'{"meta": {"DC.author": "\xff"}}')

    def test_not_an_object(self):
        "objects where objects are expected"
        for txt in ['[]', '3', '"x"', 'null', '{"meta": []}',
                    '{"docs": {}}', '{"docs": [3]}']:
            with self.assertRaises(MalformedInput):
                parse(txt)

    def test_no_coercion(self):
        "values of the wrong type are errors"
        bad_tokens = [
            {"id": "1", "text": "a", "lemma": "a"},
            {"id": True, "text": "a", "lemma": "a"},
            {"id": 1.5, "text": "a", "lemma": "a"},
            {"id": 1.0, "text": "a", "lemma": "a"},
            {"id": 1, "text": 3, "lemma": "a"},
            {"id": 1, "text": "a", "lemma": None},
            {"id": 1, "text": "a", "lemma": "a", "xpos": None},
            {"id": 1, "text": "a", "lemma": "a", "xpos_prob": "0.5"},
            {"id": 1, "text": "a", "lemma": "a", "xpos_prob": False},
            {"id": 1, "text": "a", "lemma": "a", "features": []},
            {"id": 1, "text": "a", "lemma": "a",
             "features": {"overt": 1}},
            {"id": 1, "text": "a", "lemma": "a",
             "features": {"gender": False}},
        ]
        for tok in bad_tokens:
            with self.assertRaises(MalformedInput):
                parse(wrap_tokens(tok))
        bad_sents = [{"tokens": 1}, {"tokens": ["1"]}, {"tokens": [None]},
                     {"tokens": [-1]}]
        for sent in bad_sents:
            with self.assertRaises(MalformedInput):
                parse(wrap_doc(sentences=[sent]))

    def test_integer_ranges(self):
        "ids are unsigned 64 bit, some features unsigned 8 bit"
        self.assertEqual(2 ** 64 - 1,
                         parse(wrap_doc(id=2 ** 64 - 1)).docs[0].id)
        for bad in [-1, 2 ** 64]:
            with self.assertRaises(MalformedInput):
                parse(wrap_doc(id=bad))
        tok = {"id": 1, "text": "a", "lemma": "a",
               "features": {"number": 255}}
        feats = parse(wrap_tokens(tok)).docs[0].token_list[0].features
        self.assertEqual(255, feats.number)
        tok["features"] = {"person": 256}
        with self.assertRaises(MalformedInput):
            parse(wrap_tokens(tok))

    def test_floats(self):
        "integers are fine as floats, but not NaN or infinities"
        tok = {"id": 1, "text": "a", "lemma": "a", "xpos_prob": 1}
        res = parse(wrap_tokens(tok))
        self.assertEqual(1.0, res.docs[0].token_list[0].xpos_prob)
        self.assertIsInstance(res.docs[0].token_list[0].xpos_prob, float)
        for bad in ['NaN', 'Infinity', '-Infinity', '1e400']:
            txt = ('{"docs":[{"tokenList":[{"id":1,"text":"a","lemma":"a",'
                   '"xpos_prob":%s}]}]}' % bad)
            with self.assertRaises(MalformedInput):
                parse(txt)

    def test_unknown_keys(self):
        "unknown keys are skipped"
        tok = {"id": 1, "text": "a", "lemma": "a", "misc": {"x": [1]}}
        with self.assertLogs('jsonnlp.codec', level='DEBUG') as cm:
            res = parse(wrap_doc(tokenList=[tok], version="0.5"))
        self.assertEqual(Token(id=1, text="a", lemma="a"),
                         res.docs[0].token_list[0])
        self.assertTrue(any("misc" in x for x in cm.output))
        self.assertTrue(any("version" in x for x in cm.output))

    def test_full(self):
        "every record type"
        doc = parse(render(FULL_DOC)).docs[0]
        self.assertEqual(2, doc.token_list[1].features.number)
        self.assertEqual("bark.01", doc.token_list[2].prop_id)
        self.assertEqual(0.125, doc.token_list[2].verbnet_id_prob)
        self.assertEqual((1, 2, 3), doc.constituents[0].scopes[0].terminals)
        self.assertEqual("plural", doc.entities[0].attributes[0].lab)
        self.assertEqual((1,), doc.triples[0].sentence_id)
        self.assertIs(True, doc.triples[0].directional)


# ---------------------------------------------------------------------
# round trips
# ---------------------------------------------------------------------


class RoundTripTest(unittest.TestCase):
    "reading back what we write"

    def test_model(self):
        "parse . render is the identity"
        self.assertEqual(FULL_DOC, parse(render(FULL_DOC)))
        self.assertEqual(FULL_DOC, parse(render(FULL_DOC, indent=4)))

    def test_text(self):
        "render . parse is the identity on canonical text"
        txt = render(FULL_DOC)
        self.assertEqual(txt, render(parse(txt)))

    def test_canonical(self):
        "reading and writing fills in defaults and drops empty strings"
        txt = wrap_tokens({"lemma": "hi", "text": "Hi", "id": 1,
                           "xpos": ""})
        obj = json.loads(render(parse(txt)))
        tok = obj["docs"][0]["tokenList"][0]
        self.assertNotIn("xpos", tok)
        self.assertEqual(0, tok["sentence_id"])
        self.assertEqual(["id", "sentence_id", "text", "lemma"],
                         list(tok)[:4])


# ---------------------------------------------------------------------
# streams and files
# ---------------------------------------------------------------------


class _FailingStream(io.BytesIO):
    "a stream that breaks when you read it"
    def read(self, *args):
        raise IOError("disk on fire")


class SourceTest(unittest.TestCase):
    "reading from streams and files"

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def test_stream(self):
        "the stream is read and closed"
        stream = io.BytesIO(render(FULL_DOC).encode('utf-8'))
        self.assertEqual(FULL_DOC, parse_from_source(stream))
        self.assertTrue(stream.closed)

    def test_text_stream(self):
        "text streams work too"
        stream = io.StringIO(render(FULL_DOC))
        self.assertEqual(FULL_DOC, parse_from_source(stream))
        self.assertTrue(stream.closed)

    def test_stream_malformed(self):
        "the stream is closed even if parsing fails"
        stream = io.BytesIO(b'{"docs": [{"tokenList": [{}]}]}')
        with self.assertRaises(MalformedInput):
            parse_from_source(stream)
        self.assertTrue(stream.closed)

    def test_text_stream_not_utf8(self):
        "text streams that can't be decoded"
        raw = io.BytesIO(b'{"meta":{"DC.author":"\xff"}}')
        stream = io.TextIOWrapper(raw, encoding='utf-8')
        with self.assertRaises(MalformedInput):
            parse_from_source(stream)
        self.assertTrue(stream.closed)

    def test_stream_broken(self):
        "read errors are passed on as is"
        stream = _FailingStream(b'{}')
        with self.assertRaises(IOError):
            parse_from_source(stream)
        self.assertTrue(stream.closed)

    def test_file(self):
        "writing then reading a file"
        path = os.path.join(self.tmpdir, 'doc.json')
        write_file(FULL_DOC, path)
        self.assertEqual(FULL_DOC, read_file(path))
        with io.open(path, 'r', encoding='utf-8') as stream:
            self.assertEqual(render(FULL_DOC), stream.read())

    def test_file_missing(self):
        "missing files"
        with self.assertRaises(IOError):
            read_file(os.path.join(self.tmpdir, 'nope.json'))

    def test_write_unrenderable(self):
        "nothing is written if we can't render"
        path = os.path.join(self.tmpdir, 'bad.json')
        bad = Meta(title=u"\udc80")
        with self.assertRaises(EncodingError):
            write_file(JsonNlp(meta=bad), path)
        self.assertFalse(os.path.exists(path))
