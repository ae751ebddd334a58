# -*- coding: utf-8 -*-
#
# License: BSD3

"""
Tests for the jsonnlp-util subcommands
"""

import io
import json
import os
import shutil
import tempfile
import unittest
from unittest import mock

from jsonnlp.cmd import main
from jsonnlp.codec import read_file, render
from jsonnlp.schema import (Document, JsonNlp, Meta, Sentence, Token)


SAMPLE = JsonNlp(meta=Meta(author="tests"),
                 docs=[Document(id=1,
                                token_list=[Token(id=1, text="Hi",
                                                  lemma="hi"),
                                            Token(id=2, text="!",
                                                  lemma="!")],
                                sentences=[Sentence(id=1, tokens=[1, 2])]),
                       Document(id=2)])


class CmdTest(unittest.TestCase):
    "running the subcommands"

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.sample = os.path.join(self.tmpdir, 'sample.json')
        # deliberately non-canonical: shuffled keys, extra whitespace,
        # an empty string and an unknown key
        obj = json.loads(render(SAMPLE))
        obj["docs"][0]["tokenList"][0]["xpos"] = ""
        obj["docs"][0]["comment"] = "not part of the schema"
        with io.open(self.sample, 'w', encoding='utf-8') as fout:
            fout.write(json.dumps(obj, indent=3, sort_keys=True))

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def run_main(self, *argv):
        "stdout of a jsonnlp-util invocation"
        with mock.patch('sys.stdout', new_callable=io.StringIO) as out:
            main(list(argv))
        return out.getvalue()

    def test_normalize_stdout(self):
        "canonical form on stdout"
        out = self.run_main('normalize', self.sample)
        self.assertEqual(render(SAMPLE) + '\n', out)

    def test_normalize_output(self):
        "canonical form in a file"
        path = os.path.join(self.tmpdir, 'out.json')
        self.run_main('normalize', self.sample, '--output', path,
                      '--indent', '2')
        self.assertEqual(SAMPLE, read_file(path))
        with io.open(path, 'r', encoding='utf-8') as stream:
            self.assertEqual(render(SAMPLE, indent=2), stream.read())

    def test_normalize_malformed(self):
        "bad input is reported"
        path = os.path.join(self.tmpdir, 'bad.json')
        with io.open(path, 'w', encoding='utf-8') as fout:
            fout.write(u'{"docs": [{"tokenList": [{"id": 1}]}]}')
        with self.assertRaises(SystemExit) as cm:
            self.run_main('normalize', path)
        self.assertIn('docs[0].tokenList[0].text', str(cm.exception.code))

    def test_missing_file(self):
        "missing inputs are reported, not dumped as a traceback"
        path = os.path.join(self.tmpdir, 'nope.json')
        for cmd in ['normalize', 'count']:
            with self.assertRaises(SystemExit) as cm:
                self.run_main(cmd, path)
            self.assertIn('nope.json', str(cm.exception.code))

    def test_count(self):
        "one row per document"
        out = self.run_main('count', self.sample, self.sample)
        lines = out.strip().split('\n')
        # header, rule, then 2 docs for each of the 2 files
        self.assertEqual(6, len(lines))
        self.assertIn('tokenList', lines[0])
        self.assertIn('triples', lines[0])
        self.assertEqual(['sample.json', '1', '2', '0', '1'],
                         [os.path.basename(lines[2].split()[0])] +
                         lines[2].split()[1:5])

    def test_no_subcommand(self):
        "a subcommand is needed"
        with mock.patch('sys.stderr', new_callable=io.StringIO):
            with self.assertRaises(SystemExit):
                main([])
