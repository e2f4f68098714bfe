"""
Tests for the Rubifier facade and the command line script.
"""

import json
import sys

import pytest

import rubify
from rubifier import AnnotatedSegment, PlainSegment, Rubifier, RubifierSettings
from rubifier.dictionary import MalformedInputError


@pytest.fixture
def dictionary_file(tmp_path, payload):
    path = tmp_path / 'kanji.json'
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding='utf-8')
    return path


class TestRubifier:

    def test_annotate_text(self, payload):
        rubifier = Rubifier()
        rubifier.load_dictionary_data(payload)
        result = rubifier.annotate_text('私は完璧です')
        assert result.segments == (
            PlainSegment('私は', 0),
            AnnotatedSegment('完璧', 'カンペキ', 2),
            PlainSegment('です', 4),
        )
        assert rubifier.annotate_text('犬', require_change=True) is None

    def test_settings_load_dictionaries(self, dictionary_file):
        rubifier = Rubifier({'dictionaries': [str(dictionary_file)]})
        assert rubifier.dictionary.is_member('完')

    def test_settings_format_is_used(self):
        rubifier = Rubifier(RubifierSettings(format='single'))
        rubifier.load_dictionary_data({'characters': ['完'], 'words': ['完']})
        assert rubifier.annotate_text('完').segments == (AnnotatedSegment('完', '', 0),)

    def test_explicit_shape_overrides_settings(self):
        rubifier = Rubifier()
        rubifier.load_dictionary_data(
            {'characters': json.dumps(['完'])}, shape='single', serialization='string',
        )
        assert rubifier.dictionary.is_member('完')

    def test_later_dictionary_replaces_lists(self, payload):
        rubifier = Rubifier({'dictionaries': [
            payload,
            {'characters': [{'char': '犬'}], 'words': [{'str': '犬', 'ruby': 'いぬ'}]},
        ]})
        assert not rubifier.dictionary.is_member('完')
        assert rubifier.annotate_text('犬').segments == (AnnotatedSegment('犬', 'いぬ', 0),)

    def test_malformed_dictionary_raises(self):
        with pytest.raises(MalformedInputError):
            Rubifier({'dictionaries': [{'characters': [{'letter': '完'}]}]})

    def test_clear_settings(self, payload):
        rubifier = Rubifier({'dictionaries': [payload], 'format': 'full'})
        rubifier.clear_settings()
        assert len(rubifier.dictionary) == 0
        assert rubifier.settings == RubifierSettings()

    def test_shared_dictionary_instance(self, dictionary):
        a = Rubifier(dictionary=dictionary)
        b = Rubifier(dictionary=dictionary)
        assert a.annotate_text('完璧') == b.annotate_text('完璧')

    def test_html_round_trip(self, payload):
        rubifier = Rubifier({'dictionaries': [payload]})
        html = '<html><body><p>私は完璧です</p></body></html>'
        rubified = rubifier.rubify_html(html)
        assert '<rb>完璧</rb>' in rubified
        assert '<p>私は完璧です</p>' in rubifier.derubify_html(rubified)

    def test_derubify_html_can_keep_foreign_ruby(self, payload):
        rubifier = Rubifier({'dictionaries': [payload]})
        html = '<html><body><p>a<ruby>完<rt>カン</rt></ruby>b</p></body></html>'

        kept = rubifier.derubify_html(html, strip_ruby=False)
        stripped = rubifier.derubify_html(html)

        assert '<ruby>完<rt>カン</rt></ruby>' in kept
        assert '<p>ab</p>' in stripped


class TestCommandLine:

    def run(self, monkeypatch, *argv):
        monkeypatch.setattr(sys, 'argv', ['rubify.py', *argv])
        rubify.main()

    def test_html_file(self, monkeypatch, tmp_path, dictionary_file):
        page = tmp_path / 'page.html'
        page.write_text('<html><body><p>私は完璧です</p></body></html>', encoding='utf-8')

        self.run(monkeypatch, str(page), '-d', str(dictionary_file))

        output = tmp_path / 'page_ruby.html'
        assert output.exists()
        assert '<rt>カンペキ</rt>' in output.read_text(encoding='utf-8')

    def test_revert(self, monkeypatch, tmp_path, dictionary_file):
        page = tmp_path / 'page.html'
        page.write_text('<html><body><p>私は完璧です</p></body></html>', encoding='utf-8')
        rubified = tmp_path / 'out.html'

        self.run(monkeypatch, str(page), '-d', str(dictionary_file), '-o', str(rubified))
        self.run(monkeypatch, str(rubified), '--revert')

        reverted = (tmp_path / 'out_plain.html').read_text(encoding='utf-8')
        assert '<p>私は完璧です</p>' in reverted

    def test_text_file(self, monkeypatch, capsys, tmp_path, dictionary_file):
        notes = tmp_path / 'notes.txt'
        notes.write_text('私は完璧です\n犬\n', encoding='utf-8')

        self.run(monkeypatch, str(notes), '-d', str(dictionary_file))

        out = capsys.readouterr().out.splitlines()
        assert out == ['私は[完璧|カンペキ]です', '犬']

    def test_missing_input(self, monkeypatch, tmp_path):
        with pytest.raises(SystemExit) as exc:
            self.run(monkeypatch, str(tmp_path / 'missing.html'), '-d', 'x.json')
        assert exc.value.code == 1

    def test_malformed_dictionary(self, monkeypatch, capsys, tmp_path):
        page = tmp_path / 'page.html'
        page.write_text('<p>完</p>', encoding='utf-8')
        bad = tmp_path / 'bad.json'
        bad.write_text('{"characters": [', encoding='utf-8')

        with pytest.raises(SystemExit) as exc:
            self.run(monkeypatch, str(page), '-d', str(bad))
        assert exc.value.code == 1
        assert 'Error:' in capsys.readouterr().err
