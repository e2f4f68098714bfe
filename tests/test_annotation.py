"""
Unit tests for gloss resolution and segment assembly.
"""

import pytest

from rubifier.annotation import (
    AnnotatedSegment,
    AnnotationResult,
    PlainSegment,
    annotate,
    resolve_gloss,
)
from rubifier.dictionary import Dictionary

SAMPLE_TEXTS = [
    '',
    '犬',
    '完',
    '完璧',
    '私は完璧です',
    '完は璧',
    '璧完璧。完',
    'abc 完璧 def',
    '完璧完璧',
]


class TestResolveGloss:

    def test_exact_match(self, dictionary):
        assert resolve_gloss('完璧', dictionary) == 'カンペキ'

    def test_miss_is_empty(self, dictionary):
        assert resolve_gloss('完', dictionary) == ''

    def test_no_partial_matching(self, dictionary):
        assert resolve_gloss('完璧完', dictionary) == ''

    def test_repeatable(self, dictionary):
        assert resolve_gloss('完璧', dictionary) == resolve_gloss('完璧', dictionary)

    def test_works_on_snapshot(self, dictionary):
        assert resolve_gloss('完璧', dictionary.snapshot()) == 'カンペキ'


class TestAnnotateScenarios:

    def test_whole_word(self, dictionary):
        result = annotate('完璧', dictionary)
        assert result.segments == (AnnotatedSegment('完璧', 'カンペキ', 0),)
        assert result.changed is True

    def test_word_inside_sentence(self, dictionary):
        result = annotate('私は完璧です', dictionary)
        assert result.segments == (
            PlainSegment('私は', 0),
            AnnotatedSegment('完璧', 'カンペキ', 2),
            PlainSegment('です', 4),
        )

    def test_no_members_requires_change(self, dictionary):
        assert annotate('犬', dictionary, require_change=True) is None

    def test_no_members_without_requiring_change(self, dictionary):
        result = annotate('犬', dictionary, require_change=False)
        assert result.segments == (PlainSegment('犬', 0),)
        assert result.changed is False

    def test_member_without_word_gets_empty_reading(self, dictionary):
        result = annotate('完', dictionary)
        assert result.segments == (AnnotatedSegment('完', '', 0),)
        assert result.changed is True

    def test_empty_input(self, dictionary):
        assert annotate('', dictionary, require_change=True) is None
        result = annotate('', dictionary, require_change=False)
        assert result == AnnotationResult(segments=(), changed=False)

    def test_empty_dictionary(self):
        result = annotate('完璧', Dictionary())
        assert result.segments == (PlainSegment('完璧', 0),)
        assert not result.changed

    def test_adjacent_words_form_one_run(self, dictionary):
        result = annotate('完璧完璧', dictionary)
        assert result.segments == (AnnotatedSegment('完璧完璧', '', 0),)


class TestAnnotateProperties:

    @pytest.mark.parametrize('text', SAMPLE_TEXTS)
    def test_segments_rebuild_source(self, dictionary, text):
        result = annotate(text, dictionary)
        assert result.text == text
        assert ''.join(s.text for s in result.segments) == text

    @pytest.mark.parametrize('text', SAMPLE_TEXTS)
    def test_segments_are_contiguous(self, dictionary, text):
        result = annotate(text, dictionary)
        position = 0
        for segment in result.segments:
            assert segment.start == position
            assert segment.end > segment.start
            position = segment.end
        assert position == len(text)

    @pytest.mark.parametrize('text', SAMPLE_TEXTS)
    def test_annotated_runs_are_maximal(self, dictionary, text):
        result = annotate(text, dictionary)
        for segment in result.annotated:
            assert all(dictionary.is_member(c) for c in segment.base)
            if segment.start > 0:
                assert not dictionary.is_member(text[segment.start - 1])
            if segment.end < len(text):
                assert not dictionary.is_member(text[segment.end])

    @pytest.mark.parametrize('text', SAMPLE_TEXTS)
    def test_plain_segments_hold_no_members(self, dictionary, text):
        result = annotate(text, dictionary)
        for segment in result.segments:
            if isinstance(segment, PlainSegment):
                assert not any(dictionary.is_member(c) for c in segment.text)

    @pytest.mark.parametrize('text', SAMPLE_TEXTS)
    def test_require_change_only_differs_by_sentinel(self, dictionary, text):
        relaxed = annotate(text, dictionary, require_change=False)
        strict = annotate(text, dictionary, require_change=True)
        if relaxed.changed:
            assert strict == relaxed
        else:
            assert strict is None

    def test_first_loaded_reading_wins(self):
        d = Dictionary()
        d.load_dictionary_data({
            'characters': [{'char': '完'}, {'char': '璧'}],
            'words': [
                {'str': '完璧', 'ruby': 'カンペキ'},
                {'str': '完璧', 'ruby': 'かんぺき'},
            ],
        })
        result = annotate('完璧', d)
        assert result.annotated[0].gloss == 'カンペキ'

    def test_uses_one_snapshot_per_call(self, dictionary):
        snapshot = dictionary.snapshot()
        dictionary.clear()
        result = annotate('完璧', snapshot)
        assert result.changed
        assert not annotate('完璧', dictionary).changed
