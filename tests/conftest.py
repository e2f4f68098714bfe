"""Shared fixtures: a small kanji dictionary."""

import pytest

from rubifier.dictionary import Dictionary

KANPEKI_PAYLOAD = {
    'characters': [{'char': '完'}, {'char': '璧'}],
    'words': [{'str': '完璧', 'ruby': 'カンペキ'}],
}


@pytest.fixture
def payload():
    return {
        'characters': list(KANPEKI_PAYLOAD['characters']),
        'words': list(KANPEKI_PAYLOAD['words']),
    }


@pytest.fixture
def dictionary(payload):
    d = Dictionary()
    d.load_dictionary_data(payload)
    return d
