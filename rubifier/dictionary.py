"""
Dictionary store: the character set and word readings used for ruby annotation.

A dictionary payload carries two ordered lists:

    {
        "characters": [{"char": "完"}, {"char": "璧"}],
        "words": [{"str": "完璧", "ruby": "カンペキ"}]
    }

Every character in ``characters`` is treated as annotatable. ``words`` provide
the reading shown above a run; a run with no word entry is still annotated,
just with an empty reading.

Each list is parsed into a fresh tuple and swapped in whole, so a failed load
never disturbs what was loaded before and readers never see half a list.
"""

import json
import logging
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)


class ItemShape(str, Enum):
    """How raw dictionary items map onto entries."""
    FULL = 'full'
    OBJECT = 'object'
    SINGLE = 'single'


class Serialization(str, Enum):
    """How a dictionary list arrives: as a list already, or as a JSON string."""
    JSON = 'json'
    STRING = 'string'


class MalformedInputError(ValueError):
    """Raised when dictionary data cannot be parsed into entries."""


@dataclass(frozen=True)
class CharacterEntry:
    char: str


@dataclass(frozen=True)
class WordEntry:
    text: str
    gloss: str = ''


@dataclass(frozen=True)
class _CharacterTable:
    entries: tuple[CharacterEntry, ...] = ()
    index: frozenset = frozenset()


@dataclass(frozen=True)
class _WordTable:
    entries: tuple[WordEntry, ...] = ()
    index: dict = field(default_factory=dict)


def _build_character_table(entries: list[CharacterEntry]) -> _CharacterTable:
    return _CharacterTable(
        entries=tuple(entries),
        index=frozenset(e.char for e in entries),
    )


def _build_word_table(entries: list[WordEntry]) -> _WordTable:
    index = {}
    for entry in entries:
        # First loaded entry wins for duplicate text
        index.setdefault(entry.text, entry.gloss)
    return _WordTable(entries=tuple(entries), index=index)


@dataclass(frozen=True)
class DictionarySnapshot:
    """Read-only view of both lists as they were at one instant."""
    _characters: _CharacterTable
    _words: _WordTable

    @property
    def characters(self) -> tuple[CharacterEntry, ...]:
        return self._characters.entries

    @property
    def words(self) -> tuple[WordEntry, ...]:
        return self._words.entries

    def is_member(self, char: str) -> bool:
        return char in self._characters.index

    def lookup_word(self, text: str) -> str | None:
        return self._words.index.get(text)


# ---------------------------------------------------------------------------
# Item parsing
# ---------------------------------------------------------------------------

def _coerce_shape(shape) -> ItemShape:
    try:
        return ItemShape(shape)
    except ValueError:
        raise MalformedInputError(f'Unknown dictionary format: {shape!r}') from None


def _coerce_serialization(serialization) -> Serialization:
    try:
        return Serialization(serialization)
    except ValueError:
        raise MalformedInputError(
            f'Unknown dictionary serialization: {serialization!r}'
        ) from None


def _deserialize_items(items, serialization: Serialization) -> list:
    """Turn the raw collection into a list, parsing it first if serialized."""
    if serialization is Serialization.STRING:
        if not isinstance(items, (str, bytes, bytearray)):
            raise MalformedInputError(
                f'Expected a serialized string, got {type(items).__name__}'
            )
        try:
            items = json.loads(items)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedInputError(f'Could not parse dictionary list: {e}') from e

    if isinstance(items, (str, bytes, bytearray, Mapping)) or not isinstance(items, Iterable):
        raise MalformedInputError(
            f'Dictionary list must be a sequence of items, got {type(items).__name__}'
        )
    return list(items)


def _required_string(item, key: str, position: int) -> str:
    if not isinstance(item, Mapping):
        raise MalformedInputError(
            f'Item {position} must be an object with a {key!r} field, got {item!r}'
        )
    if key not in item:
        raise MalformedInputError(f'Item {position} is missing the {key!r} field: {item!r}')
    value = item[key]
    if not isinstance(value, str):
        raise MalformedInputError(f'Item {position} field {key!r} must be a string: {value!r}')
    return value


def _check_char(char: str, position: int) -> str:
    if len(char) != 1:
        raise MalformedInputError(
            f'Item {position} must hold exactly one character, got {char!r}'
        )
    return char


def parse_character_item(item, shape: ItemShape, position: int = 0) -> CharacterEntry:
    """Convert one raw item into a CharacterEntry."""
    if shape is ItemShape.SINGLE:
        if not isinstance(item, str):
            raise MalformedInputError(f'Item {position} must be a string, got {item!r}')
        return CharacterEntry(char=_check_char(item, position))

    # FULL and OBJECT currently behave the same
    if isinstance(item, CharacterEntry):
        return item
    return CharacterEntry(char=_check_char(_required_string(item, 'char', position), position))


def parse_word_item(item, shape: ItemShape, position: int = 0) -> WordEntry:
    """Convert one raw item into a WordEntry. A missing reading becomes ''."""
    if shape is ItemShape.SINGLE:
        if not isinstance(item, str):
            raise MalformedInputError(f'Item {position} must be a string, got {item!r}')
        return WordEntry(text=item)

    if isinstance(item, WordEntry):
        return item
    text = _required_string(item, 'str', position)
    gloss = item.get('ruby')
    if gloss is None:
        gloss = ''
    elif not isinstance(gloss, str):
        raise MalformedInputError(f'Item {position} field \'ruby\' must be a string: {gloss!r}')
    return WordEntry(text=text, gloss=gloss)


def parse_characters(items, shape=ItemShape.OBJECT,
                     serialization=Serialization.JSON) -> list[CharacterEntry]:
    shape = _coerce_shape(shape)
    raw = _deserialize_items(items, _coerce_serialization(serialization))
    return [parse_character_item(item, shape, i) for i, item in enumerate(raw)]


def parse_words(items, shape=ItemShape.OBJECT,
                serialization=Serialization.JSON) -> list[WordEntry]:
    shape = _coerce_shape(shape)
    raw = _deserialize_items(items, _coerce_serialization(serialization))
    return [parse_word_item(item, shape, i) for i, item in enumerate(raw)]


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class Dictionary:
    """
    Holds the annotatable characters and the word readings.

    Loads replace a whole list at a time. Writers are serialised with a lock;
    readers simply grab the current table, which is never mutated.
    """

    def __init__(self):
        self._characters = _CharacterTable()
        self._words = _WordTable()
        self._write_lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._characters.entries) + len(self._words.entries)

    def __repr__(self) -> str:
        return (
            f'<Dictionary characters={len(self._characters.entries)} '
            f'words={len(self._words.entries)}>'
        )

    @property
    def characters(self) -> tuple[CharacterEntry, ...]:
        return self._characters.entries

    @property
    def words(self) -> tuple[WordEntry, ...]:
        return self._words.entries

    def snapshot(self) -> DictionarySnapshot:
        return DictionarySnapshot(self._characters, self._words)

    def load_characters(self, items, shape=ItemShape.OBJECT,
                        serialization=Serialization.JSON) -> tuple[CharacterEntry, ...]:
        """Replace the character list. Nothing changes if parsing fails."""
        table = _build_character_table(parse_characters(items, shape, serialization))
        with self._write_lock:
            self._characters = table
        logger.debug(f'Loaded {len(table.entries)} characters')
        return table.entries

    def load_words(self, items, shape=ItemShape.OBJECT,
                   serialization=Serialization.JSON) -> tuple[WordEntry, ...]:
        """Replace the word list. Nothing changes if parsing fails."""
        table = _build_word_table(parse_words(items, shape, serialization))
        with self._write_lock:
            self._words = table
        logger.debug(f'Loaded {len(table.entries)} words')
        return table.entries

    def load_dictionary_data(self, payload: Mapping, shape=ItemShape.OBJECT,
                             serialization=Serialization.JSON) -> None:
        """
        Load both lists from one payload.

        Both lists are parsed before either is swapped in, so a malformed
        ``words`` list also leaves ``characters`` untouched. A list missing
        from the payload keeps its current contents.
        """
        if not isinstance(payload, Mapping):
            raise MalformedInputError(
                f'Dictionary payload must be an object, got {type(payload).__name__}'
            )

        characters = words = None
        if 'characters' in payload:
            characters = _build_character_table(
                parse_characters(payload['characters'], shape, serialization)
            )
        if 'words' in payload:
            words = _build_word_table(parse_words(payload['words'], shape, serialization))

        if characters is None and words is None:
            logger.warning('Dictionary payload has neither "characters" nor "words"')
            return

        with self._write_lock:
            if characters is not None:
                self._characters = characters
            if words is not None:
                self._words = words

        logger.info(
            f'Dictionary now holds {len(self._characters.entries)} characters '
            f'and {len(self._words.entries)} words'
        )

    def clear(self) -> None:
        with self._write_lock:
            self._characters = _CharacterTable()
            self._words = _WordTable()

    def is_member(self, char: str) -> bool:
        """Check if a character is annotatable."""
        return char in self._characters.index

    def lookup_word(self, text: str) -> str | None:
        """Return the reading of the first word entry matching ``text``, or None."""
        return self._words.index.get(text)
