"""
Ruby annotation of plain strings.

Splits a string into plain and annotated segments: every maximal run of
dictionary characters becomes an annotated segment carrying the run's reading
(empty if the word list has no entry for it), and the text between runs is
kept verbatim. Joining the segments' text always gives back the input.

Example (characters 完, 璧; word 完璧 -> カンペキ):
    "私は完璧です" -> [Plain("私は"), Annotated("完璧", "カンペキ"), Plain("です")]
"""

import logging
from dataclasses import dataclass

from .dictionary import Dictionary, DictionarySnapshot
from .matching import next_run

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlainSegment:
    """Text left as-is."""
    text: str
    start: int = 0

    @property
    def end(self) -> int:
        return self.start + len(self.text)


@dataclass(frozen=True)
class AnnotatedSegment:
    """A run of dictionary characters and its reading."""
    base: str
    gloss: str = ''
    start: int = 0

    @property
    def text(self) -> str:
        return self.base

    @property
    def end(self) -> int:
        return self.start + len(self.base)


Segment = PlainSegment | AnnotatedSegment


@dataclass(frozen=True)
class AnnotationResult:
    segments: tuple[Segment, ...] = ()
    changed: bool = False

    @property
    def text(self) -> str:
        """The source string, rebuilt from the segments."""
        return ''.join(s.text for s in self.segments)

    @property
    def annotated(self) -> list[AnnotatedSegment]:
        return [s for s in self.segments if isinstance(s, AnnotatedSegment)]


def _as_snapshot(dictionary: Dictionary | DictionarySnapshot) -> DictionarySnapshot:
    if isinstance(dictionary, Dictionary):
        return dictionary.snapshot()
    return dictionary


def resolve_gloss(run_text: str, dictionary: Dictionary | DictionarySnapshot) -> str:
    """
    Return the reading for a whole run, or '' if the word list lacks it.

    Only an exact match of the entire run counts; runs are never split to
    find shorter words.
    """
    gloss = dictionary.lookup_word(run_text)
    return gloss if gloss else ''


def annotate(
    source: str,
    dictionary: Dictionary | DictionarySnapshot,
    require_change: bool = False,
) -> AnnotationResult | None:
    """
    Split ``source`` into plain and annotated segments.

    Args:
        source: The text to annotate.
        dictionary: Characters and readings to annotate with. A single
                    snapshot is used for the whole call.
        require_change: If True, return None instead of an all-plain result
                        when no run is found, so callers can leave the
                        source untouched.

    Returns:
        AnnotationResult, or None when require_change is set and nothing
        was annotated.
    """
    snapshot = _as_snapshot(dictionary)

    segments = []
    cursor = 0
    any_match = False

    while True:
        match = next_run(source, snapshot.is_member, cursor)
        if match is None:
            break

        if match.start > cursor:
            segments.append(PlainSegment(text=source[cursor:match.start], start=cursor))

        segments.append(AnnotatedSegment(
            base=match.text,
            gloss=resolve_gloss(match.text, snapshot),
            start=match.start,
        ))
        cursor = match.end
        any_match = True

    if require_change and not any_match:
        return None

    if cursor < len(source):
        segments.append(PlainSegment(text=source[cursor:], start=cursor))

    logger.debug(f'Annotated {sum(isinstance(s, AnnotatedSegment) for s in segments)} '
                 f'run(s) in {len(source)} characters')
    return AnnotationResult(segments=tuple(segments), changed=any_match)
