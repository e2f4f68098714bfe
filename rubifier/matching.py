"""
Continuous run matching.

Finds maximal stretches of a string whose characters all satisfy a predicate,
e.g. every kanji run in a Japanese sentence. Offsets count code points.
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class Match:
    """One run found in a source string."""
    start: int
    text: str

    @property
    def length(self) -> int:
        return len(self.text)

    @property
    def end(self) -> int:
        """Offset just past the run; the next search starts here."""
        return self.start + len(self.text)


def next_run(
    source: str,
    predicate: Callable[[str], bool],
    from_offset: int = 0,
) -> Match | None:
    """
    Find the next maximal run at or after ``from_offset``.

    The first character satisfying ``predicate`` opens the run, which then
    extends until the first character that does not (or the end of input).
    Returns None when nothing in ``source[from_offset:]`` satisfies it.
    """
    if from_offset < 0:
        raise ValueError(f'from_offset must be >= 0, got {from_offset}')

    length = len(source)
    index = from_offset
    while index < length and not predicate(source[index]):
        index += 1
    if index >= length:
        return None

    start = index
    index += 1
    while index < length and predicate(source[index]):
        index += 1
    return Match(start=start, text=source[start:index])


def iter_runs(source: str, predicate: Callable[[str], bool]) -> Iterator[Match]:
    """Yield every maximal run in ``source``, left to right."""
    offset = 0
    while True:
        match = next_run(source, predicate, offset)
        if match is None:
            return
        yield match
        offset = match.end
