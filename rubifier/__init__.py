"""Ruby annotation of logographic text from a character and word dictionary."""

from .dictionary import (
    CharacterEntry,
    WordEntry,
    Dictionary,
    DictionarySnapshot,
    ItemShape,
    Serialization,
    MalformedInputError,
)
from .matching import (
    Match,
    next_run,
    iter_runs,
)
from .annotation import (
    PlainSegment,
    AnnotatedSegment,
    AnnotationResult,
    annotate,
    resolve_gloss,
)
from .markup import (
    segments_to_html,
)
from .html_processor import (
    NodeState,
    rubify_html,
    derubify_html,
)
from .epub_processor import (
    rubify_epub,
    derubify_epub,
)
from .settings import RubifierSettings
from .core import Rubifier

__all__ = [
    'CharacterEntry',
    'WordEntry',
    'Dictionary',
    'DictionarySnapshot',
    'ItemShape',
    'Serialization',
    'MalformedInputError',
    'Match',
    'next_run',
    'iter_runs',
    'PlainSegment',
    'AnnotatedSegment',
    'AnnotationResult',
    'annotate',
    'resolve_gloss',
    'segments_to_html',
    'NodeState',
    'rubify_html',
    'derubify_html',
    'rubify_epub',
    'derubify_epub',
    'RubifierSettings',
    'Rubifier',
]
