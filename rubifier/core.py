"""
Rubifier: a dictionary plus the operations that use it.

    rubifier = Rubifier()
    rubifier.load_dictionary_data({
        'characters': [{'char': '完'}, {'char': '璧'}],
        'words': [{'str': '完璧', 'ruby': 'カンペキ'}],
    })
    rubifier.annotate_text('私は完璧です')

Every operation also exists as a plain function taking the dictionary
explicitly; this class only saves passing it around.
"""

import logging
from collections.abc import Mapping

from .annotation import AnnotationResult, annotate
from .dictionary import Dictionary
from .epub_processor import derubify_epub, rubify_epub
from .html_processor import derubify_html, rubify_html
from .settings import RubifierSettings
from .sources import fetch_dictionary_payload

logger = logging.getLogger(__name__)


class Rubifier:
    def __init__(self, settings: RubifierSettings | Mapping | None = None,
                 dictionary: Dictionary | None = None):
        if not isinstance(settings, RubifierSettings):
            settings = RubifierSettings.from_mapping(settings)
        self.settings = settings
        self.dictionary = dictionary if dictionary is not None else Dictionary()
        if settings.dictionaries:
            self.apply_settings(settings)

    def apply_settings(self, settings: RubifierSettings) -> None:
        """Load every dictionary the settings list, in order."""
        self.settings = settings
        for option in settings.dictionaries:
            self.load_dictionary(option)

    def clear_settings(self) -> None:
        self.settings = RubifierSettings()
        self.dictionary.clear()

    def load_dictionary(self, option) -> None:
        """Load a dictionary given as a payload mapping, file path or URL."""
        payload = fetch_dictionary_payload(option)
        self.load_dictionary_data(payload)

    def load_dictionary_data(self, payload: Mapping, shape=None, serialization=None) -> None:
        self.dictionary.load_dictionary_data(
            payload,
            shape if shape is not None else self.settings.format,
            serialization if serialization is not None else self.settings.serialization,
        )

    def annotate_text(self, source: str, require_change: bool = False) -> AnnotationResult | None:
        return annotate(source, self.dictionary, require_change=require_change)

    def rubify_html(self, html: str, parser: str = 'lxml') -> str:
        return rubify_html(html, self.dictionary, parser=parser)

    def derubify_html(self, html: str, parser: str = 'lxml', strip_ruby: bool = True) -> str:
        return derubify_html(html, parser=parser, strip_ruby=strip_ruby)

    def rubify_epub(self, input_path: str, output_path: str) -> int:
        return rubify_epub(input_path, output_path, self.dictionary)

    def derubify_epub(self, input_path: str, output_path: str) -> int:
        return derubify_epub(input_path, output_path)
