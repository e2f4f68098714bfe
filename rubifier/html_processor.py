"""
HTML processing: find text-only elements, replace their text with ruby
annotations, and put the original content back on request.

Processed elements are marked with attributes so they are never annotated
twice, and their previous text and inner HTML are stored so the change can
be reverted with derubify_element / derubify_html.
"""

import logging
import warnings
from enum import Enum

from bs4 import BeautifulSoup, NavigableString, Tag, XMLParsedAsHTMLWarning

from .annotation import annotate
from .dictionary import Dictionary, DictionarySnapshot
from .markup import RUBY_ELEMENT_ATTRIBUTE, build_ruby_fragment

warnings.filterwarnings('ignore', category=XMLParsedAsHTMLWarning)

logger = logging.getLogger(__name__)

# The element whose content was replaced with ruby markup
RUBIFIED_ELEMENT_ATTRIBUTE = 'data-rubified'
# Previous content, kept for reverting
OLD_TEXT_CONTENT_ATTRIBUTE = 'data-old-text-content'
OLD_HTML_ATTRIBUTE = 'data-old-inner-html'

XHTML_NAMESPACE = 'http://www.w3.org/1999/xhtml'

_MARKER_ATTRIBUTES = (
    OLD_HTML_ATTRIBUTE,
    OLD_TEXT_CONTENT_ATTRIBUTE,
    RUBIFIED_ELEMENT_ATTRIBUTE,
    RUBY_ELEMENT_ATTRIBUTE,
)

# Not rendered as body text, so never annotated
_DISALLOWED_TAGS = ('script', 'style', 'meta', 'title')
# Already ruby markup
_RUBY_TAGS = ('ruby', 'rb', 'rt', 'rp')


class NodeState(Enum):
    UNPROCESSED = 'unprocessed'
    ANNOTATED = 'annotated'


def node_state(element: Tag) -> NodeState:
    if element.has_attr(RUBIFIED_ELEMENT_ATTRIBUTE):
        return NodeState.ANNOTATED
    return NodeState.UNPROCESSED


def _is_text_node(node) -> bool:
    # Comments, CDATA and doctypes subclass NavigableString too
    return type(node) is NavigableString


def get_renderable_elements(top: Tag) -> list[Tag]:
    """
    Return the elements under ``top`` that hold exactly one text node and
    nothing else, skipping non-rendered tags such as script and style.
    """
    elements = []
    for element in top.find_all(True):
        if len(element.contents) != 1 or not _is_text_node(element.contents[0]):
            continue
        if element.name.lower() in _DISALLOWED_TAGS:
            continue
        elements.append(element)
    return elements


def rubify_element(
    element: Tag,
    soup: BeautifulSoup,
    dictionary: Dictionary | DictionarySnapshot,
) -> bool:
    """
    Replace an element's text with ruby markup.

    Elements that are ruby markup themselves, have no text, already contain
    an <rb>, or were rubified before are left alone.

    Returns:
        True if the element was changed.
    """
    if not isinstance(element, Tag):
        return False
    if element.name.lower() in _RUBY_TAGS:
        return False

    text = element.get_text()
    if not text:
        return False

    # Annotating twice nests ruby inside ruby
    if element.find('rb') is not None or node_state(element) is NodeState.ANNOTATED:
        return False

    result = annotate(text, dictionary, require_change=True)
    if result is None:
        return False

    element[OLD_TEXT_CONTENT_ATTRIBUTE] = text
    element[OLD_HTML_ATTRIBUTE] = element.decode_contents()
    element[RUBIFIED_ELEMENT_ATTRIBUTE] = ''

    element.clear()
    element.append(build_ruby_fragment(soup, result))
    return True


def derubify_element(element: Tag, strip_ruby: bool = True) -> bool:
    """
    Undo rubify_element.

    Elements rubified by this module get their stored inner HTML back and
    lose the marker attributes. For any other element, direct <ruby> children
    are removed when ``strip_ruby`` is set.

    Returns:
        True if the element was changed.
    """
    if node_state(element) is NodeState.ANNOTATED:
        old_html = element.get(OLD_HTML_ATTRIBUTE) or ''
        element.clear()
        fragment = BeautifulSoup(old_html, 'html.parser')
        for child in list(fragment.contents):
            element.append(child.extract())

        for attribute in _MARKER_ATTRIBUTES:
            if element.has_attr(attribute):
                del element[attribute]
        return True

    if not strip_ruby:
        return False

    ruby_children = [
        child for child in element.children
        if isinstance(child, Tag) and child.name.lower() == 'ruby'
    ]
    for child in ruby_children:
        child.extract()
    return bool(ruby_children)


def rubify_tree(soup: BeautifulSoup, dictionary: Dictionary | DictionarySnapshot,
                top: Tag | None = None) -> int:
    """Rubify every renderable element under ``top``. Returns the change count."""
    if isinstance(dictionary, Dictionary):
        dictionary = dictionary.snapshot()

    changed = 0
    for element in get_renderable_elements(top or soup):
        if rubify_element(element, soup, dictionary):
            changed += 1
    logger.debug(f'Rubified {changed} element(s)')
    return changed


def derubify_tree(soup: BeautifulSoup, top: Tag | None = None,
                  strip_ruby: bool = True) -> int:
    """Derubify every element under ``top``. Returns the change count."""
    root = top or soup
    changed = 0
    for element in list(root.find_all(True)):
        # Restoring an ancestor detaches the ruby markup that was inside it
        if not any(parent is root for parent in element.parents):
            continue
        if derubify_element(element, strip_ruby=strip_ruby):
            changed += 1
    logger.debug(f'Derubified {changed} element(s)')
    return changed


def restore_xhtml_namespace(original: str, result: str) -> str:
    """Put back the XHTML namespace the lxml HTML parser drops from <html>."""
    if 'xmlns' in original and 'xmlns' not in result:
        result = result.replace('<html', f'<html xmlns="{XHTML_NAMESPACE}"', 1)
    return result


def rubify_html(
    html: str,
    dictionary: Dictionary | DictionarySnapshot,
    parser: str = 'lxml',
) -> str:
    """Parse an HTML document, rubify it and return the new markup."""
    soup = BeautifulSoup(html, parser)
    rubify_tree(soup, dictionary)
    return restore_xhtml_namespace(html, str(soup))


def derubify_html(html: str, parser: str = 'lxml', strip_ruby: bool = True) -> str:
    """Parse an HTML document and revert any ruby annotations in it."""
    soup = BeautifulSoup(html, parser)
    derubify_tree(soup, strip_ruby=strip_ruby)
    return restore_xhtml_namespace(html, str(soup))
