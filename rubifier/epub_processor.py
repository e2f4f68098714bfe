"""
EPUB processing: read an input EPUB, add ruby annotations to every chapter,
and write a new EPUB.
"""

import logging

import ebooklib
from bs4 import BeautifulSoup
from ebooklib import epub

from .dictionary import Dictionary, DictionarySnapshot
from .html_processor import derubify_tree, restore_xhtml_namespace, rubify_tree
from .markup import RUBY_CSS

logger = logging.getLogger(__name__)

CSS_FILE_NAME = 'style/rubifier.css'


def rubify_epub(
    input_path: str,
    output_path: str,
    dictionary: Dictionary | DictionarySnapshot,
) -> int:
    """
    Read an EPUB file, add ruby annotations and write the result to a new file.

    Args:
        input_path: Path to the input EPUB file.
        output_path: Path for the output EPUB file.
        dictionary: Characters and readings to annotate with.

    Returns:
        Number of elements annotated across all chapters.
    """
    if isinstance(dictionary, Dictionary):
        dictionary = dictionary.snapshot()

    logger.info(f'Reading EPUB: {input_path}')
    book = epub.read_epub(input_path, options={'ignore_ncx': True})

    css_item = epub.EpubItem(
        uid='rubifier_style',
        file_name=CSS_FILE_NAME,
        media_type='text/css',
        content=RUBY_CSS.encode('utf-8'),
    )
    book.add_item(css_item)

    items = list(book.get_items_of_type(ebooklib.ITEM_DOCUMENT))
    total = len(items)
    changed = 0

    for idx, item in enumerate(items, 1):
        if isinstance(item, epub.EpubNav):
            continue
        logger.info(f'Processing chapter {idx}/{total}: {item.get_name()}')

        content = item.get_content().decode('utf-8')
        processed, count = _rubify_document(content, dictionary)
        item.set_content(processed.encode('utf-8'))
        item.add_item(css_item)
        changed += count

    _assign_toc_uids(book.toc)

    for item in book.get_items():
        if item.get_id() is None:
            item_name = item.get_name().replace('/', '_').replace('.', '_')
            item.set_id(f'item_{item_name}')
            logger.debug(f'Fixed missing ID for: {item.get_name()}')

    _add_nav_document(book)

    logger.info(f'Writing output EPUB: {output_path}')
    epub.write_epub(output_path, book)
    logger.info(f'Done! Annotated {changed} element(s)')
    return changed


def derubify_epub(input_path: str, output_path: str) -> int:
    """Revert ruby annotations added by rubify_epub. Returns the change count."""
    logger.info(f'Reading EPUB: {input_path}')
    book = epub.read_epub(input_path, options={'ignore_ncx': True})

    changed = 0
    for item in book.get_items_of_type(ebooklib.ITEM_DOCUMENT):
        if isinstance(item, epub.EpubNav):
            continue
        soup = BeautifulSoup(item.get_content().decode('utf-8'), 'lxml')
        count = derubify_tree(soup, strip_ruby=False)
        if count:
            item.set_content(str(soup).encode('utf-8'))
            changed += count

    _assign_toc_uids(book.toc)
    _add_nav_document(book)

    logger.info(f'Writing output EPUB: {output_path}')
    epub.write_epub(output_path, book)
    return changed


def _rubify_document(html: str, dictionary: DictionarySnapshot) -> tuple[str, int]:
    """Rubify one XHTML chapter and link the stylesheet from its <head>."""
    soup = BeautifulSoup(html, 'lxml')

    head = soup.find('head')
    if head:
        link_tag = soup.new_tag(
            'link',
            rel='stylesheet',
            type='text/css',
            href=CSS_FILE_NAME,
        )
        head.append(link_tag)

    count = rubify_tree(soup, dictionary, top=soup.find('body') or soup)
    return restore_xhtml_namespace(html, str(soup)), count


def _assign_toc_uids(toc, prefix: str = 'toc') -> None:
    """
    Give every TOC link and section a uid; EbookLib cannot write an NCX
    entry without one. Generated uids encode the entry's position.
    """
    for position, entry in enumerate(toc):
        uid = f'{prefix}_{position}'
        children = ()
        if isinstance(entry, tuple):
            entry, children = entry
        if getattr(entry, 'uid', '') is None:
            entry.uid = uid
        _assign_toc_uids(children, prefix=uid)


def _has_nav_document(book: epub.EpubBook) -> bool:
    return any(
        isinstance(item, epub.EpubNav) or 'nav' in (getattr(item, 'properties', None) or ())
        for item in book.get_items()
    )


def _add_nav_document(book: epub.EpubBook) -> None:
    """EPUB2 input only carries an NCX; EPUB3 output also needs a nav document."""
    if _has_nav_document(book):
        return

    logger.info('Adding EPUB3 navigation document')
    book.add_item(epub.EpubNav(uid='nav', file_name='nav.xhtml'))
    book.spine = [('nav', 'no'), *(book.spine or [])]
