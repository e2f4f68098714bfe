#!/usr/bin/env python3
"""
Ruby annotator

Adds ruby readings above runs of dictionary characters in HTML pages, EPUB
books or plain text, using a JSON dictionary of characters and word readings.

Usage:
    python rubify.py page.html -d kanji.json
    python rubify.py book.epub -d kanji.json -d extra_words.json -o book_ruby.epub
    python rubify.py page_ruby.html --revert
    python rubify.py notes.txt -d kanji.json
"""

import argparse
import logging
import sys
from pathlib import Path

from rubifier import AnnotatedSegment, MalformedInputError, Rubifier, RubifierSettings
from rubifier.dictionary import ItemShape, Serialization
from rubifier.markup import segments_to_html

HTML_SUFFIXES = ('.html', '.htm', '.xhtml')


def main():
    parser = argparse.ArgumentParser(
        description='Add ruby readings to HTML, EPUB or plain text from a character dictionary.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python rubify.py page.html -d kanji.json                 # Writes page_ruby.html
  python rubify.py book.epub -d kanji.json -o out.epub     # Annotate every chapter
  python rubify.py page.html -d a.json -d b.json           # Later dictionaries replace earlier lists
  python rubify.py page.html -d chars.json --format single # Lists of bare strings
  python rubify.py page_ruby.html --revert                 # Restore the original text
  python rubify.py notes.txt -d kanji.json                 # Print segments for plain text
  python rubify.py notes.txt -d kanji.json --html          # Print ruby HTML for plain text
        ''',
    )

    parser.add_argument('input', help='Path to an .html/.xhtml, .epub or .txt file')
    parser.add_argument(
        '-o', '--output',
        help='Path for the output file (default: <input>_ruby.<ext>)',
    )
    parser.add_argument(
        '-d', '--dictionary',
        action='append',
        default=[],
        help='Dictionary JSON file or http(s) URL. May be given more than once.',
    )
    parser.add_argument(
        '--format',
        choices=[s.value for s in ItemShape],
        default=ItemShape.OBJECT.value,
        help='How dictionary items are written (default: object)',
    )
    parser.add_argument(
        '--serialization',
        choices=[s.value for s in Serialization],
        default=Serialization.JSON.value,
        help='json: lists are JSON arrays; string: lists are JSON-encoded strings (default: json)',
    )
    parser.add_argument(
        '--revert',
        action='store_true',
        help='Remove annotations added by a previous run instead of adding them',
    )
    parser.add_argument(
        '--html',
        action='store_true',
        help='For plain text input, print ruby HTML instead of the segment list',
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose logging',
    )

    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%H:%M:%S',
    )

    input_path = Path(args.input)
    if not input_path.exists():
        print(f'Error: Input file not found: {input_path}', file=sys.stderr)
        sys.exit(1)

    suffix = input_path.suffix.lower()
    if suffix not in HTML_SUFFIXES + ('.epub', '.txt'):
        print(f'Error: Unsupported input type: {input_path.suffix}', file=sys.stderr)
        sys.exit(1)

    if not args.revert and not args.dictionary:
        parser.error('at least one --dictionary is required unless --revert is given')

    try:
        rubifier = Rubifier(RubifierSettings(
            dictionaries=args.dictionary,
            format=args.format,
            serialization=args.serialization,
        ))
    except (MalformedInputError, OSError) as e:
        print(f'Error: {e}', file=sys.stderr)
        sys.exit(1)

    if suffix == '.txt':
        _print_text(rubifier, input_path.read_text(encoding='utf-8'), as_html=args.html)
        return

    if args.output:
        output_path = Path(args.output)
    else:
        tag = '_plain' if args.revert else '_ruby'
        output_path = input_path.with_stem(input_path.stem + tag)

    print(f'Input:  {input_path}')
    print(f'Output: {output_path}')
    print(f'Mode:   {"revert" if args.revert else "annotate"}')
    if not args.revert:
        d = rubifier.dictionary
        print(f'Dictionary: {len(d.characters)} characters, {len(d.words)} words')
    print()

    if suffix == '.epub':
        if args.revert:
            count = rubifier.derubify_epub(str(input_path), str(output_path))
        else:
            count = rubifier.rubify_epub(str(input_path), str(output_path))
        print(f'\n{count} element(s) changed')
    else:
        html = input_path.read_text(encoding='utf-8')
        if args.revert:
            result = rubifier.derubify_html(html)
        else:
            result = rubifier.rubify_html(html)
        output_path.write_text(result, encoding='utf-8')

    print(f'\nOutput written to: {output_path}')


def _print_text(rubifier: Rubifier, text: str, as_html: bool = False) -> None:
    """Annotate each line of a plain text file and print the result."""
    for line in text.splitlines():
        result = rubifier.annotate_text(line)
        if as_html:
            print(segments_to_html(result))
            continue
        parts = []
        for segment in result.segments:
            if isinstance(segment, AnnotatedSegment):
                parts.append(f'[{segment.base}|{segment.gloss}]')
            else:
                parts.append(segment.text)
        print(''.join(parts))


if __name__ == '__main__':
    main()
