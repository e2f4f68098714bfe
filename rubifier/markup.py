"""
HTML realisation of annotation results.

Annotated segments become standard ruby markup:
    <ruby><rb>完璧</rb><rp>(</rp><rt>カンペキ</rt><rp>)</rp></ruby>
Plain segments become a <span> holding the text. The whole result is wrapped
in a <span> marked with RUBY_ELEMENT_ATTRIBUTE so it can be found again.
"""

import html

from bs4 import BeautifulSoup, Tag
from bs4.element import RubyParenthesisString, RubyTextString

from .annotation import AnnotatedSegment, AnnotationResult

# Marks the wrapper created around an annotation result
RUBY_ELEMENT_ATTRIBUTE = 'data-ruby-element'

RUBY_CSS = '''
/* Ruby annotation styling */
ruby {
    ruby-align: center;
    -epub-ruby-position: over;
    -webkit-ruby-position: before;
    ruby-position: over;
}

rt {
    font-size: 0.5em;
    font-style: normal;
    font-weight: normal;
    ruby-align: center;
}

rp {
    display: none;
}

/* Extra line height to accommodate readings above characters */
body, p {
    line-height: 2.0;
}
'''


def segment_to_html(segment) -> str:
    if isinstance(segment, AnnotatedSegment):
        return (
            f'<ruby><rb>{html.escape(segment.base)}</rb>'
            f'<rp>(</rp><rt>{html.escape(segment.gloss)}</rt><rp>)</rp></ruby>'
        )
    return f'<span>{html.escape(segment.text)}</span>'


def segments_to_html(result: AnnotationResult) -> str:
    """Render an annotation result as an HTML string."""
    inner = ''.join(segment_to_html(s) for s in result.segments)
    return f'<span {RUBY_ELEMENT_ATTRIBUTE}="">{inner}</span>'


def build_ruby_fragment(soup: BeautifulSoup, result: AnnotationResult) -> Tag:
    """Build the same structure as segments_to_html as tags owned by ``soup``."""
    wrapper = soup.new_tag('span')
    wrapper[RUBY_ELEMENT_ATTRIBUTE] = ''

    for segment in result.segments:
        if isinstance(segment, AnnotatedSegment):
            ruby = soup.new_tag('ruby')
            rb = soup.new_tag('rb')
            rb.string = segment.base
            rt = soup.new_tag('rt')
            rt.append(soup.new_string(segment.gloss, RubyTextString))
            ruby.append(rb)
            ruby.append(_rp(soup, '('))
            ruby.append(rt)
            ruby.append(_rp(soup, ')'))
            wrapper.append(ruby)
        else:
            span = soup.new_tag('span')
            span.string = segment.text
            wrapper.append(span)

    return wrapper


def _rp(soup: BeautifulSoup, text: str) -> Tag:
    rp = soup.new_tag('rp')
    rp.append(soup.new_string(text, RubyParenthesisString))
    return rp
