"""
Inline referenced stylesheets and scripts into HTML.

bundle_* rewrites every qualifying tag on its own; combine_* merges all of
them into a single tag placed where the first one was.
"""

import logging
import uuid

from .errors import MalformedTagError
from .resolver import CSS, JS, candidate_path
from .scanner import format_attributes, parse_attributes

log = logging.getLogger(__name__)


def _qualify(match, kind, assets, base_dir):
    """Return (attributes, content) for a tag that can be inlined, else None."""
    try:
        attributes = parse_attributes(match.attributes)
    except MalformedTagError as e:
        log.debug("Leaving malformed tag untouched %r: %s", match.text, e)
        return None

    path = candidate_path(attributes, kind, base_dir)
    if path is None or path not in assets:
        return None

    kept = [(name, value) for name, value in attributes if name.lower() not in kind.dropped]
    return kept, assets[path]


def render_tag(kind, attributes, content):
    return f"<{kind.output_tag}{format_attributes(attributes)}>{content}</{kind.output_tag}>"


def bundle(html, assets, base_dir, kind):
    """Replace each qualifying tag with an inline tag holding its asset."""

    def replace(match):
        found = _qualify(match, kind, assets, base_dir)
        if found is None:
            return match.text
        attributes, content = found
        return render_tag(kind, attributes, content)

    return kind.scanner.replace(html, replace)


def _placeholder(html):
    while True:
        token = f"<!--htmlbundle:{uuid.uuid4().hex}-->"
        if token not in html:
            return token


def combine(html, assets, base_dir, kind):
    """Merge all qualifying tags into one, at the position of the first.

    The first tag is swapped for a placeholder and the rest are removed in a
    single pass; the combined tag is only inserted afterwards, so its content
    is never scanned as part of the document.
    """
    placeholder = _placeholder(html)
    contents = []
    merged = {}

    def replace(match):
        found = _qualify(match, kind, assets, base_dir)
        if found is None:
            return match.text
        attributes, content = found
        for name, value in attributes:
            key = name.lower()
            if key in merged:
                name = merged[key][0]
            merged[key] = (name, value)
        contents.append(content)
        return placeholder if len(contents) == 1 else ""

    html = kind.scanner.replace(html, replace)
    if not contents:
        return html

    log.debug("Combined %d %s assets into one tag", len(contents), kind.name)
    return html.replace(placeholder, render_tag(kind, merged.values(), "".join(contents)), 1)


def bundle_css(html, css_files, base_dir):
    return bundle(html, css_files, base_dir, CSS)


def bundle_js(html, js_files, base_dir):
    return bundle(html, js_files, base_dir, JS)


def combine_css(html, css_files, base_dir):
    return combine(html, css_files, base_dir, CSS)


def combine_js(html, js_files, base_dir):
    return combine(html, js_files, base_dir, JS)
