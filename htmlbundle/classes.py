"""
Rename CSS classes to short generated names.

Class names are collected from three places: class="..." attributes in the
HTML, class selectors in CSS, and cssClassName("...") marker calls in JS.
The most used names get the shortest replacements, and the same table is
applied to all three so they stay in sync.
"""

import logging
import re
from collections import Counter

from .scanner import STYLE_TAGS

log = logging.getLogger(__name__)

HTML_CLASS_RE = re.compile(r"""(?<![\w:-])(class\s*=\s*)(?:'([^']*)'|"([^"]*)")""", re.IGNORECASE)
JS_CLASS_RE = re.compile(r"""(?<![\w$])(cssClassName\(\s*)(?:'([^'\\]*)'|"([^"\\]*)")(\s*\))""")
CSS_CLASS_RE = re.compile(r"\.(-?[_a-zA-Z][_a-zA-Z0-9-]*)")
WS_SPLIT_RE = re.compile(r"(\s+)")

# Braces, statement ends, and the comments and strings that may hide them
_CSS_STRUCTURE_RE = re.compile(r"""/\*.*?\*/|"(?:\\.|[^"\\])*"|'(?:\\.|[^'\\])*'|[{};]""", re.DOTALL)


class IdentifierGenerator:
    """Shortest-first names over a..z: a, b, ..., z, aa, ab, ..., zz, aaa, ...

    An odometer without a zero digit. Each renaming pass uses a fresh one.
    """

    def __init__(self):
        self._digits = []

    def __iter__(self):
        return self

    def __next__(self):
        return self.next()

    def next(self):
        digits = self._digits
        i = len(digits) - 1
        while i >= 0:
            if digits[i] < "z":
                digits[i] = chr(ord(digits[i]) + 1)
                break
            digits[i] = "a"
            i -= 1
        else:
            digits.insert(0, "a")
        return "".join(digits)


def selector_spans(css):
    """Yield (start, end) spans of selector text, i.e. text before a '{'.

    Declarations, comments and quoted strings are not part of any span.
    """
    pending = []
    pos = 0
    for m in _CSS_STRUCTURE_RE.finditer(css):
        token = m.group(0)
        if token == "{":
            pending.append((pos, m.start()))
            yield from pending
            pending = []
        elif token in ("}", ";"):
            pending = []
        else:
            pending.append((pos, m.start()))
        pos = m.end()


def _css_class_names(css):
    for start, end in selector_spans(css):
        for m in CSS_CLASS_RE.finditer(css, start, end):
            yield m.group(1)


def _rewrite_css(css, renames):
    def replace(m):
        name = m.group(1)
        return "." + renames[name] if name in renames else m.group(0)

    out = []
    last = 0
    for start, end in selector_spans(css):
        out.append(css[last:start])
        out.append(CSS_CLASS_RE.sub(replace, css[start:end]))
        last = end
    out.append(css[last:])
    return "".join(out)


class ClassMinifier:
    """One renaming pass over a document and its CSS/JS assets."""

    def __init__(self, whitelist=(), unwrap_markers=False):
        self.whitelist = frozenset(whitelist or ())
        self.unwrap_markers = unwrap_markers
        self.usage = Counter()
        self.renames = {}

    def _add(self, name):
        if name and name not in self.whitelist:
            self.usage[name] += 1

    def count(self, html, css_files, js_files):
        """Count class usage in the HTML and every CSS/JS asset."""
        for m in HTML_CLASS_RE.finditer(html):
            for name in (m.group(2) if m.group(2) is not None else m.group(3)).split():
                self._add(name)

        # Inline handlers and inline scripts may use the marker too
        for m in JS_CLASS_RE.finditer(html):
            self._add(m.group(2) if m.group(2) is not None else m.group(3))

        for match in STYLE_TAGS.scan(html):
            if match.content:
                for name in _css_class_names(match.content):
                    self._add(name)

        for css in css_files.values():
            for name in _css_class_names(css):
                self._add(name)

        for js in js_files.values():
            for m in JS_CLASS_RE.finditer(js):
                self._add(m.group(2) if m.group(2) is not None else m.group(3))
        return self.usage

    def assign(self):
        """Build the rename table, most used names first."""
        generator = IdentifierGenerator()
        # most_common() is a stable sort, so ties keep encounter order
        for name, count in self.usage.most_common():
            short = next(generator)
            while short in self.whitelist:
                short = next(generator)
            self.renames[name] = short
            if count <= 1:
                log.warning('css class "%s" is only ever used once, consider removing', name)
        return self.renames

    def _rewrite_class_attribute(self, m):
        prefix, single, double = m.groups()
        value = single if single is not None else double
        tokens = WS_SPLIT_RE.split(value)
        value = "".join(self.renames.get(token, token) for token in tokens)
        quote = "'" if single is not None else '"'
        return f"{prefix}{quote}{value}{quote}"

    def _rewrite_marker(self, m):
        opening, single, double, closing = m.groups()
        name = single if single is not None else double
        quote = "'" if single is not None else '"'
        literal = f"{quote}{self.renames.get(name, name)}{quote}"
        if self.unwrap_markers:
            return literal
        return f"{opening}{literal}{closing}"

    def _rewrite_style_tag(self, match):
        if not match.content:
            return match.text
        closing_at = match.text.rindex("</")
        opening = match.text[: closing_at - len(match.content)]
        return opening + _rewrite_css(match.content, self.renames) + match.text[closing_at:]

    def rewrite(self, html, css_files, js_files):
        """Apply the rename table; CSS/JS maps are updated in place."""
        html = HTML_CLASS_RE.sub(self._rewrite_class_attribute, html)
        html = JS_CLASS_RE.sub(self._rewrite_marker, html)
        html = STYLE_TAGS.replace(html, self._rewrite_style_tag)

        for path, css in css_files.items():
            css_files[path] = _rewrite_css(css, self.renames)

        for path, js in js_files.items():
            js_files[path] = JS_CLASS_RE.sub(self._rewrite_marker, js)
        return html

    def run(self, html, css_files, js_files):
        self.count(html, css_files, js_files)
        self.assign()
        return self.rewrite(html, css_files, js_files)


def minify_css_classes(html, css_files, js_files, whitelist=(), unwrap_markers=False):
    """Rename classes across the HTML and its CSS/JS assets.

    Returns the rewritten HTML; `css_files` and `js_files` are rewritten in
    place.
    """
    return ClassMinifier(whitelist, unwrap_markers).run(html, css_files, js_files)
