"""
Tag scanning and attribute tokenizing for HTML fragments.

This is deliberately not an HTML parser. It finds <script>, <style> and <link>
tags with regular expressions and splits their attribute text into
(name, value) pairs, nothing more.
"""

import re
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from .errors import MalformedTagError

Attribute = Tuple[str, Optional[str]]

# Attribute text up to the closing '>', skipping over quoted values
_ATTRS = r"""((?:[^>"']|"[^"]*"|'[^']*')*?)"""

_ATTRIBUTE_RE = re.compile(
    r"""([^\s"'<>/=]+)(?:\s*=\s*(?:'([^']*)'|"([^"]*)"|([^\s"'=<>`]+)))?"""
)
_SEPARATOR_RE = re.compile(r"[\s/]*")


@dataclass(frozen=True)
class TagMatch:
    """One occurrence of a tag in a document."""

    text: str
    start: int
    end: int
    attributes: str
    content: Optional[str] = None

    @property
    def self_closing(self):
        return self.content is None


def iter_attributes(attributes: str) -> Iterator[Attribute]:
    """Lazily yield (name, value) pairs; value is None for bare attributes."""
    pos = 0
    length = len(attributes)
    while True:
        pos = _SEPARATOR_RE.match(attributes, pos).end()
        if pos >= length:
            return
        m = _ATTRIBUTE_RE.match(attributes, pos)
        if not m:
            raise MalformedTagError(attributes, pos)
        name, single, double, bare = m.groups()
        if single is not None:
            value = single
        elif double is not None:
            value = double
        else:
            value = bare
        yield name, value
        pos = m.end()


def parse_attributes(attributes: str) -> List[Attribute]:
    return list(iter_attributes(attributes))


def attribute_value(attributes: List[Attribute], name: str) -> Optional[str]:
    """Return the value of the last attribute called `name` (case-insensitive)."""
    name = name.lower()
    value = None
    for key, val in attributes:
        if key.lower() == name:
            value = val
    return value


def is_stylesheet_link(attributes: List[Attribute]) -> bool:
    rel = attribute_value(attributes, "rel")
    return rel is not None and rel.strip().lower() == "stylesheet"


def format_attributes(attributes) -> str:
    """Serialize attributes as ' name="value"' / ' name', in order."""
    out = []
    for name, value in attributes:
        if value is None:
            out.append(f" {name}")
        elif '"' in value:
            out.append(f" {name}='{value}'")
        else:
            out.append(f' {name}="{value}"')
    return "".join(out)


class TagScanner:
    """Finds every occurrence of one tag name in HTML text.

    With ``two_form`` the tag may be self-closing (``<script .../>``) or a
    container (``<script ...>...</script>``); the self-closing form is tried
    first at each position. Without it only the opening tag is matched, with
    or without a trailing slash, which is how <link> is written.

    The compiled pattern holds no position state, so one scanner can be used
    by any number of documents at once.
    """

    def __init__(self, tag, two_form=True):
        self.tag = tag.lower()
        self.two_form = two_form
        name = re.escape(tag)
        if two_form:
            pattern = (
                rf"<{name}(?=[\s/>]){_ATTRS}\s*/>"
                rf"|<{name}(?=[\s/>]){_ATTRS}>(.*?)</{name}\s*>"
            )
        else:
            pattern = rf"<{name}(?=[\s/>]){_ATTRS}\s*/?>"
        self.pattern = re.compile(pattern, re.IGNORECASE | re.DOTALL)

    def __repr__(self):
        return f"TagScanner({self.tag!r}, two_form={self.two_form})"

    def _to_match(self, m):
        if self.two_form and m.group(1) is None:
            attributes, content = m.group(2), m.group(3)
        else:
            attributes, content = m.group(1), None
        return TagMatch(m.group(0), m.start(), m.end(), attributes, content)

    def scan(self, html, first_only=False) -> Iterator[TagMatch]:
        """Yield matches in document order, or only the first one."""
        for m in self.pattern.finditer(html):
            yield self._to_match(m)
            if first_only:
                return

    def first(self, html) -> Optional[TagMatch]:
        return next(self.scan(html, first_only=True), None)

    def replace(self, html, replacer) -> str:
        """Replace every occurrence with ``replacer(match)`` in a single pass."""
        return self.pattern.sub(lambda m: replacer(self._to_match(m)), html)


SCRIPT_TAGS = TagScanner("script")
STYLE_TAGS = TagScanner("style")
LINK_TAGS = TagScanner("link", two_form=False)
