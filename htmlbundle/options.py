"""Bundling options."""

import re
from dataclasses import dataclass, field, fields
from typing import Optional, Tuple

from .errors import ConfigError


@dataclass
class Options:
    base_url: Optional[str] = None
    bundle_css: bool = False
    combine_css: bool = False
    bundle_js: bool = False
    combine_js: bool = False
    minify_css_classes: bool = False
    classes_whitelist: Tuple[str, ...] = field(default_factory=tuple)
    unwrap_class_markers: bool = False
    minify_html: bool = False

    def __post_init__(self):
        if isinstance(self.classes_whitelist, str):
            raise ConfigError("classes_whitelist must be a list of class names, not a string")
        # Ordered, without duplicates
        self.classes_whitelist = tuple(dict.fromkeys(self.classes_whitelist or ()))

    @property
    def inline_css(self):
        """Combining implies inlining."""
        return self.bundle_css or self.combine_css

    @property
    def inline_js(self):
        return self.bundle_js or self.combine_js

    @classmethod
    def from_dict(cls, values):
        """Build options from a mapping using either camelCase or snake_case keys."""
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in (values or {}).items():
            name = _snake_case(key)
            if name not in known:
                raise ConfigError(f"unknown option: {key}")
            kwargs[name] = value
        return cls(**kwargs)


def _snake_case(name):
    # baseUrl -> base_url, bundleCSS -> bundle_css
    return re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", name).lower()
