"""Inline, combine and class-minify the CSS/JS assets of rendered HTML."""

from .classes import ClassMinifier, IdentifierGenerator, minify_css_classes
from .errors import AssetLoadError, AssetWriteError, BundleError, ConfigError, MalformedTagError
from .inline import bundle_css, bundle_js, combine_css, combine_js
from .options import Options
from .pipeline import BundleResult, bundle_file, bundle_html

__version__ = "0.1.0"

__all__ = [
    "AssetLoadError",
    "AssetWriteError",
    "BundleError",
    "BundleResult",
    "ClassMinifier",
    "ConfigError",
    "IdentifierGenerator",
    "MalformedTagError",
    "Options",
    "bundle_css",
    "bundle_file",
    "bundle_html",
    "bundle_js",
    "combine_css",
    "combine_js",
    "minify_css_classes",
]
