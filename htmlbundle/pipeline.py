"""
Bundle one rendered HTML document.

Assets are loaded first, all at once; renaming, inlining and combining then
run over the complete set of loaded files.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from . import inline
from .classes import minify_css_classes
from .minify import minify_document
from .options import Options
from .resolver import CSS, JS, collect_references, load_assets, save_assets

log = logging.getLogger(__name__)


@dataclass
class BundleResult:
    html: str
    # Assets rewritten by class renaming that were not inlined; the caller
    # decides whether to persist them.
    assets: Dict[str, str] = field(default_factory=dict)
    css_files: Dict[str, str] = field(default_factory=dict)
    js_files: Dict[str, str] = field(default_factory=dict)
    written: List[str] = field(default_factory=list)


def base_dir_for(options, document_path=None):
    if options.base_url:
        return os.path.abspath(options.base_url)
    if document_path:
        return os.path.dirname(os.path.abspath(document_path))
    return os.getcwd()


def bundle_html(html, options: Optional[Options] = None, document_path=None) -> BundleResult:
    """Inline, combine and/or rename classes in one HTML document."""
    options = options or Options()
    base_dir = base_dir_for(options, document_path)

    css_paths = []
    js_paths = []
    if options.inline_css or options.minify_css_classes:
        css_paths = collect_references(html, base_dir, CSS)
    if options.inline_js or options.minify_css_classes:
        js_paths = collect_references(html, base_dir, JS)

    # One fan-out for every file the document needs
    loaded = load_assets(css_paths + js_paths, {}, document_path)
    css_files = {path: loaded[path] for path in css_paths}
    js_files = {path: loaded[path] for path in js_paths}
    original = {**css_files, **js_files}

    if options.minify_css_classes:
        html = minify_css_classes(
            html,
            css_files,
            js_files,
            whitelist=options.classes_whitelist,
            unwrap_markers=options.unwrap_class_markers,
        )

    if options.combine_css:
        html = inline.combine_css(html, css_files, base_dir)
    elif options.bundle_css:
        html = inline.bundle_css(html, css_files, base_dir)

    if options.combine_js:
        html = inline.combine_js(html, js_files, base_dir)
    elif options.bundle_js:
        html = inline.bundle_js(html, js_files, base_dir)

    changed = {}
    if options.minify_css_classes:
        if not options.inline_css:
            changed.update((p, c) for p, c in css_files.items() if c != original[p])
        if not options.inline_js:
            changed.update((p, c) for p, c in js_files.items() if c != original[p])

    if options.minify_html:
        html = minify_document(html)

    return BundleResult(html, changed, css_files, js_files)


def bundle_file(input_path, output_path, options: Optional[Options] = None, output_dir=None, claimed=None) -> BundleResult:
    """Bundle an HTML file and write the result.

    Rewritten assets are written back in place, or mirrored under
    `output_dir` when it is given. Writes finish before this returns.
    Pass the same `claimed` dict for every page of a build so two pages
    cannot write differently renamed copies of a shared asset.
    """
    options = options or Options()
    with open(input_path, "r", encoding="utf-8") as f:
        html = f.read()

    result = bundle_html(html, options, document_path=input_path)

    # Assets first: a document whose assets could not be written is not emitted
    result.written = save_assets(
        result.assets,
        document_path=input_path,
        base_dir=base_dir_for(options, input_path),
        output_dir=output_dir,
        claimed=claimed,
    )

    os.makedirs(os.path.dirname(os.path.abspath(output_path)), exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(result.html)
    log.debug("Bundled %s -> %s (%d assets rewritten)", input_path, output_path, len(result.written))
    return result
