"""
Resolve <link href> / <script src> references and read or write the files
they point at.
"""

import logging
import os
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, List, Optional

from .errors import AssetLoadError, AssetWriteError, MalformedTagError
from .scanner import LINK_TAGS, SCRIPT_TAGS, attribute_value, is_stylesheet_link, parse_attributes

log = logging.getLogger(__name__)

ABSOLUTE_URL_RE = re.compile(r"^(?:[a-z][a-z0-9+.-]*:)?//", re.IGNORECASE)
DATA_URI_RE = re.compile(r"^data:", re.IGNORECASE)

MAX_WORKERS = 8


@dataclass(frozen=True)
class AssetKind:
    """How one asset type is referenced from and inlined into HTML."""

    name: str
    scanner: object
    locator: str
    output_tag: str
    dropped: tuple = ()
    stylesheets_only: bool = False


CSS = AssetKind("css", LINK_TAGS, "href", "style", dropped=("href", "rel", "type"), stylesheets_only=True)
JS = AssetKind("js", SCRIPT_TAGS, "src", "script", dropped=("src",))


def is_absolute_url(value):
    """True for scheme://host/..., protocol-relative //host/... and data: URIs."""
    return bool(ABSOLUTE_URL_RE.match(value) or DATA_URI_RE.match(value))


def resolve_reference(value, base_dir) -> Optional[str]:
    """Turn a relative src/href into an absolute path under base_dir.

    Returns None for empty values and external URLs. A leading '/' means
    "relative to base_dir", not the filesystem root.
    """
    if value is None:
        return None
    value = value.strip()
    if not value or is_absolute_url(value):
        return None
    # Query strings and fragments are not part of the file name
    value = re.split(r"[?#]", value, maxsplit=1)[0]
    if value.startswith("/"):
        value = value[1:]
    if not value:
        return None
    return os.path.normpath(os.path.join(os.path.abspath(base_dir), value))


def candidate_path(attributes, kind, base_dir) -> Optional[str]:
    """Asset path a parsed tag refers to, or None if it is not a candidate."""
    if kind.stylesheets_only and not is_stylesheet_link(attributes):
        return None
    return resolve_reference(attribute_value(attributes, kind.locator), base_dir)


def collect_references(html, base_dir, kind) -> List[str]:
    """Ordered, de-duplicated asset paths referenced by candidate tags."""
    paths = []
    for match in kind.scanner.scan(html):
        try:
            attributes = parse_attributes(match.attributes)
        except MalformedTagError as e:
            log.debug("Skipping malformed tag %r: %s", match.text, e)
            continue
        path = candidate_path(attributes, kind, base_dir)
        if path and path not in paths:
            paths.append(path)
    return paths


def read_asset(path):
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def write_asset(path, content):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)


def load_assets(paths, assets: Dict[str, str], document_path=None) -> Dict[str, str]:
    """Read every path not already in `assets`, concurrently, into `assets`.

    All reads are finished before this returns. The first failure is raised
    as AssetLoadError; nothing is ever stored as empty content.
    """
    pending = [p for p in dict.fromkeys(paths) if p not in assets]
    if not pending:
        return assets

    with ThreadPoolExecutor(max_workers=min(MAX_WORKERS, len(pending))) as executor:
        futures = {path: executor.submit(read_asset, path) for path in pending}

    for path, future in futures.items():
        try:
            assets[path] = future.result()
        except (OSError, ValueError) as e:
            # ValueError covers undecodable bytes and NUL characters in the path
            raise AssetLoadError(path, document_path, getattr(e, "strerror", None) or str(e)) from e
        log.debug("Loaded %s (%d bytes)", path, len(assets[path]))
    return assets


def output_path_for(path, base_dir=None, output_dir=None, document_path=None):
    """Where a rewritten asset is written: in place, or mirrored under output_dir.

    With an output_dir the source is never the target; assets outside
    base_dir cannot be mirrored and raise AssetWriteError.
    """
    if not output_dir:
        return path
    base_dir = os.path.abspath(base_dir or os.getcwd())
    try:
        relative = os.path.relpath(path, base_dir)
    except ValueError:
        # Different drive on Windows
        relative = os.pardir
    if relative == os.pardir or relative.startswith(os.pardir + os.sep):
        raise AssetWriteError(path, document_path, f"outside base directory {base_dir}, cannot mirror it under {output_dir}")
    return os.path.join(os.path.abspath(output_dir), relative)


def save_assets(assets: Dict[str, str], document_path=None, base_dir=None, output_dir=None, claimed=None) -> List[str]:
    """Write rewritten assets concurrently. Returns the paths written.

    `claimed` maps target paths already written by earlier documents to
    (content, document_path). Each document renames classes on its own, so a
    target claimed with different content is an AssetWriteError; nothing is
    written for this document in that case.
    """
    if not assets:
        return []

    targets = {path: output_path_for(path, base_dir, output_dir, document_path) for path in assets}
    if claimed is not None:
        for path, target in targets.items():
            if target in claimed and claimed[target][0] != assets[path]:
                raise AssetWriteError(
                    target,
                    document_path,
                    f"already written with different class names for {claimed[target][1]}",
                )

    with ThreadPoolExecutor(max_workers=min(MAX_WORKERS, len(targets))) as executor:
        futures = {path: executor.submit(write_asset, target, assets[path]) for path, target in targets.items()}

    for path, future in futures.items():
        try:
            future.result()
        except (OSError, ValueError) as e:
            raise AssetWriteError(targets[path], document_path, getattr(e, "strerror", None) or str(e)) from e
        log.debug("Wrote %s", targets[path])
        if claimed is not None:
            claimed.setdefault(targets[path], (assets[path], document_path))
    return list(targets.values())
