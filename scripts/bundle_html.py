#!/usr/bin/env python3
"""
Bundle rendered HTML pages with their CSS/JS assets.
Inlines or combines local stylesheets and scripts and optionally renames CSS
classes to short names.

Usage: bundle_html.py <input_dir> <output_dir> [options]
"""

import argparse
import logging
import os
import sys

from htmlbundle import BundleError, Options, bundle_file
from htmlbundle.minify import size_report


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    ap.add_argument('input_dir', help='Directory with rendered .html files')
    ap.add_argument('output_dir', help='Where bundled pages (and rewritten assets) are written')
    ap.add_argument('--base-url', default=None, help='Directory asset references resolve against (default: the page directory)')
    ap.add_argument('--bundle-css', action='store_true', help='Inline <link rel="stylesheet"> files')
    ap.add_argument('--combine-css', action='store_true', help='Inline all stylesheets as a single <style>')
    ap.add_argument('--bundle-js', action='store_true', help='Inline <script src> files')
    ap.add_argument('--combine-js', action='store_true', help='Inline all scripts as a single <script>')
    ap.add_argument('--minify-css-classes', action='store_true', help='Rename CSS classes to short names')
    ap.add_argument('--whitelist', action='append', default=[], metavar='CLASS', help='Class name to leave alone (repeatable)')
    ap.add_argument('--unwrap-class-markers', action='store_true', help='Replace cssClassName("x") calls with the bare string')
    ap.add_argument('--minify-html', action='store_true', help='Minify the final HTML with minify-html')
    ap.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    return ap.parse_args(argv)


def options_from_args(args):
    return Options(
        base_url=args.base_url,
        bundle_css=args.bundle_css,
        combine_css=args.combine_css,
        bundle_js=args.bundle_js,
        combine_js=args.combine_js,
        minify_css_classes=args.minify_css_classes,
        classes_whitelist=args.whitelist,
        unwrap_class_markers=args.unwrap_class_markers,
        minify_html=args.minify_html,
    )


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s: %(message)s',
    )
    options = options_from_args(args)

    input_dir = args.input_dir
    output_dir = args.output_dir

    # Create output directory if it doesn't exist
    os.makedirs(output_dir, exist_ok=True)

    failed = 0
    # Rewritten assets shared by several pages, target path -> (content, page)
    claimed = {}
    print('-- HTML bundling:')
    for filename in sorted(os.listdir(input_dir)):
        if not filename.endswith('.html'):
            continue
        input_path = os.path.join(input_dir, filename)
        output_path = os.path.join(output_dir, filename)

        with open(input_path, 'r', encoding='utf-8') as f:
            original = f.read()

        try:
            result = bundle_file(input_path, output_path, options, output_dir=output_dir, claimed=claimed)
        except BundleError as e:
            print(f'  {filename}: FAILED: {e}', file=sys.stderr)
            failed += 1
            continue

        print(size_report(filename, original, result.html))
        for path in result.written:
            print(f'    rewrote {path}')

    return 1 if failed else 0


if __name__ == '__main__':
    sys.exit(main())
