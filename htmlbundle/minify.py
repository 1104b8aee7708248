"""
Last pass over a bundled page: minify-html, plus the size line the CLI prints.
"""

import minify_html


def minify_document(html):
    """Minify a bundled page, including the <style>/<script> blocks inlined into it.

    Runs after class renaming, so the class names it sees are already final.
    """
    return minify_html.minify(
        html,
        # Inlined and combined assets live in these blocks
        minify_js=True,
        minify_css=True,
        remove_processing_instructions=True,
        minify_doctype=True,
        # Output is also read back by this tool's own tag scanner, which
        # expects </style> and </script> and explicit <html>/<head>
        keep_closing_tags=True,
        keep_html_and_head_opening_tags=True,
        # <!...> declarations other than the doctype pass through
        remove_bangs=False,
    )


def size_report(name, original, result):
    """One progress line: sizes in bytes and the reduction."""
    original_size = len(original.encode("utf-8"))
    result_size = len(result.encode("utf-8"))
    reduction = (1 - result_size / original_size) * 100 if original_size > 0 else 0
    return f"  {name}: {original_size} -> {result_size} bytes ({reduction:.1f}% reduction)"
