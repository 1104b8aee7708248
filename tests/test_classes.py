import itertools
import logging

from htmlbundle.classes import ClassMinifier, IdentifierGenerator, minify_css_classes, selector_spans


def test_identifier_sequence():
    names = list(itertools.islice(IdentifierGenerator(), 28))
    assert names[:26] == [chr(c) for c in range(ord("a"), ord("z") + 1)]
    assert names[26:] == ["aa", "ab"]


def test_identifier_carry():
    gen = IdentifierGenerator()
    names = [gen.next() for _ in range(26 + 26 * 26 + 1)]
    assert names[51] == "az"
    assert names[52] == "ba"
    assert names[-2] == "zz"
    assert names[-1] == "aaa"


def test_identifier_generators_are_independent():
    first = IdentifierGenerator()
    second = IdentifierGenerator()
    assert [next(first), next(first)] == ["a", "b"]
    assert next(second) == "a"


def test_end_to_end_example():
    css_files = {"/site/style.css": ".css-class-1 {}.css-class-2 {}"}
    html = minify_css_classes('<div class="css-class-1 css-class-2"/>', css_files, {})
    assert html == '<div class="a b"/>'
    assert css_files == {"/site/style.css": ".a {}.b {}"}


def test_ranking_ties_follow_encounter_order(caplog):
    css_files = {"/s.css": ".alpha {} .beta {} .alpha .beta {}"}
    minifier = ClassMinifier()
    with caplog.at_level(logging.WARNING, logger="htmlbundle.classes"):
        html = minifier.run('<i class="alpha beta gamma"></i>', css_files, {})

    assert dict(minifier.usage) == {"alpha": 3, "beta": 3, "gamma": 1}
    assert minifier.renames == {"alpha": "a", "beta": "b", "gamma": "c"}
    assert html == '<i class="a b c"></i>'
    assert css_files["/s.css"] == ".a {} .b {} .a .b {}"
    assert 'css class "gamma" is only ever used once' in caplog.text
    assert "alpha" not in caplog.text


def test_most_used_name_gets_shortest_identifier():
    minifier = ClassMinifier()
    minifier.run('<p class="rare"></p>' + '<p class="common"></p>' * 30, {}, {})
    assert minifier.renames == {"common": "a", "rare": "b"}


def test_whitelist_is_never_counted_or_renamed():
    css_files = {"/s.css": ".keep {} .box {}"}
    js_files = {"/a.js": "cssClassName('keep'); cssClassName('box');"}
    minifier = ClassMinifier(whitelist=["keep"])
    html = minifier.run('<div class="keep box"></div>', css_files, js_files)

    assert "keep" not in minifier.usage
    assert "keep" not in minifier.renames
    assert html == '<div class="keep a"></div>'
    assert css_files["/s.css"] == ".keep {} .a {}"
    assert js_files["/a.js"] == "cssClassName('keep'); cssClassName('a');"


def test_generated_names_skip_whitelisted_ones():
    minifier = ClassMinifier(whitelist=["a"])
    html = minifier.run('<div class="a header header"></div>', {}, {})
    assert minifier.renames == {"header": "b"}
    assert html == '<div class="a b b"></div>'


def test_idempotent_on_minified_output():
    css_files = {"/s.css": ".nav .item {} .item:hover {} .keep {}"}
    js_files = {"/a.js": 'el.classList.add(cssClassName("item"), cssClassName(\'nav\'));'}
    html = '<ul class="nav keep"><li class="item"></li></ul>'

    once = minify_css_classes(html, css_files, js_files, whitelist=["keep"])
    css_once, js_once = dict(css_files), dict(js_files)
    twice = minify_css_classes(once, css_files, js_files, whitelist=["keep"])

    assert twice == once
    assert css_files == css_once
    assert js_files == js_once


def test_js_marker_keeps_quotes_and_wrapper():
    js_files = {"/a.js": """cssClassName("big"); cssClassName( 'big' ); notcssClassName("big"); cssClassName(name);"""}
    minify_css_classes('<b class="big"></b>', {}, js_files)
    assert js_files["/a.js"] == """cssClassName("a"); cssClassName( 'a' ); notcssClassName("big"); cssClassName(name);"""


def test_js_marker_unwrapped():
    js_files = {"/a.js": """x = cssClassName("big"); y = cssClassName('other');"""}
    minify_css_classes('<b class="big other"></b>', {}, js_files, unwrap_markers=True)
    assert js_files["/a.js"] == """x = "a"; y = 'b';"""


def test_markers_in_html_are_counted_and_rewritten():
    html = """<button class="btn" onclick="toggle(cssClassName('btn'))"></button>"""
    assert minify_css_classes(html, {}, {}) == """<button class="a" onclick="toggle(cssClassName('a'))"></button>"""


def test_inline_style_blocks_are_renamed():
    html = "<style>.title { color: red }</style><h1 class='title'></h1>"
    assert minify_css_classes(html, {}, {}) == "<style>.a { color: red }</style><h1 class='a'></h1>"


def test_class_attribute_layout_is_preserved():
    html = '<div class="  foo\n\tbar "></div><div data-class="foo" classname="bar"></div>'
    assert minify_css_classes(html, {}, {}) == '<div class="  a\n\tb "></div><div data-class="foo" classname="bar"></div>'


def test_only_selectors_are_scanned_in_css():
    css = """/* .ghost */
@import url(theme.css);
@media (min-width: 1.5em) {
  .btn > .icon, a.btn[href$=".pdf"] { background: url(img/btn.png); }
}
.icon::after { content: ".btn {"; }
"""
    css_files = {"/s.css": css}
    minifier = ClassMinifier()
    minifier.run("", css_files, {})

    assert dict(minifier.usage) == {"btn": 2, "icon": 2}
    assert css_files["/s.css"] == """/* .ghost */
@import url(theme.css);
@media (min-width: 1.5em) {
  .a > .b, a.a[href$=".pdf"] { background: url(img/btn.png); }
}
.b::after { content: ".btn {"; }
"""


def test_selector_spans():
    css = "a{x:y} /* c */ .b .c { } @media x { .d{} }"
    assert [css[s:e] for s, e in selector_spans(css)] == ["a", " ", " .b .c ", " @media x ", " .d"]


def test_unknown_names_left_verbatim():
    minifier = ClassMinifier(whitelist=["x"])
    minifier.renames = {"known": "a"}
    html = minifier.rewrite('<i class="known x unknown"></i>', {}, {})
    assert html == '<i class="a x unknown"></i>'
