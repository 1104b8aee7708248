import pytest

ASSETS = {
    "style-1.css": ".css-class-1 {}",
    "style-2.css": ".css-class-2 {}",
    "script-1.js": 'cssClassName("js-class-1");',
    "script-2.js": 'cssClassName("js-class-2");',
}


@pytest.fixture
def site(tmp_path):
    """A directory holding the stylesheets and scripts the test pages use."""
    for name, content in ASSETS.items():
        (tmp_path / name).write_text(content, encoding="utf-8")
    return tmp_path


@pytest.fixture
def asset_map(site):
    """Asset map keyed the way the resolver keys it."""
    return {str(site / name): content for name, content in ASSETS.items()}


@pytest.fixture
def css_files(asset_map):
    return {path: content for path, content in asset_map.items() if path.endswith(".css")}


@pytest.fixture
def js_files(asset_map):
    return {path: content for path, content in asset_map.items() if path.endswith(".js")}
