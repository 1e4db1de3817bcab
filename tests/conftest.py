import logging

import pytest

from docsync.services.catalog import Catalog

_DOCS = {
    "guides/a.md": "---\ntitle: Page A\n---\nRead [page B](doc:b) and [page C](doc:c).\n",
    "guides/b.md": "---\ntitle: Page B\n---\nContact [us](mailto:user@example.com).\n",
    "guides/b/b-child.md": "---\ntitle: Child of B\n---\nBack to [B](doc:b#top).\n",
    "reference/api.md": "---\ntitle: API\n---\nSee https://example.com/api.\n",
}


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop the console handler installed by CLI invocations."""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
    root.setLevel(logging.WARNING)


@pytest.fixture
def docs_dir(tmp_path):
    """A small docs tree with two categories and one child page."""
    root = tmp_path / "docs"
    for relative, text in _DOCS.items():
        file = root / relative
        file.parent.mkdir(parents=True, exist_ok=True)
        file.write_text(text, encoding="utf-8")
    return root


@pytest.fixture
def catalog(docs_dir):
    return Catalog.build(docs_dir)
