import json
import logging
import uuid
import pytest
from pathlib import Path

from componentresolver.io import MemoryFileSystem
from componentresolver.utils.logger import HANDLER_NAMES

BUTTON_DATA = {
    "title": "button",
    "id": 189,
    "stability": "beta",
    "properties": {},
}

VALID_TREE = {
    "atoms/button/pattern.json": json.dumps(BUTTON_DATA),
    "atoms/button/button.hbs": "<button>{{label}}</button>",
    "atoms/button/elements/icon/icon.hbs": "<i class=\"{{name}}\"></i>",
    "atoms/button/_example/_hidden.hbs": "This example should not be deployed",
    "atoms/button/_example/example.hbs": "Hello World",
    "atoms/radio/pattern.json": json.dumps({"title": "radio", "id": 190}),
    "atoms/radio/radio.hbs": "<input type=\"radio\">",
    "helper/typography/pattern.json": json.dumps({"title": "typography"}),
    "helper/typography/readme.md": "Please read me!",
}

INVALID_TREE = {
    "atoms/button/pattern.json": "{\n  \"title\": \"button\",\n  \"id\": 189\n",
}


def write_tree(root: Path, tree: dict) -> Path:
    for relative, content in tree.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def valid_root(tmp_path: Path) -> Path:
    """A component tree with three components, templates, examples and a readme"""
    return write_tree(tmp_path / "valid" / "components", VALID_TREE)


@pytest.fixture
def invalid_root(tmp_path: Path) -> Path:
    """A component tree whose only pattern.json is truncated"""
    return write_tree(tmp_path / "invalid" / "components", INVALID_TREE)


@pytest.fixture
def memory_fs():
    """In-memory file system plus a root that no other test shares"""
    fs = MemoryFileSystem()
    root = f"/components-{uuid.uuid4().hex}"
    yield fs, root
    if fs.exists(root):
        fs.remove(root)


@pytest.fixture(autouse=True)
def reset_logging_handlers():
    """Remove the handlers setup_logger installs, e.g. from CLI invocations"""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if handler.get_name() in HANDLER_NAMES:
            root.removeHandler(handler)
            handler.close()
