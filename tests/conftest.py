import importlib.resources
import shutil
from pathlib import Path

import pytest

from devtemplates import templates
from devtemplates.config import HOME_ENV_VAR


@pytest.fixture
def repo(tmp_path):
    d = tmp_path / "project"
    d.mkdir()
    return d


@pytest.fixture
def template_home(tmp_path, monkeypatch):
    """Writable copy of the bundled templates, selected via DEVTEMPLATES_HOME."""
    home = tmp_path / "templates"
    shutil.copytree(
        Path(str(importlib.resources.files(templates))),
        home,
        ignore=shutil.ignore_patterns("__pycache__", "__init__.py"),
    )
    monkeypatch.setenv(HOME_ENV_VAR, str(home))
    return home
