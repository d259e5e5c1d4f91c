import logging
import os
import sys

import pytest
from unittest.mock import patch

from _util import support


# pytest seems to tweak logging such that Staticflow's debug logs go to
# stderr, which is then hella spammy if one is using --capture=no. So, we
# explicitly turn default logging back down.
logging.basicConfig(level=logging.INFO)


@pytest.fixture(autouse=True)
def fake_user_home():
    # Ignore any real user homedir for purpose of testing.
    # This allows, for example, a user who has real Staticflow configs in
    # their homedir to still run the test suite safely.
    with patch("invoke.config.expanduser", side_effect=lambda x: x):
        yield


@pytest.fixture
def reset_environ():
    """
    Resets `os.environ` to its prior state after the fixtured test finishes.
    """
    old_environ = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(old_environ)


@pytest.fixture
def chdir_support():
    # Always do things relative to tests/_support
    cwd = os.getcwd()
    os.chdir(support)
    yield
    os.chdir(cwd)


@pytest.fixture
def clean_sys_modules():
    """
    Attempt to nix any imports incurred by the test, to prevent state bleed.

    In some cases this prevents outright errors (eg a test accidentally relying
    on another's import of a pipeline in the support folder) and in others
    it's required because we're literally testing runtime imports.
    """
    snapshot = sys.modules.copy()
    yield
    # Iterate over another copy to avoid ye olde mutate-during-iterate problem
    # NOTE: cannot simply 'sys.modules = snapshot' as that is warned against
    for name, module in sys.modules.copy().items():
        # Delete anything newly added (imported)
        if name not in snapshot:
            del sys.modules[name]
    sys.modules.update(snapshot)


@pytest.fixture
def integration(reset_environ, chdir_support, clean_sys_modules):
    yield


@pytest.fixture
def site(tmp_path, monkeypatch):
    """
    A small project: ``src/`` with markup, a script, a stylesheet & an image.

    The working directory is the project root for the fixtured test.
    """
    src = tmp_path / "src"
    for subdir in ("js", "css", "img"):
        (src / subdir).mkdir(parents=True)
    (src / "index.html").write_text(
        '<link rel="stylesheet" href="/css/site.css">\n'
        '<script src="js/app.js"></script>\n'
        '<img src="img/logo.png">\n'
    )
    (src / "js" / "app.js").write_text('console.log("hello");\n')
    (src / "css" / "site.css").write_text(
        "body { background: url(/img/logo.png); }\n"
    )
    png = b"\x89PNG\r\n\x1a\n\x00\xffjs/app.js"
    (src / "img" / "logo.png").write_bytes(png)
    monkeypatch.chdir(tmp_path)
    return tmp_path
