"""Pytest configuration and shared fixtures.

The project root is put on ``sys.path`` so ``import assetcombine`` works when
tests are run from the repository root without installing the package.
"""

import os
import sys

import pytest

# Project root = parent directory of this tests/ folder
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from assetcombine import create_app  # noqa: E402
from assetcombine.config import CombineConfig  # noqa: E402

APP_JS_MTIME = 1_600_000_000


def _write(path, content):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def web_roots(tmp_path):
    """Primary web root and data dir with a few assets.

    - ``/js/app.js`` and ``/css/site.css`` only under the web root
    - ``/js/fallback.js`` only under ``<data>/web``
    - ``/js/both.js`` under both
    """
    web = tmp_path / "web"
    data = tmp_path / "data"

    app_js = _write(web / "js" / "app.js", "var app = 1;\n")
    os.utime(app_js, (APP_JS_MTIME, APP_JS_MTIME))
    _write(web / "js" / "both.js", "var both = 'web';\n")
    _write(web / "js" / "lib.min.js", "var lib=1;")
    _write(web / "js" / "myapp.js", "var myapp = 1;\n")
    _write(web / "vendor" / "js" / "app.js", "var vendor = 1;\n")
    _write(web / "css" / "site.css", "body {\n  color: red;\n}\n")
    _write(data / "web" / "js" / "fallback.js", "var fallback = 1;\n")
    _write(data / "web" / "js" / "both.js", "var both = 'data';\n")

    return web, data


@pytest.fixture
def combine_config(web_roots, tmp_path):
    web, data = web_roots
    return CombineConfig(
        web_dir=str(web),
        data_dir=str(data),
        cache_root=str(tmp_path / "cache"),
    )


@pytest.fixture
def app(web_roots, tmp_path):
    web, data = web_roots
    return create_app(
        "testing",
        COMBINE_WEB_DIR=str(web),
        COMBINE_DATA_DIR=str(data),
        COMBINE_CACHE_ROOT=str(tmp_path / "cache"),
    )
