from __future__ import annotations

import os

from conftest import APP_JS_MTIME


def test_check_reports_each_asset(app, web_roots) -> None:
    web, _ = web_roots
    runner = app.test_cli_runner()

    result = runner.invoke(args=["combine", "check", "/js/app.js", "http://cdn.example.com/x.js", "/js/missing.js"])

    assert result.exit_code == 0
    assert "/js/app.js: combinable" in result.output
    assert f"path: {web}/js/app.js" in result.output
    assert f"timestamp: {APP_JS_MTIME}" in result.output
    assert "http://cdn.example.com/x.js: not combinable" in result.output
    assert "/js/missing.js: not combinable" in result.output


def test_check_honours_exclusions(app) -> None:
    result = app.test_cli_runner().invoke(args=["combine", "check", "/js/app.js", "--exclude", "app.js"])

    assert result.exit_code == 0
    assert "/js/app.js: not combinable" in result.output


def test_check_requires_an_asset(app) -> None:
    result = app.test_cli_runner().invoke(args=["combine", "check"])

    assert result.exit_code != 0


def test_clear_cache_removes_directory(app, tmp_path) -> None:
    cache_dir = tmp_path / "cache" / "combine"
    (cache_dir / "js").mkdir(parents=True)
    (cache_dir / "js" / "bundle.js").write_text("var a;", encoding="utf-8")

    result = app.test_cli_runner().invoke(args=["combine", "clear-cache", "--yes"])

    assert result.exit_code == 0
    assert "Removed" in result.output
    assert not os.path.exists(cache_dir)


def test_clear_cache_asks_for_confirmation(app, tmp_path) -> None:
    cache_dir = tmp_path / "cache" / "combine"
    cache_dir.mkdir(parents=True)

    result = app.test_cli_runner().invoke(args=["combine", "clear-cache"], input="n\n")

    assert "Operation cancelled." in result.output
    assert cache_dir.is_dir()


def test_clear_cache_without_directory(app) -> None:
    result = app.test_cli_runner().invoke(args=["combine", "clear-cache", "--yes"])

    assert result.exit_code == 0
    assert "Nothing to clear" in result.output
