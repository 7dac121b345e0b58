from __future__ import annotations

from assetcombine.config import CombineConfig, config


def test_from_mapping_defaults() -> None:
    settings = CombineConfig.from_mapping({})

    assert settings == CombineConfig()
    assert settings.enabled is False
    assert settings.gzip is True
    assert settings.pragma_header == "public"
    assert settings.client_cache_max_age is None
    assert settings.cache_dir_name == "combine"
    assert settings.minifier_names() == ["js", "css"]


def test_from_mapping_reads_combine_keys() -> None:
    settings = CombineConfig.from_mapping(
        {
            "COMBINE_WEB_DIR": "/srv/web",
            "COMBINE_DATA_DIR": "/srv/data",
            "COMBINE_CACHE_ROOT": "/srv/cache",
            "COMBINE_CACHE_DIR": "bundles",
            "COMBINE_ENABLED": True,
            "COMBINE_GZIP": False,
            "COMBINE_PRAGMA_HEADER": "private",
            "COMBINE_CLIENT_CACHE_MAX_AGE": 7,
            "COMBINE_JS": {"minifier": "custom-js"},
            "COMBINE_CSS": {"minify_method": "rcssmin"},
        }
    )

    assert settings.web_dir == "/srv/web"
    assert settings.data_dir == "/srv/data"
    assert settings.cache_root == "/srv/cache"
    assert settings.cache_dir_name == "bundles"
    assert settings.enabled is True
    assert settings.gzip is False
    assert settings.pragma_header == "private"
    assert settings.client_cache_max_age == 7
    assert settings.minifier_names() == ["custom-js", "css"]


def test_config_classes() -> None:
    assert config["default"] is config["development"]
    assert config["testing"].__name__ == "TestingConfig"
    assert config["testing"].TESTING is True
    assert config["testing"].COMBINE_JS["minify_method"] == "jsmin"
    assert config["testing"].COMBINE_CSS["minify_method"] == "cssmin"
