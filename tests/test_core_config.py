# -*- coding: utf-8 -*-
"""
Tests for cloudimg.core.config — CatalogConfig and load_config.

Created
-------
2026-10-18
"""

import json

from cloudimg.core.config import CatalogConfig, load_config


class TestCatalogConfig:
    def test_defaults(self):
        cfg = CatalogConfig()
        assert cfg.kv_store_path is None
        assert cfg.index_path is None
        assert cfg.provider_transport == "rest"
        assert cfg.provider_url == "http://localhost:1024/spider"
        assert cfg.request_timeout == 10.0
        assert cfg.log_level == "INFO"

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "config.json"
        cfg = CatalogConfig(provider_transport="gateway", request_timeout=3.0)
        cfg.save(path)

        loaded = load_config(path)
        assert loaded.provider_transport == "gateway"
        assert loaded.request_timeout == 3.0
        # Other fields should be default
        assert loaded.provider_url == "http://localhost:1024/spider"

    def test_load_missing_file_returns_defaults(self, tmp_path):
        cfg = load_config(tmp_path / "nonexistent.json")
        assert cfg == CatalogConfig()

    def test_load_corrupted_file_returns_defaults(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("not json {{{")
        assert load_config(path) == CatalogConfig()

    def test_load_non_object_returns_defaults(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2, 3]")
        assert load_config(path) == CatalogConfig()

    def test_unknown_keys_ignored(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({
            'log_level': "DEBUG",
            'thumb_size': 256,
        }))
        cfg = load_config(path)
        assert cfg.log_level == "DEBUG"
        assert not hasattr(cfg, 'thumb_size')
