# -*- coding: utf-8 -*-
"""
Tests for cloudimg.catalog.resolver — Store path and transport resolution.

Created
-------
2026-10-18
"""

import os
from pathlib import Path
from unittest import mock

from cloudimg.catalog.resolver import (
    resolve_catalog_dir,
    resolve_store_paths,
    resolve_transport,
)
from cloudimg.core.config import CatalogConfig


class TestResolveCatalogDir:

    def test_env_var_priority(self):
        with mock.patch.dict(os.environ, {'CLOUDIMG_HOME': '/srv/cloudimg'}):
            assert resolve_catalog_dir() == Path('/srv/cloudimg')

    def test_default_in_home(self, tmp_path):
        env = {k: v for k, v in os.environ.items() if k != 'CLOUDIMG_HOME'}
        with mock.patch.dict(os.environ, env, clear=True):
            with mock.patch.object(Path, 'home', return_value=tmp_path):
                assert resolve_catalog_dir() == tmp_path / ".cloudimg"


class TestResolveStorePaths:

    def test_defaults_under_catalog_dir(self, tmp_path):
        with mock.patch.dict(os.environ, {'CLOUDIMG_HOME': str(tmp_path)}):
            kv_path, index_path = resolve_store_paths(CatalogConfig())
        assert kv_path == tmp_path / "store.db"
        assert index_path == tmp_path / "index.db"

    def test_explicit_paths(self, tmp_path):
        config = CatalogConfig(
            kv_store_path=str(tmp_path / "kv.sqlite"),
            index_path=str(tmp_path / "idx.sqlite"),
        )
        assert resolve_store_paths(config) == (
            tmp_path / "kv.sqlite", tmp_path / "idx.sqlite",
        )


class TestResolveTransport:

    def test_env_var_wins(self):
        with mock.patch.dict(
            os.environ, {'CLOUDIMG_PROVIDER_TRANSPORT': 'gateway'}
        ):
            assert resolve_transport(CatalogConfig()) == "gateway"

    def test_config_value(self):
        env = {k: v for k, v in os.environ.items()
               if k != 'CLOUDIMG_PROVIDER_TRANSPORT'}
        with mock.patch.dict(os.environ, env, clear=True):
            config = CatalogConfig(provider_transport="gateway")
            assert resolve_transport(config) == "gateway"
            assert resolve_transport(CatalogConfig()) == "rest"
