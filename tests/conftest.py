# -*- coding: utf-8 -*-
"""
Shared fixtures for the cloudimg catalog tests.

Provides SQLite-backed stores in a temporary directory, an in-memory
provider driver, and a registry wired to both.

Created
-------
2026-10-18
"""

import pytest

from cloudimg.catalog.database import ImageIndex
from cloudimg.catalog.errors import ExternalProviderError
from cloudimg.catalog.kvstore import SqliteKeyValueStore
from cloudimg.catalog.models import (
    ConnectionTarget,
    KeyValue,
    ProviderImageRecord,
)
from cloudimg.catalog.provider import ProviderClient
from cloudimg.catalog.registry import ImageRegistry
from cloudimg.catalog.repository import image_repository


class FakeProvider(ProviderClient):
    """In-memory provider driver keyed by connection name."""

    def __init__(self):
        self.images = {}
        self.failing = set()
        self.calls = []

    def list_images(self, connection_name):
        self.calls.append(connection_name)
        if connection_name in self.failing:
            raise ExternalProviderError(f"{connection_name} is unavailable")
        return list(self.images.get(connection_name, []))

    def get_image(self, connection_name, csp_image_id):
        for image in self.images.get(connection_name, []):
            if image.name_id == csp_image_id:
                return image
        raise ExternalProviderError(f"image {csp_image_id} not found")

    def list_connection_targets(self):
        return [ConnectionTarget(config_name=name) for name in self.images]


def _make_image(name_id, guest_os="Ubuntu", status="available", **attributes):
    return ProviderImageRecord(
        name_id=name_id,
        system_id=f"sys-{name_id}",
        guest_os=guest_os,
        status=status,
        key_value_list=[KeyValue(k, v) for k, v in attributes.items()],
    )


@pytest.fixture
def make_image():
    """Factory for provider image records; keyword args become attributes."""
    return _make_image


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def store(tmp_path):
    kv = SqliteKeyValueStore(tmp_path / "store.db")
    yield kv
    kv.close()


@pytest.fixture
def index(tmp_path):
    idx = ImageIndex(tmp_path / "index.db")
    yield idx
    idx.close()


@pytest.fixture
def registry(store, index, fake_provider):
    return ImageRegistry(image_repository(store), index, fake_provider)
