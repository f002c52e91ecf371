# -*- coding: utf-8 -*-
"""
Tests for cloudimg.catalog.synchronizer — ImageSyncWorker.

Created
-------
2026-10-18
"""

from unittest.mock import MagicMock, patch

import pytest

from cloudimg.catalog.errors import (
    ExistenceCheckFailed,
    ExternalProviderError,
    InvalidProviderRecord,
    ValidationError,
)
from cloudimg.catalog.models import ProviderImageRecord
from cloudimg.catalog.provider import ProviderClient, RestProviderClient
from cloudimg.catalog.registry import ImageRegistry
from cloudimg.catalog.synchronizer import ImageSyncWorker, sync_image_id


@pytest.fixture
def worker(registry, fake_provider):
    return ImageSyncWorker(registry=registry, provider=fake_provider)


@pytest.fixture
def three_images(make_image):
    return [
        make_image("ami-1", Name="Ubuntu_20.04"),
        make_image("ami-2", Name="Ubuntu_22.04"),
        make_image("ami-3", guest_os="CentOS", Name="centos-7.9"),
    ]


class TestSyncImageId:

    def test_prefix_and_normalize(self):
        assert sync_image_id("aws-east", "Ubuntu_20.04:LTS") == "aws-east-ubuntu-20-04-lts"


# ---------------------------------------------------------------------------
# sync_target
# ---------------------------------------------------------------------------

class TestSyncTarget:

    def test_registers_new_images(self, worker, registry, fake_provider, three_images):
        fake_provider.images["aws-east"] = three_images
        assert worker.sync_target("aws-east", "ns1") == 3

        image = registry.get_image("ns1", "aws-east-ubuntu-20-04")
        assert image.name == "aws-east-ubuntu-20-04"
        assert image.connection_name == "aws-east"
        assert image.csp_image_id == "ami-1"
        assert image.csp_image_name == "Ubuntu_20.04"
        assert image.is_auto_generated is True

    def test_second_run_is_idempotent(self, worker, registry, fake_provider, three_images):
        fake_provider.images["aws-east"] = three_images
        assert worker.sync_target("aws-east", "ns1") == 3
        assert worker.sync_target("aws-east", "ns1") == 0
        assert len(registry.list_images("ns1")) == 3
        assert len(registry.search("ns1")) == 3

    def test_name_id_used_without_name_attribute(self, worker, registry,
                                                 fake_provider, make_image):
        fake_provider.images["aws-east"] = [make_image("ami-0abc")]
        worker.sync_target("aws-east", "ns1")
        assert registry.get_image("ns1", "aws-east-ami-0abc").csp_image_id == "ami-0abc"

    def test_list_failure_propagates(self, worker, fake_provider):
        fake_provider.images["aws-east"] = []
        fake_provider.failing.add("aws-east")
        with pytest.raises(ExternalProviderError):
            worker.sync_target("aws-east", "ns1")

    def test_conversion_failure_aborts(self, worker, registry, fake_provider, make_image):
        fake_provider.images["aws-east"] = [
            make_image("ami-1", Name="ubuntu"),
            ProviderImageRecord(name="broken"),
            make_image("ami-3", Name="centos"),
        ]
        with pytest.raises(InvalidProviderRecord):
            worker.sync_target("aws-east", "ns1")
        assert [r.id for r in registry.list_images("ns1")] == ["aws-east-ubuntu"]

    def test_registration_failure_aborts(self, worker, fake_provider, make_image):
        fake_provider.images["aws-east"] = [
            make_image("ami-1", Name="Windows Server 2019 (HVM)"),
        ]
        with pytest.raises(ValidationError):
            worker.sync_target("aws-east", "ns1")

    def test_existence_check_failure_skips(self, fake_provider, three_images):
        fake_provider.images["aws-east"] = three_images
        registry = MagicMock(spec=ImageRegistry)
        registry.image_exists.side_effect = ExistenceCheckFailed("store down")
        worker = ImageSyncWorker(registry=registry, provider=fake_provider)

        assert worker.sync_target("aws-east", "ns1") == 0
        registry.register_with_record.assert_not_called()

    def test_invalid_namespace_rejected_before_listing(self, worker, fake_provider):
        fake_provider.images["aws-east"] = []
        with pytest.raises(ValidationError):
            worker.sync_target("aws-east", "Bad_NS")
        assert fake_provider.calls == []

    def test_existing_entries_skipped(self, worker, registry, fake_provider, three_images):
        fake_provider.images["aws-east"] = three_images[:1]
        worker.sync_target("aws-east", "ns1")
        fake_provider.images["aws-east"] = three_images
        assert worker.sync_target("aws-east", "ns1") == 2


# ---------------------------------------------------------------------------
# sync_all
# ---------------------------------------------------------------------------

class TestSyncAll:

    def test_failing_target_is_swallowed(self, worker, fake_provider, make_image):
        fake_provider.images["t1"] = [
            make_image("ami-1", Name="ubuntu"),
            make_image("ami-2", Name="centos"),
        ]
        fake_provider.images["t2"] = [make_image("ami-3", Name="debian")]
        fake_provider.images["t3"] = [make_image("ami-4", Name="rocky")]
        fake_provider.failing.add("t2")

        summary = worker.sync_all("ns1")

        assert summary.target_count == 3
        assert summary.image_count == 3
        assert summary.degraded is True
        assert [r.image_count for r in summary.results] == [2, 0, 1]
        assert summary.results[1].error == "t2 is unavailable"
        assert fake_provider.calls == ["t1", "t2", "t3"]

    def test_healthy_sync(self, worker, fake_provider, make_image):
        fake_provider.images["t1"] = [make_image("ami-1", Name="ubuntu")]
        summary = worker.sync_all("ns1")
        assert summary.degraded is False
        assert summary.image_count == 1

    def test_rerun_adds_nothing(self, worker, fake_provider, three_images):
        fake_provider.images["aws-east"] = three_images
        worker.sync_all("ns1")
        summary = worker.sync_all("ns1")
        assert summary.target_count == 1
        assert summary.image_count == 0

    @patch("cloudimg.catalog.provider.requests.get")
    def test_malformed_driver_record_fails_only_its_target(self, mock_get, registry):
        image_lists = {
            't1': {'image': [{'IId': "ami-1"}]},
            't2': {'image': [{
                'IId': {'NameId': "ami-2"},
                'KeyValueList': [{'Key': "Name", 'Value': "ubuntu"}],
            }]},
        }

        def driver_get(url, json=None, timeout=None):
            if url.endswith("/connectionconfig"):
                payload = {'connectionconfig': [
                    {'ConfigName': "t1"}, {'ConfigName': "t2"},
                ]}
            else:
                payload = image_lists[json['ConnectionName']]
            resp = MagicMock(status_code=200)
            resp.json.return_value = payload
            return resp

        mock_get.side_effect = driver_get
        worker = ImageSyncWorker(
            registry=registry,
            provider=RestProviderClient("http://driver:1024/spider"),
        )

        summary = worker.sync_all("ns1")

        assert summary.target_count == 2
        assert summary.image_count == 1
        assert summary.results[0].error is not None
        assert summary.results[1].ok
        assert registry.get_image("ns1", "t2-ubuntu").csp_image_id == "ami-2"

    def test_target_listing_failure_propagates(self, registry):
        provider = MagicMock(spec=ProviderClient)
        provider.list_connection_targets.side_effect = ExternalProviderError("down")
        worker = ImageSyncWorker(registry=registry, provider=provider)
        with pytest.raises(ExternalProviderError):
            worker.sync_all("ns1")

    def test_invalid_namespace(self, worker, fake_provider):
        with pytest.raises(ValidationError):
            worker.sync_all("Bad_NS")
        assert fake_provider.calls == []

    def test_no_targets(self, worker):
        summary = worker.sync_all("ns1")
        assert summary.target_count == 0
        assert summary.image_count == 0
