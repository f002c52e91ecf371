# -*- coding: utf-8 -*-
"""
Tests for cloudimg.catalog.conversion — provider to catalog records.

Created
-------
2026-10-18
"""

import pytest

from cloudimg.catalog.conversion import convert_provider_image, lookup_key_value
from cloudimg.catalog.errors import InvalidProviderRecord
from cloudimg.catalog.models import KeyValue, ProviderImageRecord


class TestLookupKeyValue:

    def test_first_match_wins(self):
        kvs = [KeyValue("Name", "first"), KeyValue("Name", "second")]
        assert lookup_key_value(kvs, "Name") == "first"

    def test_missing_key(self):
        assert lookup_key_value([KeyValue("Other", "x")], "Name") == ""


class TestConvertProviderImage:

    def test_full_mapping(self, make_image):
        provider = make_image(
            "ami-0abc",
            guest_os="Ubuntu",
            status="available",
            Name="ubuntu-20.04",
            Description="Ubuntu LTS",
            CreationDate="2024-01-01",
        )
        record = convert_provider_image(provider)
        assert record.name == "ubuntu-20.04"
        assert record.csp_image_id == "ami-0abc"
        assert record.csp_image_name == "ubuntu-20.04"
        assert record.description == "Ubuntu LTS"
        assert record.creation_date == "2024-01-01"
        assert record.guest_os == "Ubuntu"
        assert record.status == "available"
        assert record.key_value_list == provider.key_value_list

    def test_context_fields_left_empty(self, make_image):
        record = convert_provider_image(make_image("ami-0abc", Name="x"))
        assert record.namespace == ""
        assert record.id == ""
        assert record.connection_name == ""
        assert record.is_auto_generated is False

    def test_name_falls_back_to_name_id(self, make_image):
        record = convert_provider_image(make_image("ami-0abc"))
        assert record.name == "ami-0abc"
        assert record.csp_image_name == ""
        assert record.description == ""
        assert record.creation_date == ""

    def test_empty_name_id_rejected(self):
        provider = ProviderImageRecord(
            name="named", key_value_list=[KeyValue("Name", "x")]
        )
        with pytest.raises(InvalidProviderRecord):
            convert_provider_image(provider)
