# -*- coding: utf-8 -*-
"""
Catalog Conversion - Map provider image records to catalog records.

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-10-18

Modified
--------
2026-10-18
"""

# Standard library
from typing import List

# cloudimg internal
from cloudimg.catalog.errors import InvalidProviderRecord
from cloudimg.catalog.models import (
    CanonicalImageRecord,
    KeyValue,
    ProviderImageRecord,
)


def lookup_key_value(key_values: List[KeyValue], key: str) -> str:
    """Return the value of the first entry with ``key``, or ``""``."""
    for kv in key_values:
        if kv.key == key:
            return kv.value
    return ""


def convert_provider_image(provider: ProviderImageRecord) -> CanonicalImageRecord:
    """Convert a provider image record into a canonical image record.

    The returned record has no namespace, id or connection name; the
    caller files it.

    Parameters
    ----------
    provider : ProviderImageRecord

    Returns
    -------
    CanonicalImageRecord

    Raises
    ------
    InvalidProviderRecord
        If the provider record has no logical name identifier.
    """
    if not provider.name_id:
        raise InvalidProviderRecord(
            "Provider image record has an empty IId.NameId"
        )

    kvs = provider.key_value_list
    display_name = lookup_key_value(kvs, "Name")

    return CanonicalImageRecord(
        name=display_name or provider.name_id,
        csp_image_id=provider.name_id,
        csp_image_name=display_name,
        description=lookup_key_value(kvs, "Description"),
        creation_date=lookup_key_value(kvs, "CreationDate"),
        guest_os=provider.guest_os,
        status=provider.status,
        key_value_list=list(kvs),
    )
