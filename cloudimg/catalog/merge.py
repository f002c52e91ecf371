# -*- coding: utf-8 -*-
"""
Catalog Merge - Apply sparse partial updates to catalog records.

A partial record is a ``CanonicalImageRecord`` in which only the fields
to change carry non-default values. Default values mean "leave as is",
so a field cannot be reset to its empty value through a merge.

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
import copy
from dataclasses import fields

# cloudimg internal
from cloudimg.catalog.errors import ImmutableFieldViolation
from cloudimg.catalog.models import CanonicalImageRecord


IMMUTABLE_FIELDS = ('namespace', 'id')


def check_immutable_fields(partial: CanonicalImageRecord) -> None:
    """Reject a partial record that sets ``namespace`` or ``id``.

    Raises
    ------
    ImmutableFieldViolation
    """
    for name in IMMUTABLE_FIELDS:
        if getattr(partial, name):
            raise ImmutableFieldViolation(
                f"You should not specify {name!r} in an update."
            )


def merge_image_records(
    existing: CanonicalImageRecord,
    partial: CanonicalImageRecord,
) -> CanonicalImageRecord:
    """Overlay the non-default fields of ``partial`` onto ``existing``.

    Neither argument is modified.

    Parameters
    ----------
    existing : CanonicalImageRecord
        The stored record.
    partial : CanonicalImageRecord
        Sparse update.

    Returns
    -------
    CanonicalImageRecord
        The merged record.

    Raises
    ------
    ImmutableFieldViolation
        If ``partial`` sets ``namespace`` or ``id``.
    """
    check_immutable_fields(partial)

    merged = copy.deepcopy(existing)
    for f in fields(CanonicalImageRecord):
        value = getattr(partial, f.name)
        if value:
            setattr(merged, f.name, copy.deepcopy(value))
    return merged
