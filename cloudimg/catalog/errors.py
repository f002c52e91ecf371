# -*- coding: utf-8 -*-
"""
Catalog Errors - Exception hierarchy for the image catalog.

Every catalog operation reports failure by raising one of these
exceptions. Store and provider failures are wrapped into
``PersistenceError`` and ``ExternalProviderError`` at the boundary
where they occur.

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


class CatalogError(Exception):
    """Base class for all image catalog errors."""


class ValidationError(CatalogError):
    """Malformed namespace, name or request input."""


class AlreadyExists(CatalogError):
    """An image with the same id already exists in the namespace."""


class ExistenceCheckFailed(CatalogError):
    """The pre-write existence check could not be completed."""


class NotFound(CatalogError):
    """The requested image does not exist."""


class ExternalProviderError(CatalogError):
    """A provider driver call failed or returned a malformed response."""


class PersistenceError(CatalogError):
    """A key-value store or relational index operation failed."""


class ImmutableFieldViolation(CatalogError):
    """An update attempted to change ``namespace`` or ``id``."""


class InvalidProviderRecord(CatalogError):
    """A provider image record lacks its required identifier."""
