# -*- coding: utf-8 -*-
"""
Resource Repository - Typed access to records in the key-value store.

Records live under structured keys
``/ns/<namespace>/resources/<kind>/<id>`` and are serialized as JSON.
A repository is bound to one resource kind and one record type, so
fetches return that type directly.

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
import json
from typing import Any, Callable, Dict, Generic, List, TypeVar

# cloudimg internal
from cloudimg.catalog.errors import (
    ExistenceCheckFailed,
    NotFound,
    PersistenceError,
)
from cloudimg.catalog.kvstore import KeyValueStore
from cloudimg.catalog.models import CanonicalImageRecord

T = TypeVar('T')

RESOURCE_IMAGE = "image"


def resource_key(namespace: str, kind: str, resource_id: str) -> str:
    """Build the key-value store key of a resource."""
    return f"/ns/{namespace}/resources/{kind}/{resource_id}"


def resource_prefix(namespace: str, kind: str) -> str:
    return f"/ns/{namespace}/resources/{kind}/"


class ResourceRepository(Generic[T]):
    """Existence checks, typed fetches and writes for one resource kind.

    Parameters
    ----------
    store : KeyValueStore
        The authoritative key-value store.
    kind : str
        Resource kind segment of the key (e.g. ``"image"``).
    decode : Callable[[Dict[str, Any]], T]
        Builds a record from its JSON dictionary.
    encode : Callable[[T], Dict[str, Any]]
        Turns a record into a JSON dictionary.
    """

    def __init__(
        self,
        store: KeyValueStore,
        kind: str,
        decode: Callable[[Dict[str, Any]], T],
        encode: Callable[[T], Dict[str, Any]],
    ) -> None:
        self._store = store
        self.kind = kind
        self._decode = decode
        self._encode = encode

    def key(self, namespace: str, resource_id: str) -> str:
        return resource_key(namespace, self.kind, resource_id)

    def serialize(self, record: T) -> str:
        return json.dumps(self._encode(record))

    def exists(self, namespace: str, resource_id: str) -> bool:
        """Check whether a resource exists.

        Raises
        ------
        ExistenceCheckFailed
            If the store cannot be read.
        """
        try:
            return self._store.get(self.key(namespace, resource_id)) is not None
        except PersistenceError as e:
            raise ExistenceCheckFailed(
                f"Failed to check the existence of the {self.kind} "
                f"{resource_id!r}: {e}"
            ) from e

    def get(self, namespace: str, resource_id: str) -> T:
        """Fetch a resource.

        Raises
        ------
        NotFound
            If no resource is stored under the key.
        PersistenceError
            If the store cannot be read or the value cannot be decoded.
        """
        key = self.key(namespace, resource_id)
        raw = self._store.get(key)
        if raw is None:
            raise NotFound(f"The {self.kind} {resource_id!r} does not exist.")
        return self._loads(key, raw)

    def list(self, namespace: str) -> List[T]:
        """Fetch every resource of this kind in a namespace, ordered by key."""
        return [
            self._loads(key, raw)
            for key, raw in self._store.get_list(
                resource_prefix(namespace, self.kind)
            )
        ]

    def put(self, namespace: str, resource_id: str, record: T) -> None:
        """Write a resource, replacing any previous value."""
        self._store.put(self.key(namespace, resource_id), self.serialize(record))

    def put_if_absent(self, namespace: str, resource_id: str, record: T) -> bool:
        """Write a resource only if its key is unused.

        Returns
        -------
        bool
            True if written.
        """
        return self._store.put_if_absent(
            self.key(namespace, resource_id), self.serialize(record)
        )

    def _loads(self, key: str, raw: str) -> T:
        try:
            return self._decode(json.loads(raw))
        except (json.JSONDecodeError, TypeError, ValueError) as e:
            raise PersistenceError(f"Corrupt value under {key!r}: {e}") from e


def image_repository(store: KeyValueStore) -> ResourceRepository[CanonicalImageRecord]:
    """Create the repository of catalog images."""
    return ResourceRepository(
        store,
        RESOURCE_IMAGE,
        decode=CanonicalImageRecord.from_dict,
        encode=CanonicalImageRecord.to_dict,
    )
