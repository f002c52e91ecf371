# -*- coding: utf-8 -*-
"""
Catalog Models - Data models for machine-image metadata.

Defines the raw provider image record returned by cloud drivers, the
canonical image record persisted in the catalog, the explicit
registration request, connection targets, and the per-target
synchronization results.

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
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class KeyValue:
    """A single provider attribute entry."""

    key: str = ""
    value: str = ""

    def to_dict(self) -> dict:
        return {'key': self.key, 'value': self.value}

    @classmethod
    def from_dict(cls, data: dict) -> 'KeyValue':
        # Drivers send "Key"/"Value", the catalog stores "key"/"value".
        return cls(
            key=str(data.get('Key', data.get('key', '')) or ''),
            value=str(data.get('Value', data.get('value', '')) or ''),
        )


def _key_values_from(items: Optional[List[Any]]) -> List[KeyValue]:
    return [KeyValue.from_dict(item) for item in (items or [])]


@dataclass
class ProviderImageRecord:
    """Image description as returned by a cloud driver.

    Parameters
    ----------
    name : str
        Display name requested at creation time, if any.
    name_id : str
        Provider-assigned logical name identifier. The only field the
        catalog requires.
    system_id : str
        Provider-internal system identifier.
    guest_os : str
        Operating-system family (e.g. "Ubuntu", "Windows").
    status : str
        Availability status (e.g. "available").
    key_value_list : List[KeyValue]
        Ordered provider attributes. Optional fields such as
        "Description" and "CreationDate" travel here.
    """

    name: str = ""
    name_id: str = ""
    system_id: str = ""
    guest_os: str = ""
    status: str = ""
    key_value_list: List[KeyValue] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> 'ProviderImageRecord':
        """Build a record from the driver's JSON document.

        Parameters
        ----------
        data : dict
            Document with ``Name``, ``IId`` (``NameId``, ``SystemId``),
            ``GuestOS``, ``Status`` and ``KeyValueList`` members.

        Returns
        -------
        ProviderImageRecord
        """
        iid = data.get('IId') or {}
        return cls(
            name=str(data.get('Name') or ''),
            name_id=str(iid.get('NameId') or ''),
            system_id=str(iid.get('SystemId') or ''),
            guest_os=str(data.get('GuestOS') or ''),
            status=str(data.get('Status') or ''),
            key_value_list=_key_values_from(data.get('KeyValueList')),
        )


# (attribute, JSON member) pairs in serialization order.
_CANONICAL_FIELDS = (
    ('namespace', 'namespace'),
    ('id', 'id'),
    ('name', 'name'),
    ('connection_name', 'connectionName'),
    ('csp_image_id', 'cspImageId'),
    ('csp_image_name', 'cspImageName'),
    ('description', 'description'),
    ('creation_date', 'creationDate'),
    ('guest_os', 'guestOS'),
    ('status', 'status'),
    ('key_value_list', 'keyValueList'),
    ('associated_object_list', 'associatedObjectList'),
    ('is_auto_generated', 'isAutoGenerated'),
)


@dataclass
class CanonicalImageRecord:
    """A catalog image entry.

    Every field defaults to its empty value so the same type doubles as
    a sparse partial record for updates: a default-valued field means
    "not specified".

    Parameters
    ----------
    namespace : str
        Owning namespace. Immutable once set.
    id : str
        Catalog identifier, unique within the namespace. Immutable.
    name : str
        Display name.
    connection_name : str
        Connection target the image was discovered through.
    csp_image_id : str
        Provider image identifier. Empty until reconciled with a driver.
    csp_image_name : str
        Provider image display name.
    description : str
    creation_date : str
        Provider creation timestamp, verbatim.
    guest_os : str
    status : str
    key_value_list : List[KeyValue]
        Provider attributes carried over unmodified.
    associated_object_list : List[str]
        Identifiers of objects referencing this image.
    is_auto_generated : bool
        True for entries created by synchronization.
    """

    namespace: str = ""
    id: str = ""
    name: str = ""
    connection_name: str = ""
    csp_image_id: str = ""
    csp_image_name: str = ""
    description: str = ""
    creation_date: str = ""
    guest_os: str = ""
    status: str = ""
    key_value_list: List[KeyValue] = field(default_factory=list)
    associated_object_list: List[str] = field(default_factory=list)
    is_auto_generated: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-ready dictionary.

        Default-valued fields are omitted.

        Returns
        -------
        Dict[str, Any]
        """
        d: Dict[str, Any] = {}
        for attr, member in _CANONICAL_FIELDS:
            value = getattr(self, attr)
            if not value:
                continue
            if attr == 'key_value_list':
                value = [kv.to_dict() for kv in value]
            elif attr == 'associated_object_list':
                value = list(value)
            d[member] = value
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CanonicalImageRecord':
        """Deserialize from a dictionary produced by ``to_dict``.

        Unknown members are ignored.

        Parameters
        ----------
        data : Dict[str, Any]

        Returns
        -------
        CanonicalImageRecord
        """
        kwargs: Dict[str, Any] = {}
        for attr, member in _CANONICAL_FIELDS:
            if member not in data or data[member] is None:
                continue
            value = data[member]
            if attr == 'key_value_list':
                value = _key_values_from(value)
            elif attr == 'associated_object_list':
                value = [str(v) for v in value]
            elif attr == 'is_auto_generated':
                value = bool(value)
            else:
                value = str(value)
            kwargs[attr] = value
        return cls(**kwargs)


@dataclass
class RegistrationRequest:
    """Explicit request to register a provider image under a chosen name."""

    name: str = ""
    connection_name: str = ""
    csp_image_id: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RegistrationRequest':
        return cls(
            name=data.get('name') or '',
            connection_name=data.get('connectionName') or '',
            csp_image_id=data.get('cspImageId') or '',
            description=data.get('description') or '',
        )


@dataclass
class ConnectionTarget:
    """A credential/region pair a provider driver operates against."""

    config_name: str
    provider_name: str = ""
    credential_name: str = ""
    region_name: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ConnectionTarget':
        return cls(
            config_name=data.get('ConfigName') or '',
            provider_name=data.get('ProviderName') or '',
            credential_name=data.get('CredentialName') or '',
            region_name=data.get('RegionName') or '',
        )


class TargetSyncResult:
    """Outcome of synchronizing a single connection target.

    Parameters
    ----------
    connection_name : str
        The connection target that was synchronized.
    image_count : int
        Number of images newly registered. Zero when ``error`` is set.
    error : Optional[str]
        Error message if the target failed.
    """

    def __init__(
        self,
        connection_name: str,
        image_count: int = 0,
        error: Optional[str] = None,
    ) -> None:
        self.connection_name = connection_name
        self.image_count = image_count
        self.error = error

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        return {
            'connectionName': self.connection_name,
            'imageCount': self.image_count,
            'error': self.error,
        }

    def __repr__(self) -> str:
        if self.error is not None:
            return (
                f"TargetSyncResult({self.connection_name!r}: "
                f"failed, {self.error})"
            )
        return (
            f"TargetSyncResult({self.connection_name!r}: "
            f"{self.image_count} images)"
        )


class SyncSummary:
    """Aggregate outcome of synchronizing every connection target.

    Parameters
    ----------
    results : List[TargetSyncResult]
        One result per connection target, in processing order.
    """

    def __init__(self, results: Optional[List[TargetSyncResult]] = None) -> None:
        self.results = results or []

    @property
    def target_count(self) -> int:
        return len(self.results)

    @property
    def image_count(self) -> int:
        return sum(r.image_count for r in self.results)

    @property
    def degraded(self) -> bool:
        """True if at least one target failed."""
        return any(not r.ok for r in self.results)

    def to_dict(self) -> dict:
        return {
            'connConfigCount': self.target_count,
            'imageCount': self.image_count,
            'degraded': self.degraded,
            'results': [r.to_dict() for r in self.results],
        }

    def __repr__(self) -> str:
        return (
            f"SyncSummary(targets={self.target_count}, "
            f"images={self.image_count}, degraded={self.degraded})"
        )
