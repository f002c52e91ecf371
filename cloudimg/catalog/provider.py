# -*- coding: utf-8 -*-
"""
Provider Clients - Access cloud-provider drivers for image metadata.

Provides the ``ProviderClient`` interface with two transports: a direct
REST client talking to the driver server, and a gateway client talking
to an intermediary RPC gateway configured from a YAML file. Both yield
identical ``ProviderImageRecord`` shapes. The transport is selected once
by ``create_provider_client``.

Dependencies
------------
requests
PyYAML

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
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from urllib.parse import quote

# Third-party
import requests
import yaml

logger = logging.getLogger(__name__)

# cloudimg internal
from cloudimg.catalog.errors import ExternalProviderError
from cloudimg.catalog.models import ConnectionTarget, ProviderImageRecord


TRANSPORT_REST = "rest"
TRANSPORT_GATEWAY = "gateway"


def _require(value: str, what: str, caller: str) -> None:
    if not value:
        err = ExternalProviderError(f"{caller}() called with empty {what}.")
        logger.error("%s", err)
        raise err


def _image_from_document(document: Any) -> ProviderImageRecord:
    """Build a provider record, rejecting documents of the wrong shape.

    Raises
    ------
    ExternalProviderError
        If the document, its ``IId`` or its ``KeyValueList`` entries are
        not JSON objects.
    """
    if not isinstance(document, dict):
        raise ExternalProviderError(f"Malformed image record: {document!r}")
    iid = document.get('IId')
    if iid is not None and not isinstance(iid, dict):
        raise ExternalProviderError(
            f"Malformed IId in image record: {iid!r}"
        )
    key_values = document.get('KeyValueList')
    if key_values is not None and (
        not isinstance(key_values, list)
        or not all(isinstance(kv, dict) for kv in key_values)
    ):
        raise ExternalProviderError(
            f"Malformed KeyValueList in image record: {key_values!r}"
        )
    return ProviderImageRecord.from_dict(document)


def _parse_images(payload: Any) -> List[ProviderImageRecord]:
    if not isinstance(payload, dict):
        raise ExternalProviderError(
            f"Malformed image list response: {payload!r}"
        )
    items = payload.get('image') or []
    if not isinstance(items, list):
        raise ExternalProviderError(
            f"Malformed image list response: {payload!r}"
        )
    return [_image_from_document(i) for i in items]


def _parse_image(payload: Any) -> ProviderImageRecord:
    return _image_from_document(payload)


def _parse_targets(payload: Any) -> List[ConnectionTarget]:
    if not isinstance(payload, dict):
        raise ExternalProviderError(
            f"Malformed connection config response: {payload!r}"
        )
    items = payload.get('connectionconfig') or []
    if not isinstance(items, list) or not all(isinstance(i, dict) for i in items):
        raise ExternalProviderError(
            f"Malformed connection config response: {payload!r}"
        )
    return [ConnectionTarget.from_dict(i) for i in items]


class ProviderClient(ABC):
    """Interface to a cloud-provider driver."""

    @abstractmethod
    def list_images(self, connection_name: str) -> List[ProviderImageRecord]:
        """List every image visible through a connection target.

        Raises
        ------
        ExternalProviderError
        """

    @abstractmethod
    def get_image(
        self,
        connection_name: str,
        csp_image_id: str,
    ) -> ProviderImageRecord:
        """Look up one image by its provider identifier.

        Raises
        ------
        ExternalProviderError
        """

    @abstractmethod
    def list_connection_targets(self) -> List[ConnectionTarget]:
        """List the connection targets known to the driver.

        Raises
        ------
        ExternalProviderError
        """


class RestProviderClient(ProviderClient):
    """Direct request/response client for the driver's REST API.

    Parameters
    ----------
    base_url : str
        Root URL of the driver REST API (e.g. ``http://host:1024/spider``).
    timeout : float
        HTTP request timeout in seconds. Default 10.0.
    """

    def __init__(self, base_url: str, timeout: float = 10.0) -> None:
        self._base_url = base_url.rstrip('/')
        self._timeout = timeout

    def _get(self, path: str, body: Optional[dict] = None) -> Any:
        url = self._base_url + path
        try:
            resp = requests.get(url, json=body, timeout=self._timeout)
        except requests.RequestException as e:
            logger.error("Request to %s failed: %s", url, e)
            raise ExternalProviderError(
                f"an error occurred while requesting {url}: {e}"
            ) from e

        logger.debug("GET %s -> HTTP %s", url, resp.status_code)
        if resp.status_code >= 400 or resp.status_code < 200:
            logger.error("GET %s returned HTTP %s: %s", url, resp.status_code, resp.text)
            raise ExternalProviderError(
                f"HTTP {resp.status_code} from {url}: {resp.text}"
            )
        try:
            return resp.json()
        except ValueError as e:
            raise ExternalProviderError(
                f"Invalid JSON in response from {url}: {e}"
            ) from e

    def list_images(self, connection_name: str) -> List[ProviderImageRecord]:
        _require(connection_name, "connection name", "list_images")
        return _parse_images(
            self._get("/vmimage", {'ConnectionName': connection_name})
        )

    def get_image(
        self,
        connection_name: str,
        csp_image_id: str,
    ) -> ProviderImageRecord:
        _require(connection_name, "connection name", "get_image")
        _require(csp_image_id, "image id", "get_image")
        return _parse_image(
            self._get(
                "/vmimage/" + quote(csp_image_id, safe=''),
                {'ConnectionName': connection_name},
            )
        )

    def list_connection_targets(self) -> List[ConnectionTarget]:
        return _parse_targets(self._get("/connectionconfig"))


def load_gateway_config(path: Union[str, Path]) -> Dict[str, Any]:
    """Load the ``gateway`` section of a YAML gateway configuration.

    Parameters
    ----------
    path : Union[str, Path]

    Returns
    -------
    Dict[str, Any]
        Section with at least an ``address`` entry.

    Raises
    ------
    ValueError
        If the file cannot be read or lacks ``gateway.address``.
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ValueError(f"Cannot read gateway config {path}: {e}") from e

    section = data.get('gateway') if isinstance(data, dict) else None
    if not isinstance(section, dict) or not section.get('address'):
        raise ValueError(f"Gateway config {path} has no gateway.address")
    return section


class GatewayProviderClient(ProviderClient):
    """Client for an intermediary RPC gateway in front of the driver.

    Every call is ``POST <address>/<Method>`` with JSON parameters. The
    gateway answers with the same documents as the REST API, either
    inline or as a JSON-encoded string.

    Parameters
    ----------
    address : str
        Base URL of the gateway.
    timeout : float
        Request timeout in seconds. Default 10.0.
    """

    def __init__(self, address: str, timeout: float = 10.0) -> None:
        self._address = address.rstrip('/')
        self._timeout = timeout

    @classmethod
    def from_config_file(
        cls,
        path: Union[str, Path],
        timeout: Optional[float] = None,
    ) -> 'GatewayProviderClient':
        """Build a client from a YAML gateway configuration file."""
        section = load_gateway_config(path)
        if timeout is None:
            timeout = float(section.get('timeout', 10.0))
        return cls(str(section['address']), timeout=timeout)

    def _call(self, method: str, params: Dict[str, str]) -> Any:
        url = f"{self._address}/{method}"
        try:
            resp = requests.post(url, json=params, timeout=self._timeout)
            resp.raise_for_status()
            result = resp.json()
        except requests.RequestException as e:
            logger.error("Gateway call %s failed: %s", method, e)
            raise ExternalProviderError(
                f"Gateway call {method} failed: {e}"
            ) from e
        except ValueError as e:
            raise ExternalProviderError(
                f"Invalid JSON from gateway call {method}: {e}"
            ) from e

        if isinstance(result, str):
            try:
                result = json.loads(result)
            except json.JSONDecodeError as e:
                raise ExternalProviderError(
                    f"Invalid JSON from gateway call {method}: {e}"
                ) from e
        return result

    def list_images(self, connection_name: str) -> List[ProviderImageRecord]:
        _require(connection_name, "connection name", "list_images")
        return _parse_images(
            self._call("ListImage", {'ConnectionName': connection_name})
        )

    def get_image(
        self,
        connection_name: str,
        csp_image_id: str,
    ) -> ProviderImageRecord:
        _require(connection_name, "connection name", "get_image")
        _require(csp_image_id, "image id", "get_image")
        return _parse_image(
            self._call(
                "GetImage",
                {'ConnectionName': connection_name, 'ImageId': csp_image_id},
            )
        )

    def list_connection_targets(self) -> List[ConnectionTarget]:
        return _parse_targets(self._call("ListConnectionConfig", {}))


def create_provider_client(config) -> ProviderClient:
    """Create the provider client for the configured transport.

    Parameters
    ----------
    config : CatalogConfig
        Reads ``provider_transport``, ``provider_url``,
        ``gateway_config_path`` and ``request_timeout``.

    Returns
    -------
    ProviderClient

    Raises
    ------
    ValueError
        If the transport is unknown or the gateway config is unusable.
    """
    transport = (config.provider_transport or TRANSPORT_REST).lower()
    if transport == TRANSPORT_REST:
        return RestProviderClient(
            config.provider_url, timeout=config.request_timeout
        )
    if transport == TRANSPORT_GATEWAY:
        if not config.gateway_config_path:
            raise ValueError(
                "gateway transport requires gateway_config_path"
            )
        return GatewayProviderClient.from_config_file(
            config.gateway_config_path, timeout=config.request_timeout
        )
    raise ValueError(
        f"provider_transport must be {TRANSPORT_REST!r} or "
        f"{TRANSPORT_GATEWAY!r}, got {config.provider_transport!r}"
    )
