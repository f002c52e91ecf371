# -*- coding: utf-8 -*-
"""
Catalog Naming - Name normalization and naming-convention checks.

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
import re

# cloudimg internal
from cloudimg.catalog.errors import ValidationError
from cloudimg.catalog.models import RegistrationRequest


_NAME_PATTERN = re.compile(r'^[a-z]([-a-z0-9]*[a-z0-9])?$')

_SEPARATORS = ('.', '_', ':', '/')


def normalize_image_name(name: str) -> str:
    """Turn a provider display name into a catalog-safe fragment.

    Lower-cases the name and replaces each ``.``, ``_``, ``:`` and ``/``
    with ``-``. Consecutive and leading/trailing separators are kept as
    consecutive and leading/trailing hyphens.

    Parameters
    ----------
    name : str

    Returns
    -------
    str
    """
    out = name.lower()
    for sep in _SEPARATORS:
        out = out.replace(sep, '-')
    return out


def check_name(name: str) -> None:
    """Check a namespace or resource name against the naming convention.

    Names start with a lower-case letter, contain only lower-case
    letters, digits and hyphens, and do not end with a hyphen.

    Raises
    ------
    ValidationError
        If the name is empty or does not follow the convention.
    """
    if not name:
        raise ValidationError("The provided name is empty.")
    if not _NAME_PATTERN.match(name):
        raise ValidationError(
            f"The name {name!r} does not follow the naming convention "
            f"(lower-case letters, digits and '-', starting with a letter)."
        )


def validate_registration_request(request: RegistrationRequest) -> None:
    """Check required fields and the name of a registration request.

    Raises
    ------
    ValidationError
    """
    missing = [
        member for member, value in (
            ('name', request.name),
            ('connectionName', request.connection_name),
            ('cspImageId', request.csp_image_id),
        )
        if not value
    ]
    if missing:
        raise ValidationError(
            f"Missing required field(s): {', '.join(missing)}"
        )
    check_name(request.name)
