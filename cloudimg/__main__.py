# -*- coding: utf-8 -*-
"""
cloudimg CLI - Synchronize, register and search catalog images.

Usage::

    python -m cloudimg sync --namespace ns01
    python -m cloudimg sync --namespace ns01 --target aws-us-east-1
    python -m cloudimg register --namespace ns01 --name ubuntu-base \\
        --connection aws-us-east-1 --csp-image-id ami-0abc
    python -m cloudimg search --namespace ns01 ubuntu 20.04
    python -m cloudimg update --namespace ns01 ubuntu-base --set status=deprecated

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

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from cloudimg.catalog.context import open_catalog
from cloudimg.catalog.errors import CatalogError, ValidationError
from cloudimg.catalog.models import CanonicalImageRecord, RegistrationRequest
from cloudimg.core.config import load_config


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cloudimg",
        description="cloudimg: cloud machine-image catalog.",
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to a JSON config file (default ~/.cloudimg/config.json).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("sync", help="Mirror provider images into the catalog.")
    p.add_argument("--namespace", "-n", required=True)
    p.add_argument(
        "--target", "-t",
        default=None,
        help="Only sync this connection target.",
    )

    p = sub.add_parser("register", help="Register one provider image.")
    p.add_argument("--namespace", "-n", required=True)
    p.add_argument("--name", required=True)
    p.add_argument("--connection", required=True, dest="connection_name")
    p.add_argument("--csp-image-id", required=True, dest="csp_image_id")
    p.add_argument("--description", default="")

    p = sub.add_parser("get", help="Show one catalog image.")
    p.add_argument("--namespace", "-n", required=True)
    p.add_argument("image_id")

    p = sub.add_parser("list", help="List the images of a namespace.")
    p.add_argument("--namespace", "-n", required=True)

    p = sub.add_parser("search", help="Search images by name keywords.")
    p.add_argument("--namespace", "-n", required=True)
    p.add_argument("keywords", nargs="*")

    p = sub.add_parser("update", help="Change fields of a catalog image.")
    p.add_argument("--namespace", "-n", required=True)
    p.add_argument("image_id")
    p.add_argument(
        "--set",
        action="append",
        default=[],
        dest="assignments",
        metavar="FIELD=VALUE",
        help="JSON member to change, e.g. description=Patched. Repeatable.",
    )
    return parser


# JSON members settable with ``update --set``.
_STRING_MEMBERS = (
    'name', 'connectionName', 'cspImageId', 'cspImageName', 'description',
    'creationDate', 'guestOS', 'status',
)
_BOOL_MEMBERS = ('isAutoGenerated',)
_TRUE_WORDS = ('true', 'yes', '1')
_FALSE_WORDS = ('false', 'no', '0')


def _parse_bool(member: str, value: str) -> bool:
    word = value.strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise ValidationError(f"{member} expects true or false, got {value!r}")


def _partial_from_assignments(assignments: List[str]) -> CanonicalImageRecord:
    data = {}
    for item in assignments:
        member, sep, value = item.partition("=")
        if not sep or not member:
            raise ValidationError(f"Expected FIELD=VALUE, got {item!r}")
        if member in _BOOL_MEMBERS:
            data[member] = _parse_bool(member, value)
        elif member in _STRING_MEMBERS or member in ('namespace', 'id'):
            data[member] = value
        else:
            raise ValidationError(
                f"{member!r} cannot be set from the command line; "
                f"settable fields: {', '.join(_STRING_MEMBERS + _BOOL_MEMBERS)}"
            )
    return CanonicalImageRecord.from_dict(data)


def _emit(payload) -> None:
    print(json.dumps(payload, indent=2))


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    config = load_config(args.config)
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        stream=sys.stderr,
    )

    try:
        with open_catalog(config) as catalog:
            registry = catalog.registry
            if args.command == "sync":
                if args.target:
                    count = catalog.sync_worker.sync_target(
                        args.target, args.namespace
                    )
                    _emit({'connectionName': args.target, 'imageCount': count})
                else:
                    _emit(catalog.sync_worker.sync_all(args.namespace).to_dict())
            elif args.command == "register":
                request = RegistrationRequest(
                    name=args.name,
                    connection_name=args.connection_name,
                    csp_image_id=args.csp_image_id,
                    description=args.description,
                )
                _emit(registry.register_with_request(
                    args.namespace, request
                ).to_dict())
            elif args.command == "get":
                _emit(registry.get_image(args.namespace, args.image_id).to_dict())
            elif args.command == "list":
                _emit([r.to_dict() for r in registry.list_images(args.namespace)])
            elif args.command == "search":
                _emit([
                    r.to_dict()
                    for r in registry.search(args.namespace, *args.keywords)
                ])
            elif args.command == "update":
                partial = _partial_from_assignments(args.assignments)
                _emit(registry.update_image(
                    args.namespace, args.image_id, partial
                ).to_dict())
    except (CatalogError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
