# -*- coding: utf-8 -*-
"""
Catalog Module - Namespaced catalog of cloud machine images.

Mirrors image metadata from cloud-provider drivers into a key-value
store backed catalog with a SQLite search index, and supports explicit
registration, partial updates and keyword search.

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
