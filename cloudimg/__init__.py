# -*- coding: utf-8 -*-
"""
cloudimg - Cloud machine-image catalog.

Synchronizes machine-image metadata from cloud-provider drivers into a
namespaced, searchable catalog.

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

__version__ = "0.1.0"
