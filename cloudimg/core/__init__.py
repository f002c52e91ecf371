# -*- coding: utf-8 -*-
"""
Core Module - Configuration shared by the cloudimg components.

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
