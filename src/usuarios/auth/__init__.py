# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Authentication helpers.

This package provides:
- The static principal -> secret table (built-in or loaded from a YAML file)
- Token codecs: reversible base64 (default) and signed (itsdangerous)
- The auth gate used by the HTTP layer (login / authenticate)
"""
