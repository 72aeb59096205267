# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""usuarios: user-management REST backend over a flat JSON file."""

__version__ = "0.1.0"
