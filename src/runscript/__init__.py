# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""Run bash scripts bundled with a Python package."""

__version__ = "0.1.0"
