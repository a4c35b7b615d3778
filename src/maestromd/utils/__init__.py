#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/maestromd/utils/__init__.py
"""Shared helpers: dependency checks, timing, HTML and URL handling."""
