#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Shared helpers for notepress: dependency checks, timing and text utilities."""
