"""
Core domain layer for subsidy-links.

This package contains pure business logic with no I/O.
Everything here works on in-memory record snapshots.
"""

from __future__ import annotations

__all__ = []
