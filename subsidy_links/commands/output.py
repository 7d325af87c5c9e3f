"""Line formatting shared by the command modules."""

from __future__ import annotations


def _check(label: str, status: str, detail: str) -> str:
    return f"{label}: {status} ({detail})"


def ok(label: str, detail: str) -> str:
    return _check(label, "OK", detail)


def warning(label: str, detail: str) -> str:
    return _check(label, "WARNING", detail)


def error(label: str, detail: str) -> str:
    return _check(label, "ERROR", detail)


def format_amount(amount: float) -> str:
    """Two decimals with spaces between thousands: 11000 -> "11 000.00"."""
    return f"{amount:,.2f}".replace(",", " ")
