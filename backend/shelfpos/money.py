from __future__ import annotations


def round_money(value) -> float:
    """Currency amounts are kept to two decimal places; NULL sums count as zero."""
    return round(float(value or 0), 2)
