"""
Built-in record set served when no live source and no cached result exist.
"""

from __future__ import annotations

from typing import List

from .models import CanonicalRecord

_DEVICES = [
    ("Steam Deck OLED", "Valve", "$549-$649", "2023", "High"),
    ("ROG Ally", "ASUS", "$699", "2023", "High"),
    ("Lenovo Legion Go", "Lenovo", "$699-$799", "2023", "High"),
    ("Nintendo Switch OLED", "Nintendo", "$349", "2021", "Medium"),
    ("AYANEO 2S", "AYANEO", "$999-$1,499", "2023", "High"),
    ("Retroid Pocket 4 Pro", "Retroid", "$199", "2024", "Medium"),
    ("Miyoo Mini Plus", "Miyoo", "$79", "2023", "Low"),
    ("Anbernic RG35XX", "Anbernic", "$59", "2022", "Low"),
]

DEFAULT_RECORDS: tuple[CanonicalRecord, ...] = tuple(
    CanonicalRecord(
        name=name,
        brand=brand,
        price=price,
        release_year=year,
        performance_score=score,
    )
    for name, brand, price, year, score in _DEVICES
)


def default_records() -> List[CanonicalRecord]:
    return list(DEFAULT_RECORDS)
