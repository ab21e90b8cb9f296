# vehicle_registry/services/plate.py
"""
ניקוי ובדיקת מספר רישוי ישראלי (7-8 ספרות, מקפים מותרים בקלט).
פונקציות חופשיות - אפשר לקרוא להן משכבת הטפסים בלי ליצור gateway.
"""
import re

_NON_DIGITS = re.compile(r"[^0-9]")
_DIGITS_AND_DASHES = re.compile(r"[0-9-]*")
_PLATE = re.compile(r"[0-9]{7,8}")


def normalize(raw: str) -> str:
    return _NON_DIGITS.sub("", raw or "")


def is_valid_format(raw: str) -> bool:
    # "12-345-67" תקין, "12a34567" לא - אותיות אינן חלק ממספר רישוי
    if not raw or not _DIGITS_AND_DASHES.fullmatch(raw):
        return False
    return bool(_PLATE.fullmatch(normalize(raw)))
