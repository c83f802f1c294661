"""String helpers for option lookup, number formatting and prompt snippets."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from datetime import datetime

from neuralpixel.constants import DROPDOWN_LABEL_LENGTH

TIME_FORMAT = "%d-%m-%Y_%H:%M:%S"


class InsertKind(enum.IntEnum):
    """Which prompt a model file is inserted into."""

    EMBEDDING = 0
    LORA = 1


def list_index(items: Iterable[str], item: str) -> int:
    """Return the position of ``item`` in ``items``, or 0 when it is absent."""
    for position, candidate in enumerate(items):
        if candidate == item:
            return position
    return 0


def casefold_key(name: str) -> str:
    """Sort key that orders names without regard to case."""
    return name.lower()


def count_digits(n: float) -> int:
    """Number of decimal digits in the integer part of ``n`` (at least one)."""
    whole = abs(int(n))
    digits = 1
    while whole >= 10:
        whole //= 10
        digits += 1
    return digits


def format_decimal(value: float, places: int) -> str:
    """Format ``value`` with a fixed number of decimal places."""
    if places < 0:
        raise ValueError("places must not be negative")
    return f"{value:.{places}f}"


def format_lora_embedding(item: str, kind: InsertKind) -> str:
    """Build the prompt snippet that refers to a LoRA or embedding file."""
    stem, dot, _ = item.rpartition(".")
    name = stem if dot else item
    if InsertKind(kind) is InsertKind.EMBEDDING:
        return f", (embedding:{name})"
    return f"<lora:{name}:1> "


def time_stamp(now: datetime | None = None) -> str:
    """Timestamp in day-month-year_hour:minute:second form."""
    return (now or datetime.now()).strftime(TIME_FORMAT)


def trim_label(text: str, width: int) -> str:
    """Shorten ``text`` longer than ``width`` to ``width - 1`` characters ending in '..'."""
    if width < 1:
        raise ValueError("width must be positive")
    if len(text) <= width:
        return text
    if width > 3:
        return text[: width - 3] + ".."
    return text[: width - 1]


def truncate_label(text: str, length: int = DROPDOWN_LABEL_LENGTH) -> str:
    """Keep ``text`` shorter than ``length``; otherwise cut it and append '...'."""
    if len(text) < length:
        return text
    return text[:length] + "..."