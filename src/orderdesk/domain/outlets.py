"""Physical outlet labels and the short codes used in display order numbers."""

from __future__ import annotations

from typing import Final

OUTLET_CODES: Final[dict[str, str]] = {
    "Kondapur": "KDR",
    "Kompally": "KPL",
}
UNKNOWN_OUTLET_CODE: Final[str] = "UNK"


def outlet_code(label: str | None) -> str:
    """Map an outlet label to its short code; unknown labels map to ``UNK``."""

    if label is None:
        return UNKNOWN_OUTLET_CODE
    return OUTLET_CODES.get(label.strip(), UNKNOWN_OUTLET_CODE)
