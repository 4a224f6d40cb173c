"""Plain-text helpers for terminal rendering."""

from ril.domain.constants import DESCRIPTION_PREVIEW_LEN


def preview(text: str, limit: int = DESCRIPTION_PREVIEW_LEN) -> str:
    """First `limit` characters followed by an ellipsis, as on catalog cards."""
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + "…"


def progress_bar(percent: int, width: int = 20) -> str:
    filled = max(0, min(width, round(width * percent / 100)))
    return "[" + "#" * filled + "-" * (width - filled) + "]"
