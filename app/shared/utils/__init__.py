"""Shared utilities: datetime helpers and ID generators."""

from app.shared.utils.datetime import ensure_utc, format_human_timestamp, utc_now
from app.shared.utils.generators import generate_cuid

__all__ = [
    "ensure_utc",
    "format_human_timestamp",
    "generate_cuid",
    "utc_now",
]
