# helpdesk/utils/search.py
from __future__ import annotations

LIKE_ESCAPE = "\\"


def contains_pattern(term: str) -> str:
    """Substring LIKE pattern where ``%`` and ``_`` in ``term`` match literally.

    Use together with ``ilike(pattern, escape=LIKE_ESCAPE)``.
    """
    escaped = (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2).replace("%", r"\%").replace("_", r"\_")
    )
    return f"%{escaped}%"
