# helpdesk/utils/paging.py
from __future__ import annotations

import math

from helpdesk.core.exceptions import ValidationError

__all__ = ["page_offset", "total_pages"]


def page_offset(page: int, limit: int) -> int:
    """1始まりの page / limit から OFFSET を求める。

    HTTP 層では Query(ge=1) で弾かれるが、サービスを直接呼ぶスクリプト用に
    ここでも範囲外を ValidationError にする。
    """
    if page < 1:
        raise ValidationError("page must be >= 1")
    if limit < 1:
        raise ValidationError("limit must be >= 1")
    return (page - 1) * limit


def total_pages(total: int, limit: int) -> int:
    if limit < 1:
        raise ValidationError("limit must be >= 1")
    return math.ceil(total / limit)
