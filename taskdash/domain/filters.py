from __future__ import annotations

from dataclasses import dataclass

from .enums import Category


@dataclass(frozen=True)
class ViewFilters:
    category: Category = Category.MY_ACTION
    user_id: int | None = None
    search: str = ""
