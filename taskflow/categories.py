from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from .envelope import unwrap_list
from .gateway import TaskflowGateway
from .models import Category


logger = logging.getLogger(__name__)

DEFAULT_CATEGORY_COLOR = "#94a3b8"


@dataclass(frozen=True)
class CategoryFetch:
    ok: bool
    categories: List[Category]
    error: Optional[str] = None


class CategoryRepository:
    def __init__(self, gateway: TaskflowGateway) -> None:
        self.gateway = gateway

    def get_categories(self) -> CategoryFetch:
        response = self.gateway.get("/categories")
        if not response.ok:
            return CategoryFetch(ok=False, categories=[], error=response.error)
        items = unwrap_list(response.data, source="GET /categories")
        return CategoryFetch(
            ok=True,
            categories=[Category.from_dict(item) for item in items if isinstance(item, dict)],
        )


class CategoryIndex:
    """Name and colour lookup by category id."""

    def __init__(self, categories: Iterable[Category] = ()) -> None:
        self._by_id: Dict[str, Category] = {c.id: c for c in categories if c.id is not None}

    def __len__(self) -> int:
        return len(self._by_id)

    def get(self, category_id: Optional[str]) -> Optional[Category]:
        if category_id is None:
            return None
        return self._by_id.get(category_id)

    def name_for(self, category_id: Optional[str], default: str = "Uncategorised") -> str:
        category = self.get(category_id)
        return category.name if category and category.name else default

    def color_for(self, category_id: Optional[str]) -> str:
        category = self.get(category_id)
        return category.color if category and category.color else DEFAULT_CATEGORY_COLOR

    def options(self) -> List[Category]:
        return sorted(self._by_id.values(), key=lambda c: c.name.lower())
