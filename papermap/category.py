"""Named, coloured paper categories with lookup by id and by name."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Sequence

CATEGORY_UNKNOWN_ID = 0
CATEGORY_MAX_CATS = 256


class CategoryError(ValueError):
    """Raised when a category cannot be added."""


@dataclass(eq=False)
class CategoryInfo:
    """A category: its id, name, colour, paper count and position."""

    cat_id: int
    name: str
    r: float = 0.0
    g: float = 0.0
    b: float = 0.0
    num: int = 0
    x: float = 0.0
    y: float = 0.0


class CategorySet:
    """The categories known to the map; id 0 is always the unknown category."""

    def __init__(self) -> None:
        self._cats: list[CategoryInfo] = [CategoryInfo(CATEGORY_UNKNOWN_ID, "unknown")]
        self._by_name: dict[str, CategoryInfo] = {}

    def add_category(self, name: str, rgb: Sequence[float]) -> CategoryInfo:
        """Add a new category with the given colour and return it."""
        if len(self._cats) >= CATEGORY_MAX_CATS:
            raise CategoryError(f"too many categories, cannot add {name}")
        if name in self._by_name:
            raise CategoryError(f"category {name} already exists")
        r, g, b = rgb
        cat = CategoryInfo(len(self._cats), name, float(r), float(g), float(b))
        self._cats.append(cat)
        self._by_name[name] = cat
        return cat

    def get_by_id(self, cat_id: int) -> CategoryInfo:
        return self._cats[cat_id]

    def get_by_name(self, name: str) -> Optional[CategoryInfo]:
        """Return the added category of that name, or None."""
        return self._by_name.get(name)

    def __len__(self) -> int:
        return len(self._cats)

    def __iter__(self) -> Iterator[CategoryInfo]:
        return iter(self._cats)