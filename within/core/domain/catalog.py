"""Minimal store catalog of bulk items that can be shared in a run."""

from __future__ import annotations

from dataclasses import dataclass

from within.core.domain.errors import InvalidArgument


@dataclass(frozen=True, slots=True)
class CatalogItem:
    key: str
    label: str
    total: int


@dataclass(frozen=True, slots=True)
class Store:
    key: str
    label: str
    items: tuple[CatalogItem, ...]

    def item(self, item_key: str) -> CatalogItem:
        for item in self.items:
            if item.key == item_key:
                return item
        raise InvalidArgument(f"Unknown item {item_key!r} for store {self.key!r}")


CATALOG: dict[str, Store] = {
    "costco": Store(
        key="costco",
        label="Costco",
        items=(
            CatalogItem(key="tp30", label="Toilet paper (30)", total=30),
            CatalogItem(key="pt12", label="Paper towels (12)", total=12),
        ),
    ),
}


def resolve_item(
    store_key: str,
    item_key: str,
    catalog: dict[str, Store] | None = None,
) -> tuple[Store, CatalogItem]:
    """Look up a (store, item) pair, raising InvalidArgument for unknown keys."""
    stores = CATALOG if catalog is None else catalog
    store = stores.get(store_key)
    if store is None:
        raise InvalidArgument(f"Unknown store {store_key!r}")
    return store, store.item(item_key)


def purpose_text(store: Store, item: CatalogItem) -> str:
    """Return the run purpose, e.g. ``"Costco • Toilet paper"``."""
    item_name = item.label.split(" (")[0]
    return f"{store.label} • {item_name}"
