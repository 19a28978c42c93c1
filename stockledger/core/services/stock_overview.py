"""Stateless stock projections: group summaries, headline metrics, low stock."""

from collections.abc import Iterable

from stockledger.core.entities.material import DEFAULT_GROUP, Material
from stockledger.core.entities.overview import InventoryMetrics, MaterialGroup


def _matches(material: Material, search: str | None, category: str | None) -> bool:
    if category and material.category != category:
        return False
    if not search:
        return True
    term = search.strip().lower()
    return (
        term in material.name.lower()
        or term in material.code.lower()
        or term in (material.group or "").lower()
    )


def group_materials(
    materials: Iterable[Material],
    search: str | None = None,
    category: str | None = None,
) -> list[MaterialGroup]:
    """Group by label, most valuable group first."""
    groups: dict[str, MaterialGroup] = {}
    for material in materials:
        if not _matches(material, search, category):
            continue
        name = material.group or DEFAULT_GROUP
        group = groups.setdefault(name, MaterialGroup(name=name))
        group.items.append(material)
        group.total_stock += material.current_stock
        group.total_value += material.total_value
        if material.is_low_stock:
            group.low_stock_count += 1
        if material.unit not in group.units:
            group.units.append(material.unit)

    return sorted(groups.values(), key=lambda g: g.total_value, reverse=True)


def inventory_metrics(materials: Iterable[Material]) -> InventoryMetrics:
    metrics = InventoryMetrics()
    for material in materials:
        metrics.total_items += 1
        metrics.total_value += material.total_value
        if material.is_low_stock:
            metrics.low_stock_count += 1
    return metrics


def low_stock(materials: Iterable[Material]) -> list[Material]:
    """Materials at or below their minimum, emptiest relative to minimum first."""
    return sorted(
        (m for m in materials if m.is_low_stock),
        key=lambda m: (m.current_stock - m.min_stock, m.name),
    )
