"""
Kitting feasibility calculator.

Given products, materials and active BOM headers, works out how many kits of
each product current component stock allows. The smallest per-component
quotient is the binding constraint. Recomputed on every call, never cached.
"""

import math
from collections.abc import Iterable
from decimal import Decimal

from stockledger.core.entities.catalog import BOMHeader, Product
from stockledger.core.entities.kitting import KittingComponent, KittingOption
from stockledger.core.entities.material import Material

UNKNOWN_MATERIAL_NAME = "Unknown"


def possible_kits(stock: float, required_per_unit: float) -> int | None:
    """
    Whole kits one component allows; None when the line requires nothing.

    Division runs in Decimal so that e.g. 0.3 / 0.1 yields 3, not 2.
    """
    if required_per_unit <= 0:
        return None
    return math.floor(Decimal(str(stock)) / Decimal(str(required_per_unit)))


def compute_kitting_options(
    products: Iterable[Product],
    materials: Iterable[Material],
    bom_headers: Iterable[BOMHeader],
    unknown_name: str = UNKNOWN_MATERIAL_NAME,
) -> list[KittingOption]:
    """
    One option per product with a non-empty BOM, in product order.

    Products without a BOM, or whose BOM has no items, are left out entirely.
    Options with ``max_kits == 0`` are kept so callers can show the blocker.
    """
    materials_by_id = {m.id: m for m in materials}
    headers: dict[str, BOMHeader] = {}
    for header in bom_headers:
        # First header per product wins
        headers.setdefault(header.product_id, header)

    options: list[KittingOption] = []
    for product in products:
        header = headers.get(product.id)
        if header is None or not header.items:
            continue

        components: list[KittingComponent] = []
        for item in header.items:
            material = materials_by_id.get(item.material_id)
            stock = material.current_stock if material else 0.0
            components.append(
                KittingComponent(
                    material_id=material.id if material else None,
                    name=material.name if material else unknown_name,
                    required_per_unit=item.quantity,
                    current_stock=stock,
                    possible_kits=possible_kits(stock, item.quantity),
                )
            )

        constrained = [c.possible_kits for c in components if c.possible_kits is not None]
        # A recipe that requires nothing of anything is not producible
        max_kits = max(0, min(constrained)) if constrained else 0

        options.append(KittingOption(product=product, max_kits=max_kits, components=components))

    return options
