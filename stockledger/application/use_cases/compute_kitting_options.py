"""Compute Kitting Options Use Case: feasibility against current stock."""

from stockledger.config import get_logger, get_settings
from stockledger.core.entities.kitting import KittingOption
from stockledger.core.exceptions import BOMNotFoundError, ProductNotFoundError
from stockledger.core.interfaces.catalog_store import ICatalogStore
from stockledger.core.interfaces.ledger_store import ILedgerStore
from stockledger.core.services.kitting_calculator import compute_kitting_options

logger = get_logger(__name__)


class ComputeKittingOptionsUseCase:
    """Load products, BOMs and materials, then run the feasibility calculator."""

    def __init__(
        self,
        ledger_store: ILedgerStore | None = None,
        catalog_store: ICatalogStore | None = None,
    ):
        self._ledger_store = ledger_store
        self._catalog_store = catalog_store

    async def _get_ledger_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from stockledger.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def _get_catalog_store(self) -> ICatalogStore:
        if self._catalog_store is None:
            from stockledger.infrastructure.storage.sqlite import get_catalog_store

            self._catalog_store = await get_catalog_store()
        return self._catalog_store

    async def execute(self) -> list[KittingOption]:
        """Options for every product with a non-empty active BOM."""
        catalog = await self._get_catalog_store()
        ledger = await self._get_ledger_store()

        products = await catalog.list_products()
        bom_headers = await catalog.list_active_boms()
        materials = await ledger.list_materials()

        options = compute_kitting_options(
            products,
            materials,
            bom_headers,
            unknown_name=get_settings().ledger.unknown_material_name,
        )
        logger.info(
            "kitting_options_computed",
            products=len(products),
            options=len(options),
        )
        return options

    async def for_product(self, product_id: str) -> KittingOption:
        """
        Fresh option for one product.

        Raises:
            ProductNotFoundError: unknown product.
            BOMNotFoundError: product has no active BOM with items.
        """
        catalog = await self._get_catalog_store()
        product = await catalog.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        for option in await self.execute():
            if option.product.id == product_id:
                return option
        raise BOMNotFoundError(product_id)
