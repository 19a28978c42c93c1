"""Tests for DeleteMaterialUseCase."""

from unittest.mock import AsyncMock

import pytest

from stockledger.application.use_cases.delete_material import DeleteMaterialUseCase
from stockledger.core.exceptions import MaterialInUseError, MaterialNotFoundError


class TestDeleteMaterialUseCase:
    async def test_deletes(self):
        store = AsyncMock()
        store.delete_material.return_value = True

        await DeleteMaterialUseCase(ledger_store=store).execute("mat-a")

        store.delete_material.assert_awaited_once_with("mat-a")

    async def test_missing(self):
        store = AsyncMock()
        store.delete_material.return_value = False

        with pytest.raises(MaterialNotFoundError):
            await DeleteMaterialUseCase(ledger_store=store).execute("nope")

    async def test_in_use(self):
        store = AsyncMock()
        store.delete_material.side_effect = MaterialInUseError("mat-a")

        with pytest.raises(MaterialInUseError):
            await DeleteMaterialUseCase(ledger_store=store).execute("mat-a")
