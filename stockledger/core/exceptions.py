"""
Domain exceptions for the stock ledger.

Every failure surfaced by the engine is one of these typed errors; none are
retried automatically.
"""

from typing import Any


class StockLedgerError(Exception):
    """Base exception for all stock ledger errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Validation Exceptions
class ValidationError(StockLedgerError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class InvalidQuantityError(ValidationError):
    """Quantity is not numeric, or not positive where a positive one is required."""

    def __init__(self, field: str, value: Any, reason: str = "must be a number greater than zero"):
        super().__init__(field=field, message=reason, value=value)
        self.code = "INVALID_QUANTITY"


class DuplicateMaterialCodeError(ValidationError):
    """Another material already uses this code."""

    def __init__(self, code: str):
        super().__init__(
            field="code",
            message=f"Material code '{code}' is already in use",
            value=code,
        )
        self.code = "DUPLICATE_MATERIAL_CODE"


# Stock Exceptions
class StockError(StockLedgerError):
    """Base exception for stock state violations."""

    pass


class InsufficientStockError(StockError):
    """OUT movement would drive stock negative."""

    def __init__(self, material_id: str, requested: float, available: float):
        super().__init__(
            f"Insufficient stock for material {material_id}: "
            f"requested {requested}, available {available}",
            code="INSUFFICIENT_STOCK",
            details={
                "material_id": material_id,
                "requested": requested,
                "available": available,
            },
        )


class MaterialInUseError(StockError):
    """Material is still referenced by ledger history or a BOM."""

    def __init__(self, material_id: str):
        super().__init__(
            f"Material {material_id} is referenced by ledger history or a BOM",
            code="MATERIAL_IN_USE",
            details={"material_id": material_id},
        )


# Lookup Exceptions
class NotFoundError(StockLedgerError):
    """Base exception for missing referenced records."""

    pass


class MaterialNotFoundError(NotFoundError):
    """Material not found."""

    def __init__(self, material_id: str):
        super().__init__(
            f"Material not found: {material_id}",
            code="MATERIAL_NOT_FOUND",
            details={"material_id": material_id},
        )


class ProductNotFoundError(NotFoundError):
    """Product not found."""

    def __init__(self, product_id: str):
        super().__init__(
            f"Product not found: {product_id}",
            code="PRODUCT_NOT_FOUND",
            details={"product_id": product_id},
        )


class BOMNotFoundError(NotFoundError):
    """Product has no active BOM with items."""

    def __init__(self, product_id: str):
        super().__init__(
            f"No active BOM with items for product: {product_id}",
            code="BOM_NOT_FOUND",
            details={"product_id": product_id},
        )


# Storage Exceptions
class PersistenceError(StockLedgerError):
    """The atomic write did not commit; nothing was mutated."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Persistence failure during {operation}: {error}",
            code="PERSISTENCE_FAILURE",
            details={"operation": operation, "error": error},
        )


class ConfigurationError(StockLedgerError):
    """Configuration error."""

    pass
