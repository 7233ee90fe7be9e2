"""Domain errors raised by the store, the sale processor and the dashboard.

None of these know about HTTP; `pharmacy.api.errors` maps them to responses.
"""


class PharmacyError(Exception):
    """Base class for every error the core surfaces."""


class NotFound(PharmacyError):
    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity.capitalize()} {entity_id} not found")


class Conflict(PharmacyError):
    """The write would break a stored constraint."""


class DuplicateEntry(Conflict):
    def __init__(self, entity: str, field: str, value):
        self.entity = entity
        self.field = field
        self.value = value
        super().__init__(f"{entity.capitalize()} with {field} '{value}' already exists")


class TotalMismatch(PharmacyError):
    def __init__(self, declared: float, calculated: float):
        self.declared = declared
        self.calculated = calculated
        super().__init__(
            f"Transaction total does not match items: declared {declared}, calculated {calculated}"
        )


class InsufficientStock(PharmacyError):
    def __init__(self, product_id: int, requested: int, available: int):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for product {product_id}: requested {requested}, available {available}"
        )


class StorageUnavailable(PharmacyError):
    """The durable backend could not be reached."""
