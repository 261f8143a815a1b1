class InventoryError(Exception):
    pass


class InvalidTransactionError(InventoryError):
    pass


class ReferenceNotFoundError(InventoryError):
    """A transaction names a product or warehouse that does not exist."""


class EntityNotFoundError(InventoryError):
    pass
