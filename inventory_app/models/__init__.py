from inventory_app.models.inventory import City, InventoryChange, InventoryPosition, Product, Warehouse

__all__ = [
    "City",
    "InventoryChange",
    "InventoryPosition",
    "Product",
    "Warehouse",
]
