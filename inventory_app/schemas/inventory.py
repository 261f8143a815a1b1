from datetime import datetime
from decimal import Decimal

from pydantic import (
    AliasChoices,
    BaseModel,
    Field,
    computed_field,
    field_serializer,
    field_validator,
    model_validator,
)


class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=160)
    price: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    description: str | None = None


class ProductUpdate(ProductCreate):
    sku: int


class WarehouseCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    city_name: str | None = Field(
        default=None,
        min_length=1,
        max_length=160,
        validation_alias=AliasChoices("city_name", "cityName"),
    )
    city_id: int | None = Field(default=None, validation_alias=AliasChoices("city_id", "cityId"))

    @model_validator(mode="after")
    def _require_city(self):
        if self.city_name is None and self.city_id is None:
            raise ValueError("Either city_name or city_id is required")
        return self


class WarehouseUpdate(WarehouseCreate):
    id: int


class TransactionCreate(BaseModel):
    sku: int
    warehouse_id: int = Field(validation_alias=AliasChoices("warehouse_id", "warehouseId"))
    quantity: int

    @field_validator("quantity")
    @classmethod
    def _non_zero(cls, value: int) -> int:
        if value == 0:
            raise ValueError("quantity must be a nonzero integer")
        return value


class CityOut(BaseModel):
    id: int
    name: str
    country: str | None

    model_config = {"from_attributes": True}


class ProductInventoryOut(BaseModel):
    warehouse_id: int
    warehouse_name: str
    city_id: int
    quantity: int
    weather: str | None = None


class WarehouseInventoryOut(BaseModel):
    sku: int
    product_name: str
    quantity: int


class ProductOut(BaseModel):
    sku: int
    name: str
    price: Decimal
    description: str | None
    inventory: list[ProductInventoryOut] = []

    @computed_field
    @property
    def total_inventory(self) -> int:
        return sum(position.quantity for position in self.inventory)

    @field_serializer("price")
    def serialize_price(self, price: Decimal) -> float:
        return float(price)


class WarehouseOut(BaseModel):
    id: int
    name: str
    city_id: int
    city_name: str
    weather: str | None = None
    inventory: list[WarehouseInventoryOut] = []

    @computed_field
    @property
    def total_inventory(self) -> int:
        return sum(position.quantity for position in self.inventory)


class TransactionOut(BaseModel):
    id: int
    sku: int
    product_name: str | None
    warehouse_id: int
    warehouse_name: str | None
    quantity: int
    created_at: datetime


class TransactionResultOut(BaseModel):
    accepted: bool
    transaction_id: int | None
    quantity: int
    detail: str | None = None


class MutationOut(BaseModel):
    ok: bool
    id: int | None = None
