from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt

from .domain import DEFAULT_USER, StockStatus

Number = int | float

# Request-side numbers are checked by the services, which reject booleans
# and unparsable strings with a 400.
LooseNumber = Any


class ProductBase(BaseModel):
    sku: str = Field(default="", max_length=64)
    nombre: str = Field(default="", max_length=255)
    categoria: str = Field(default="", max_length=100)
    stock: Number = 0
    precio: Number = 0


class ProductCreate(BaseModel):
    sku: str = Field(..., min_length=1, max_length=64)
    nombre: str = Field(..., min_length=1, max_length=255)
    categoria: str = Field(..., min_length=1, max_length=100)
    stock: LooseNumber = None
    precio: LooseNumber = None


class ProductWrite(BaseModel):
    """Body of PUT /products/{sku}. Omitted fields take their defaults."""

    nombre: str | None = Field(default=None, max_length=255)
    categoria: str | None = Field(default=None, max_length=100)
    stock: LooseNumber = None
    precio: LooseNumber = None


class ProductUpdate(BaseModel):
    nombre: str | None = None
    categoria: str | None = None
    precio: LooseNumber = None


class ProductRead(ProductBase):
    model_config = ConfigDict(from_attributes=True)


class ProductListResponse(BaseModel):
    productos: list[ProductRead]


class ProductSaveResponse(BaseModel):
    ok: bool = True
    productos: list[ProductRead]


class ResolvedProductRead(ProductRead):
    effective_stock: Number = Field(default=0, serialization_alias="effectiveStock")
    status: StockStatus


class StockAdjustment(BaseModel):
    target_stock: LooseNumber
    user: str | None = Field(default=None, max_length=255)


class MovementBase(BaseModel):
    date: str = ""
    product: str = ""
    sku: str = ""
    movement: str = ""
    quantity: StrictInt | StrictFloat = 0
    user: str = DEFAULT_USER


class MovementCreate(BaseModel):
    """Loose on purpose: field rules are enforced by the ledger (400, not 422).

    Unknown keys, ``id`` included, are dropped.
    """

    model_config = ConfigDict(extra="ignore")

    product: str | None = None
    sku: str | None = None
    movement: str | None = None
    quantity: LooseNumber = None
    user: str | None = None
    date: str | None = None


class MovementUpdate(MovementCreate):
    pass


class MovementRead(MovementBase):
    id: str

    model_config = ConfigDict(from_attributes=True)


class MovementListResponse(BaseModel):
    movements: list[MovementRead]


class MovementAdjustmentResponse(BaseModel):
    ok: bool = True
    movement: MovementRead | None = None


class NormalizeResponse(BaseModel):
    ok: bool = True
    updated: int


class ResolveRequest(BaseModel):
    products: list[ProductBase] = Field(default_factory=list)
    movements: list[MovementBase] = Field(default_factory=list)


class InventorySummaryRead(BaseModel):
    total_products: int
    available: int
    restock_soon: int
    out_of_stock: int
    total_units: Number
    total_value: float

    model_config = ConfigDict(from_attributes=True)


class OkResponse(BaseModel):
    ok: bool = True
