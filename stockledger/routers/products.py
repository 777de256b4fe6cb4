from fastapi import APIRouter, Depends, status

from stockledger import schemas
from stockledger.deps import get_adjuster, get_catalog, get_ledger
from stockledger.services import MovementLedger, ProductCatalog, StockAdjuster, resolve

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=schemas.ProductListResponse)
def list_products(catalog: ProductCatalog = Depends(get_catalog)):
    return {"productos": catalog.list()}


@router.post("", response_model=schemas.ProductSaveResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: schemas.ProductCreate,
    catalog: ProductCatalog = Depends(get_catalog),
):
    # Initial stock is only honoured for a SKU that does not exist yet.
    fields = payload.model_dump(exclude={"sku"}, exclude_none=True)
    productos = catalog.create_or_replace(payload.sku.strip(), fields)
    return {"ok": True, "productos": productos}


@router.get("/resolved", response_model=list[schemas.ResolvedProductRead])
def list_resolved_products(
    catalog: ProductCatalog = Depends(get_catalog),
    ledger: MovementLedger = Depends(get_ledger),
):
    """Products with their effective stock and status, recomputed on every call."""
    return resolve(catalog.list(), ledger.list())


@router.get("/{sku}", response_model=schemas.ProductRead)
def get_product(sku: str, catalog: ProductCatalog = Depends(get_catalog)):
    return catalog.get(sku)


@router.put("/{sku}", response_model=schemas.ProductSaveResponse)
def save_product(
    sku: str,
    payload: schemas.ProductWrite,
    catalog: ProductCatalog = Depends(get_catalog),
):
    """Create or replace a product. The base stock of an existing SKU is kept."""
    productos = catalog.create_or_replace(sku.strip(), payload.model_dump(exclude_none=True))
    return {"ok": True, "productos": productos}


@router.patch("/{sku}", response_model=schemas.ProductRead)
def update_product(
    sku: str,
    payload: schemas.ProductUpdate,
    catalog: ProductCatalog = Depends(get_catalog),
):
    return catalog.edit(sku, payload.model_dump(exclude_unset=True))


@router.delete("/{sku}", response_model=schemas.OkResponse)
def delete_product(sku: str, catalog: ProductCatalog = Depends(get_catalog)):
    # Movements for this SKU stay in the ledger.
    catalog.delete(sku)
    return {"ok": True}


@router.post("/{sku}/adjust", response_model=schemas.MovementAdjustmentResponse)
def adjust_stock(
    sku: str,
    payload: schemas.StockAdjustment,
    adjuster: StockAdjuster = Depends(get_adjuster),
):
    """Record the Stock In / Stock Out that brings a product to ``target_stock``."""
    movement = adjuster.adjust_to(sku, payload.target_stock, user=payload.user)
    return {"ok": True, "movement": movement}
