from fastapi import APIRouter, Depends

from stockledger import schemas
from stockledger.deps import get_catalog, get_ledger
from stockledger.domain import Movement, Product
from stockledger.services import MovementLedger, ProductCatalog, resolve, summarize

router = APIRouter(prefix="/inventory", tags=["inventory"])


@router.post("/resolve", response_model=list[schemas.ResolvedProductRead])
def resolve_effective_stock(payload: schemas.ResolveRequest):
    """Resolve caller-supplied products and movements. Nothing is read or stored."""
    products = [Product.from_record(item.model_dump()) for item in payload.products]
    movements = [
        Movement.from_record({**item.model_dump(), "id": ""}) for item in payload.movements
    ]
    return resolve(products, movements)


@router.get("/summary", response_model=schemas.InventorySummaryRead)
def get_inventory_summary(
    catalog: ProductCatalog = Depends(get_catalog),
    ledger: MovementLedger = Depends(get_ledger),
):
    """
    Dashboard figures over the stored catalog and ledger:
    - product count and count per status
    - units on hand and stock value (negative stock counts as zero)
    """
    return summarize(resolve(catalog.list(), ledger.list()))
