from fastapi import APIRouter, Depends, Query, status

from stockledger import schemas
from stockledger.deps import get_ledger
from stockledger.services import MovementLedger

router = APIRouter(prefix="/movements", tags=["movements"])


@router.get("", response_model=schemas.MovementListResponse)
def list_movements(
    ledger: MovementLedger = Depends(get_ledger),
    sku: str | None = Query(None),
):
    """All movements, newest first."""
    movements = ledger.list()
    if sku:
        movements = [m for m in movements if m.sku == sku]
    movements.sort(key=lambda m: m.date, reverse=True)
    return {"movements": movements}


@router.post("", response_model=schemas.MovementRead, status_code=status.HTTP_201_CREATED)
def create_movement(
    payload: schemas.MovementCreate,
    ledger: MovementLedger = Depends(get_ledger),
):
    return ledger.add(payload.model_dump(exclude_none=True))


@router.post("/normalize", response_model=schemas.NormalizeResponse)
def normalize_movement_dates(ledger: MovementLedger = Depends(get_ledger)):
    """Rewrite legacy ``DD/MM/YYYY`` dates in canonical form."""
    return {"ok": True, "updated": ledger.normalize_dates()}


@router.get("/{movement_id}", response_model=schemas.MovementRead)
def get_movement(movement_id: str, ledger: MovementLedger = Depends(get_ledger)):
    return ledger.get(movement_id)


@router.patch("/{movement_id}", response_model=schemas.MovementRead)
def update_movement(
    movement_id: str,
    payload: schemas.MovementUpdate,
    ledger: MovementLedger = Depends(get_ledger),
):
    return ledger.update(movement_id, payload.model_dump(exclude_unset=True))


@router.delete("/{movement_id}", response_model=schemas.OkResponse)
def delete_movement(movement_id: str, ledger: MovementLedger = Depends(get_ledger)):
    ledger.delete(movement_id)
    return {"ok": True}
