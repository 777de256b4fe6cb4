from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Mapping
from uuid import uuid4

from stockledger.domain import DEFAULT_USER, Movement, clean_text, coerce_number
from stockledger.errors import NotFoundError, ValidationError
from stockledger.repositories.base import MovementRepository
from stockledger.utils.dates import normalize_date, normalize_or, normalize_or_now
from stockledger.utils.validation import validate_movement_fields

logger = logging.getLogger(__name__)


class MovementLedger:
    """Stock In / Stock Out records: create, edit, delete, list."""

    def __init__(self, repository: MovementRepository, *, default_user: str = DEFAULT_USER) -> None:
        self.repository = repository
        self.default_user = default_user

    def list(self) -> list[Movement]:
        return self.repository.list()

    def get(self, movement_id: str) -> Movement:
        movement = self.repository.get(movement_id)
        if movement is None:
            raise NotFoundError(f"Movement {movement_id} not found")
        return movement

    def _build(self, movement_id: str, date: str, data: Mapping[str, Any]) -> Movement:
        error = validate_movement_fields(
            product=data.get("product"),
            sku=data.get("sku"),
            movement=data.get("movement"),
            quantity=data.get("quantity"),
        )
        if error:
            logger.warning("Rejected movement %s: %s", movement_id, error)
            raise ValidationError(error)

        return Movement(
            id=movement_id,
            date=date,
            product=clean_text(data.get("product")),
            sku=clean_text(data.get("sku")),
            movement=clean_text(data.get("movement")),
            quantity=coerce_number(data.get("quantity")),
            user=clean_text(data.get("user")) or self.default_user,
        )

    def add(self, draft: Mapping[str, Any]) -> Movement:
        """Record a new movement.

        Any ``id`` in ``draft`` is ignored; a fresh one is generated. A missing
        or unreadable ``date`` becomes the current time.
        """
        movement = self._build(str(uuid4()), normalize_or_now(draft.get("date")), draft)

        with self.repository.write_lock():
            self.repository.put(movement)

        logger.info(
            "Movement %s recorded: %s %s x%s",
            movement.id,
            movement.movement,
            movement.sku,
            movement.quantity,
        )
        return movement

    def update(self, movement_id: str, patch: Mapping[str, Any]) -> Movement:
        """Merge ``patch`` over an existing movement.

        The id never changes. A new ``date`` is re-normalized and falls back to
        the stored date, not to the current time. The merged record goes
        through the same validation as ``add``.
        """
        with self.repository.write_lock():
            current = self.get(movement_id)

            changes = {key: value for key, value in patch.items() if key != "id"}
            date = current.date
            if "date" in changes:
                date = normalize_or(changes.pop("date"), current.date)

            updated = self._build(current.id, date, {**current.to_record(), **changes})
            self.repository.put(updated)

        logger.info("Movement %s updated", movement_id)
        return updated

    def delete(self, movement_id: str) -> None:
        """Remove a movement. Unknown ids are a silent no-op."""
        with self.repository.write_lock():
            removed = self.repository.remove(movement_id)

        if removed:
            logger.info("Movement %s deleted", movement_id)
        else:
            logger.info("Movement %s not present, nothing deleted", movement_id)

    def normalize_dates(self) -> int:
        """Rewrite every stored date in canonical form.

        Dates that cannot be read are left as they are. Returns how many
        records changed; nothing is written when none did.
        """
        with self.repository.write_lock():
            movements = self.repository.list()
            updated = 0
            normalized = []
            for movement in movements:
                iso = normalize_date(movement.date)
                if iso and iso != movement.date:
                    updated += 1
                    movement = replace(movement, date=iso)
                normalized.append(movement)

            if updated:
                self.repository.replace_all(normalized)

        logger.info("Normalized %d movement date(s)", updated)
        return updated
