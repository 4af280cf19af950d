"""JSON-file-backed UnitOfWork.

The whole store is one JSON document.  Entering the unit of work takes an
exclusive lock on it and loads it; repositories then work on that in-memory
copy.  ``commit()`` writes the copy back atomically, and anything not
committed is simply never written.

Holding the store lock for the whole operation is what keeps concurrent
reservations honest: two orders racing for the same variant run one after
the other, and the second sees the first one's reservation when it checks
availability.
"""

from __future__ import annotations

from contextlib import ExitStack
from pathlib import Path
from typing import Any

import structlog

from stockledger.domain.repository.unit_of_work import UnitOfWork
from stockledger.infrastructure.persistence.json_customer_repository import (
    JsonCustomerRepository,
)
from stockledger.infrastructure.persistence.json_image_lookup import JsonImageLookup
from stockledger.infrastructure.persistence.json_inventory_repository import (
    JsonInventoryRepository,
)
from stockledger.infrastructure.persistence.json_movement_repository import (
    JsonMovementRepository,
)
from stockledger.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from stockledger.infrastructure.persistence.json_store import (
    exclusive_lock,
    read_document,
    write_document,
)

logger = structlog.get_logger(__name__)


class JsonUnitOfWork(UnitOfWork):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._stack: ExitStack | None = None
        self._document: dict[str, Any] = {}

    def _begin(self) -> None:
        if self._stack is not None:
            raise RuntimeError("JsonUnitOfWork is not re-entrant")
        stack = ExitStack()
        stack.enter_context(exclusive_lock(self._file_path))
        self._stack = stack
        try:
            self._load()
        except Exception:
            self._end()
            raise

    def _commit(self) -> None:
        write_document(self._file_path, self._document)

    def rollback(self) -> None:
        logger.debug("Discarding uncommitted changes", store=str(self._file_path))
        self._load()

    def _discard(self) -> None:
        # Nothing uncommitted ever reaches the file, so dropping the copy is enough.
        self._document = {}

    def _end(self) -> None:
        stack, self._stack = self._stack, None
        if stack is not None:
            stack.close()

    def _load(self) -> None:
        self._document = read_document(self._file_path)
        self.orders = JsonOrderRepository(self._document)
        self.inventory = JsonInventoryRepository(self._document)
        self.movements = JsonMovementRepository(self._document)
        self.customers = JsonCustomerRepository(self._document)
        self.images = JsonImageLookup(self._document)
