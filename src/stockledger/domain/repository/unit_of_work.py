"""Unit of Work: the transaction boundary for every use case.

Handlers do all their reads and writes through the repositories hanging off
a unit of work and call ``commit()`` once at the end.  Leaving the ``with``
block without committing, or because an exception escaped, discards every
change made inside it: stock rows, audit records and order headers alike.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockledger.domain.repository.customer_repository import CustomerRepository
from stockledger.domain.repository.image_lookup import ImageLookup
from stockledger.domain.repository.inventory_repository import InventoryRepository
from stockledger.domain.repository.movement_repository import MovementRepository
from stockledger.domain.repository.order_repository import OrderRepository


class UnitOfWork(ABC):

    orders: OrderRepository
    inventory: InventoryRepository
    movements: MovementRepository
    customers: CustomerRepository
    images: ImageLookup

    def __enter__(self) -> UnitOfWork:
        self._begin()
        self._committed = False
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if not self._committed:
                self._discard()
        finally:
            self._end()

    def commit(self) -> None:
        self._commit()
        self._committed = True

    @abstractmethod
    def rollback(self) -> None:
        """Discard everything written since the unit of work began."""

    def _discard(self) -> None:
        """Drop uncommitted work as the block ends; defaults to ``rollback()``."""
        self.rollback()

    @abstractmethod
    def _begin(self) -> None:
        """Acquire isolation and load the working state."""

    @abstractmethod
    def _commit(self) -> None:
        """Publish the working state."""

    def _end(self) -> None:
        """Release whatever ``_begin`` acquired."""
