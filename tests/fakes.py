"""In-memory fake repositories and unit of work for testing.

These implement the same abstract interfaces as the SQLAlchemy
repositories but keep everything in dicts. Reads and writes go through
deep copies, so an aggregate mutated without ``save`` never leaks into
the store, and a rolled-back unit of work restores the last commit.
"""

from __future__ import annotations

import copy

from rms.domain.exceptions import ConflictError, NotFoundError
from rms.domain.model.client import Client
from rms.domain.model.product import Product
from rms.domain.model.rental import ACTIVE_STATUSES, Rental, RentalStatus
from rms.domain.model.value_objects import DateRange
from rms.domain.repository.client_repository import ClientRepository
from rms.domain.repository.product_repository import ProductRepository
from rms.domain.repository.rental_repository import RentalRepository
from rms.domain.repository.unit_of_work import UnitOfWork


class _InMemoryStore:

    def __init__(self) -> None:
        self._store: dict = {}
        self._next_id = 1

    def _assign_id(self) -> int:
        new_id = self._next_id
        self._next_id += 1
        return new_id

    def snapshot(self):
        return copy.deepcopy(self._store), self._next_id

    def restore(self, snapshot) -> None:
        self._store, self._next_id = copy.deepcopy(snapshot)


class FakeProductRepository(_InMemoryStore, ProductRepository):

    def __init__(self, products: list[Product] | None = None) -> None:
        super().__init__()
        self.locked: list[int] = []
        self.rentals: FakeRentalRepository | None = None
        for p in products or []:
            self.add(p)

    def get_by_id(self, product_id: int) -> Product | None:
        return copy.deepcopy(self._store.get(product_id))

    def get_for_update(self, product_id: int) -> Product | None:
        self.locked.append(product_id)
        return self.get_by_id(product_id)

    def get_many(self, product_ids: list[int]) -> dict[int, Product]:
        return {pid: self.get_by_id(pid) for pid in product_ids if pid in self._store}

    def search(self, term: str | None, limit: int, offset: int) -> list[Product]:
        return self._matching(term)[offset:offset + limit]

    def count(self, term: str | None = None) -> int:
        return len(self._matching(term))

    def add(self, product: Product) -> None:
        if product.id is None:
            product.id = self._assign_id()
        else:
            self._next_id = max(self._next_id, product.id + 1)
        self._store[product.id] = copy.deepcopy(product)

    def save(self, product: Product) -> None:
        if product.id not in self._store:
            raise NotFoundError(f"Product #{product.id} not found")
        self._store[product.id] = copy.deepcopy(product)

    def delete(self, product_id: int) -> None:
        if product_id not in self._store:
            raise NotFoundError(f"Product #{product_id} not found")
        if self.rentals is not None and self.rentals.references(product_id):
            raise ConflictError(f"Product #{product_id} is still referenced by rentals")
        del self._store[product_id]

    def _matching(self, term: str | None) -> list[Product]:
        products = sorted(self._store.values(), key=lambda p: (p.name, p.id))
        if term:
            needle = term.strip().lower()
            products = [
                p for p in products
                if needle in p.name.lower() or needle in p.code.lower()
            ]
        return [copy.deepcopy(p) for p in products]


class FakeClientRepository(_InMemoryStore, ClientRepository):

    def __init__(self, clients: list[Client] | None = None) -> None:
        super().__init__()
        # Number of upcoming ``add`` calls that lose a unique-key race.
        self.conflicts_remaining = 0
        for c in clients or []:
            self.add(c)

    def get_by_id(self, client_id: int) -> Client | None:
        return copy.deepcopy(self._store.get(client_id))

    def get_by_dni(self, dni: str) -> Client | None:
        for c in self._store.values():
            if c.dni == dni:
                return copy.deepcopy(c)
        return None

    def add(self, client: Client) -> None:
        if self.conflicts_remaining > 0:
            self.conflicts_remaining -= 1
            raise ConflictError(f"A client with national ID '{client.dni}' already exists")
        if self.get_by_dni(client.dni) is not None:
            raise ConflictError(f"A client with national ID '{client.dni}' already exists")
        if client.id is None:
            client.id = self._assign_id()
        else:
            self._next_id = max(self._next_id, client.id + 1)
        self._store[client.id] = copy.deepcopy(client)

    def save(self, client: Client) -> None:
        if client.id not in self._store:
            raise NotFoundError(f"Client #{client.id} not found")
        self._store[client.id] = copy.deepcopy(client)

    def all(self) -> list[Client]:
        return list(self._store.values())


class FakeRentalRepository(_InMemoryStore, RentalRepository):

    def __init__(self, rentals: list[Rental] | None = None) -> None:
        super().__init__()
        for r in rentals or []:
            self.add(r)

    def get_by_id(self, rental_id: int) -> Rental | None:
        return copy.deepcopy(self._store.get(rental_id))

    def get_for_update(self, rental_id: int) -> Rental | None:
        return self.get_by_id(rental_id)

    def add(self, rental: Rental) -> None:
        if rental.id is None:
            rental.id = self._assign_id()
        else:
            self._next_id = max(self._next_id, rental.id + 1)
        self._store[rental.id] = copy.deepcopy(rental)

    def save(self, rental: Rental) -> None:
        if rental.id not in self._store:
            raise NotFoundError(f"Rental #{rental.id} not found")
        self._store[rental.id] = copy.deepcopy(rental)

    def list_page(
        self,
        status: RentalStatus | None,
        limit: int,
        offset: int,
    ) -> list[Rental]:
        rentals = [r for r in self._store.values() if status is None or r.status == status]
        rentals.sort(key=lambda r: (r.created_at, r.id), reverse=True)
        return [copy.deepcopy(r) for r in rentals[offset:offset + limit]]

    def count(self, status: RentalStatus | None = None) -> int:
        return sum(1 for r in self._store.values() if status is None or r.status == status)

    def count_starting_within(self, period: DateRange) -> int:
        return sum(1 for r in self._store.values() if period.start <= r.period.start <= period.end)

    def committed_quantity(
        self,
        product_id: int,
        period: DateRange,
        exclude_rental_id: int | None = None,
    ) -> int:
        return sum(
            r.committed_quantity_for(product_id)
            for r in self._store.values()
            if r.status in ACTIVE_STATUSES
            and r.period.overlaps(period)
            and r.id != exclude_rental_id
        )

    def committed_quantities(
        self,
        product_ids: list[int],
        period: DateRange,
    ) -> dict[int, int]:
        return {pid: self.committed_quantity(pid, period) for pid in product_ids}

    def references(self, product_id: int) -> bool:
        return any(r.line_for(product_id) is not None for r in self._store.values())

    def all(self) -> list[Rental]:
        return list(self._store.values())


class FakeUnitOfWork(UnitOfWork):
    """Snapshots every store on enter and restores it unless committed."""

    def __init__(
        self,
        products: list[Product] | None = None,
        clients: list[Client] | None = None,
        rentals: list[Rental] | None = None,
    ) -> None:
        self.products = FakeProductRepository(products)
        self.clients = FakeClientRepository(clients)
        self.rentals = FakeRentalRepository(rentals)
        self.products.rentals = self.rentals
        self.commits = 0
        self.rollbacks = 0
        self._snapshots = None

    def __enter__(self) -> FakeUnitOfWork:
        self._snapshots = [
            (repo, repo.snapshot())
            for repo in (self.products, self.clients, self.rentals)
        ]
        return self

    def commit(self) -> None:
        self.commits += 1
        self._snapshots = None

    def rollback(self) -> None:
        if self._snapshots is None:
            return
        self.rollbacks += 1
        for repo, snapshot in self._snapshots:
            repo.restore(snapshot)
        self._snapshots = None
