"""SQLAlchemy implementation of ClientRepository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rms.domain.exceptions import ConflictError, NotFoundError
from rms.domain.model.client import Client
from rms.domain.repository.client_repository import ClientRepository
from rms.infrastructure.persistence.orm import ClientRow


class SqlClientRepository(ClientRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, client_id: int) -> Client | None:
        row = self._session.get(ClientRow, client_id)
        return self._to_domain(row) if row else None

    def get_by_dni(self, dni: str) -> Client | None:
        row = self._session.execute(
            select(ClientRow).where(ClientRow.dni == dni)
        ).scalar_one_or_none()
        return self._to_domain(row) if row else None

    def add(self, client: Client) -> None:
        row = ClientRow(dni=client.dni, name=client.name, phone=client.phone)
        self._session.add(row)
        try:
            self._session.flush()
        except IntegrityError as exc:
            raise ConflictError(
                f"A client with national ID '{client.dni}' already exists"
            ) from exc
        client.id = row.id

    def save(self, client: Client) -> None:
        row = self._session.get(ClientRow, client.id)
        if row is None:
            raise NotFoundError(f"Client #{client.id} not found")
        row.name = client.name
        row.phone = client.phone
        self._session.flush()

    @staticmethod
    def _to_domain(row: ClientRow) -> Client:
        return Client(id=row.id, dni=row.dni, name=row.name, phone=row.phone)
