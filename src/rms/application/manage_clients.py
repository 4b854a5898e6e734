"""Application services: client lookup and edits.

Clients are created lazily by the rental use cases (see ClientResolver);
here they are only looked up by national ID and updated explicitly.
"""

from __future__ import annotations

from loguru import logger

from rms.application.dto import ClientDTO
from rms.application.mappers import client_to_dto
from rms.domain.exceptions import NotFoundError
from rms.domain.repository.unit_of_work import UnitOfWork


class FindClientHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, dni: str) -> ClientDTO:
        with self._uow as uow:
            client = uow.clients.get_by_dni(dni.strip())
        if client is None:
            raise NotFoundError(f"No client with national ID '{dni}'")
        return client_to_dto(client)


class UpdateClientHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        client_id: int,
        name: str | None = None,
        phone: str | None = None,
    ) -> ClientDTO:
        with self._uow as uow:
            client = uow.clients.get_by_id(client_id)
            if client is None:
                raise NotFoundError(f"Client #{client_id} not found")
            client.update_details(name=name, phone=phone)
            uow.clients.save(client)
            uow.commit()

        logger.info("Client #{} updated", client_id)
        return client_to_dto(client)
