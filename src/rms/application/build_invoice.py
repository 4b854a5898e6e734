"""Application service: Build Invoice use case (query).

Loads the rental graph and hands it to the InvoiceAssembler. The result
is handed to a renderer; nothing is written back.
"""

from __future__ import annotations

from rms.application.dto import InvoiceDTO
from rms.application.mappers import invoice_to_dto
from rms.domain.exceptions import NotFoundError
from rms.domain.repository.unit_of_work import UnitOfWork
from rms.domain.service.invoice_assembler import InvoiceAssembler


class BuildInvoiceHandler:

    def __init__(self, uow: UnitOfWork, assembler: InvoiceAssembler) -> None:
        self._uow = uow
        self._assembler = assembler

    def handle(self, rental_id: int) -> InvoiceDTO:
        with self._uow as uow:
            rental = uow.rentals.get_by_id(rental_id)
            if rental is None:
                raise NotFoundError(f"Rental #{rental_id} not found")
            client = uow.clients.get_by_id(rental.client_id)
            if client is None:
                raise NotFoundError(f"Client #{rental.client_id} not found")
            products = uow.products.get_many([line.product_id for line in rental.lines])

        invoice = self._assembler.build(rental, client, products)
        return invoice_to_dto(invoice)
