"""Application service: Show Dashboard use case (query)."""

from __future__ import annotations

from datetime import date

from rms.application.dto import DashboardDTO
from rms.domain.model.rental import RentalStatus
from rms.domain.model.value_objects import DateRange
from rms.domain.repository.unit_of_work import UnitOfWork


class ShowDashboardHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, today: date | None = None) -> DashboardDTO:
        """Rentals awaiting return, and rentals starting this month."""
        month = DateRange.month_of(today or date.today())
        with self._uow as uow:
            pending = uow.rentals.count(RentalStatus.PENDING_RETURN)
            monthly = uow.rentals.count_starting_within(month)
        return DashboardDTO(
            pending_rentals=pending,
            monthly_events=monthly,
            month=month.start.strftime("%Y-%m"),
        )
