"""SQLAlchemy implementation of RentalRepository.

Availability sums are computed in SQL so the ledger reads the same rows
the surrounding transaction has locked.
"""

from __future__ import annotations

from sqlalchemy import case, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rms.domain.exceptions import ConflictError, NotFoundError
from rms.domain.model.rental import ACTIVE_STATUSES, Rental, RentalLine, RentalStatus
from rms.domain.model.value_objects import DateRange, Money, Percentage
from rms.domain.repository.rental_repository import RentalRepository
from rms.infrastructure.persistence.orm import RentalLineRow, RentalRow

_ACTIVE_VALUES = sorted(status.value for status in ACTIVE_STATUSES)

# Pending rentals hold everything they rented; closed ones only what is still out.
_COMMITTED = case(
    (
        RentalRow.status == RentalStatus.PENDING_RETURN.value,
        RentalLineRow.quantity_rented,
    ),
    else_=RentalLineRow.quantity_rented - RentalLineRow.quantity_returned,
)


class SqlRentalRepository(RentalRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- Loading --------------------------------------------------------------

    def get_by_id(self, rental_id: int) -> Rental | None:
        row = self._session.get(RentalRow, rental_id)
        return self._to_domain(row) if row else None

    def get_for_update(self, rental_id: int) -> Rental | None:
        row = self._session.execute(
            select(RentalRow)
            .where(RentalRow.id == rental_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if row is None:
            return None
        # Lock the line rows separately; FOR UPDATE cannot follow an outer join.
        self._session.execute(
            select(RentalLineRow)
            .where(RentalLineRow.rental_id == rental_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalars().all()
        return self._to_domain(row)

    def list_page(
        self,
        status: RentalStatus | None,
        limit: int,
        offset: int,
    ) -> list[Rental]:
        stmt = select(RentalRow)
        if status is not None:
            stmt = stmt.where(RentalRow.status == status.value)
        stmt = (
            stmt.order_by(RentalRow.created_at.desc(), RentalRow.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return [self._to_domain(row) for row in self._session.execute(stmt).scalars()]

    def count(self, status: RentalStatus | None = None) -> int:
        stmt = select(func.count()).select_from(RentalRow)
        if status is not None:
            stmt = stmt.where(RentalRow.status == status.value)
        return int(self._session.execute(stmt).scalar_one())

    def count_starting_within(self, period: DateRange) -> int:
        stmt = (
            select(func.count())
            .select_from(RentalRow)
            .where(RentalRow.start_date >= period.start)
            .where(RentalRow.start_date <= period.end)
        )
        return int(self._session.execute(stmt).scalar_one())

    # --- Writing --------------------------------------------------------------

    def add(self, rental: Rental) -> None:
        row = RentalRow()
        self._apply(row, rental)
        row.lines = [
            RentalLineRow(
                product_id=line.product_id,
                quantity_rented=line.quantity_rented,
                quantity_returned=line.quantity_returned,
            )
            for line in rental.lines
        ]
        self._session.add(row)
        self._flush("Could not store the rental")
        rental.id = row.id

    def save(self, rental: Rental) -> None:
        row = self._session.get(RentalRow, rental.id)
        if row is None:
            raise NotFoundError(f"Rental #{rental.id} not found")
        self._apply(row, rental)

        existing = {line_row.product_id: line_row for line_row in row.lines}
        wanted = {line.product_id: line for line in rental.lines}
        for product_id, line_row in existing.items():
            if product_id not in wanted:
                row.lines.remove(line_row)
        for product_id, line in wanted.items():
            line_row = existing.get(product_id)
            if line_row is None:
                line_row = RentalLineRow(product_id=product_id)
                row.lines.append(line_row)
            line_row.quantity_rented = line.quantity_rented
            line_row.quantity_returned = line.quantity_returned

        self._flush(f"Could not save rental #{rental.id}")

    # --- Availability ---------------------------------------------------------

    def committed_quantity(
        self,
        product_id: int,
        period: DateRange,
        exclude_rental_id: int | None = None,
    ) -> int:
        stmt = self._committed_select(
            period, func.coalesce(func.sum(_COMMITTED), 0)
        ).where(RentalLineRow.product_id == product_id)
        if exclude_rental_id is not None:
            stmt = stmt.where(RentalRow.id != exclude_rental_id)
        return int(self._session.execute(stmt).scalar_one())

    def committed_quantities(
        self,
        product_ids: list[int],
        period: DateRange,
    ) -> dict[int, int]:
        if not product_ids:
            return {}
        stmt = (
            self._committed_select(
                period, RentalLineRow.product_id, func.sum(_COMMITTED)
            )
            .where(RentalLineRow.product_id.in_(product_ids))
            .group_by(RentalLineRow.product_id)
        )
        return {
            product_id: int(total or 0)
            for product_id, total in self._session.execute(stmt).all()
        }

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _apply(row: RentalRow, rental: Rental) -> None:
        row.client_id = rental.client_id
        row.start_date = rental.period.start
        row.end_date = rental.period.end
        row.date_returned = rental.date_returned
        row.notes = rental.notes
        row.return_notes = rental.return_notes
        row.status = rental.status.value
        row.is_delivery_by_us = rental.is_delivery_by_us
        row.delivery_price = rental.delivery_price.amount
        row.discount = rental.discount.value
        row.created_by = rental.created_by
        row.created_at = rental.created_at

    @staticmethod
    def _to_domain(row: RentalRow) -> Rental:
        return Rental(
            id=row.id,
            client_id=row.client_id,
            period=DateRange(row.start_date, row.end_date),
            lines=[
                RentalLine(
                    product_id=line_row.product_id,
                    quantity_rented=line_row.quantity_rented,
                    quantity_returned=line_row.quantity_returned,
                )
                for line_row in row.lines
            ],
            created_by=row.created_by,
            status=RentalStatus(row.status),
            notes=row.notes,
            return_notes=row.return_notes,
            date_returned=row.date_returned,
            is_delivery_by_us=row.is_delivery_by_us,
            delivery_price=Money.of(row.delivery_price),
            discount=Percentage.of(row.discount),
            created_at=row.created_at,
        )

    # --- Helpers --------------------------------------------------------------

    @staticmethod
    def _committed_select(period: DateRange, *columns):
        return (
            select(*columns)
            .select_from(RentalLineRow)
            .join(RentalRow, RentalRow.id == RentalLineRow.rental_id)
            .where(RentalRow.status.in_(_ACTIVE_VALUES))
            .where(RentalRow.start_date <= period.end)
            .where(RentalRow.end_date >= period.start)
        )

    def _flush(self, message: str) -> None:
        try:
            self._session.flush()
        except IntegrityError as exc:
            raise ConflictError(message) from exc
