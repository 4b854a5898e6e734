"""SQLAlchemy-backed UnitOfWork: one session, one transaction."""

from __future__ import annotations

from loguru import logger
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session, sessionmaker

from rms.domain.exceptions import ConflictError
from rms.domain.repository.unit_of_work import UnitOfWork
from rms.infrastructure.persistence.sql_client_repository import SqlClientRepository
from rms.infrastructure.persistence.sql_product_repository import SqlProductRepository
from rms.infrastructure.persistence.sql_rental_repository import SqlRentalRepository

# SQLSTATEs raised when concurrent transactions cannot be serialized.
_SERIALIZATION_CODES = {"40001", "40P01"}


class SqlAlchemyUnitOfWork(UnitOfWork):

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory
        self._session: Session | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        self._session = self._session_factory()
        try:
            # Start the transaction now so SQLite takes its write lock here.
            self._session.connection()
        except OperationalError as exc:
            self._session.close()
            self._session = None
            if is_serialization_failure(exc):
                logger.warning("Could not start a transaction: {}", exc.orig)
                raise ConflictError(
                    "The data is being changed by another operation, please retry"
                ) from exc
            raise
        self.products = SqlProductRepository(self._session)
        self.clients = SqlClientRepository(self._session)
        self.rentals = SqlRentalRepository(self._session)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            super().__exit__(exc_type, exc, tb)
        finally:
            self._session.close()
            self._session = None

    def commit(self) -> None:
        try:
            self._session.commit()
        except IntegrityError as exc:
            self._session.rollback()
            raise ConflictError("The change conflicts with existing data") from exc
        except OperationalError as exc:
            self._session.rollback()
            if is_serialization_failure(exc):
                logger.warning("Transaction could not be serialized: {}", exc.orig)
                raise ConflictError(
                    "The data changed concurrently, please retry"
                ) from exc
            raise
        logger.debug("Transaction committed")

    def rollback(self) -> None:
        if self._session is not None:
            self._session.rollback()


def is_serialization_failure(exc: OperationalError) -> bool:
    orig = exc.orig
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code in _SERIALIZATION_CODES:
        return True
    return "database is locked" in str(orig)
