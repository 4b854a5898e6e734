"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from rms.domain.model.invoice import DeliveryFeePolicy
from rms.domain.service.invoice_assembler import InvoiceAssembler
from rms.infrastructure import config
from rms.infrastructure.persistence.session import (
    build_engine,
    build_session_factory,
    create_schema,
)
from rms.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork

_engine: Engine | None = None
_session_factory: sessionmaker | None = None


def engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = build_engine(
            config.DATABASE_URL, config.DB_ISOLATION_LEVEL, config.DB_LOCK_TIMEOUT
        )
    return _engine


def session_factory() -> sessionmaker:
    global _session_factory
    if _session_factory is None:
        _session_factory = build_session_factory(engine())
    return _session_factory


def unit_of_work() -> SqlAlchemyUnitOfWork:
    return SqlAlchemyUnitOfWork(session_factory())


def invoice_assembler() -> InvoiceAssembler:
    try:
        policy = DeliveryFeePolicy(config.INVOICE_DELIVERY_POLICY)
    except ValueError as exc:
        raise RuntimeError(
            f"Unknown invoice delivery policy '{config.INVOICE_DELIVERY_POLICY}'"
        ) from exc
    return InvoiceAssembler(policy)


def init_database() -> None:
    create_schema(engine())
