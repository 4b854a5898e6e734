"""SQLAlchemy table mappings.

Rows are persistence records only; repositories translate them to and
from the domain dataclasses.
"""

from __future__ import annotations

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class ProductRow(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("total_quantity >= 0", name="ck_products_total_quantity"),
        CheckConstraint("price >= 0", name="ck_products_price"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(50), nullable=False)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text)
    total_quantity = Column(Integer, nullable=False, default=0)
    price = Column(Numeric(10, 2), nullable=False, default=0)


class ClientRow(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    dni = Column(String(32), nullable=False, unique=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(50))


class RentalRow(Base):
    __tablename__ = "rentals"
    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="ck_rentals_period"),
        CheckConstraint(
            "status IN ('pending_return', 'completed', 'with_issues')",
            name="ck_rentals_status",
        ),
        CheckConstraint("discount >= 0 AND discount <= 100", name="ck_rentals_discount"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    date_returned = Column(DateTime(timezone=True))
    notes = Column(Text)
    return_notes = Column(Text)
    status = Column(String(20), nullable=False, default="pending_return", index=True)
    is_delivery_by_us = Column(Boolean, nullable=False, default=False)
    delivery_price = Column(Numeric(10, 2), nullable=False, default=0)
    discount = Column(Numeric(5, 2), nullable=False, default=0)
    created_by = Column(String(64), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)

    lines = relationship(
        "RentalLineRow",
        back_populates="rental",
        cascade="all, delete-orphan",
        order_by="RentalLineRow.product_id",
        lazy="selectin",
    )


class RentalLineRow(Base):
    __tablename__ = "rental_products"
    __table_args__ = (
        CheckConstraint("quantity_rented > 0", name="ck_rental_products_rented"),
        CheckConstraint(
            "quantity_returned >= 0 AND quantity_returned <= quantity_rented",
            name="ck_rental_products_returned",
        ),
    )

    rental_id = Column(
        Integer, ForeignKey("rentals.id", ondelete="CASCADE"), primary_key=True
    )
    product_id = Column(
        Integer, ForeignKey("products.id", ondelete="RESTRICT"), primary_key=True
    )
    quantity_rented = Column(Integer, nullable=False)
    quantity_returned = Column(Integer, nullable=False, default=0)

    rental = relationship("RentalRow", back_populates="lines")
