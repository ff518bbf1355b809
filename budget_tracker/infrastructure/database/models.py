"""SQLAlchemy ORM models matching db/schema.sql"""

from sqlalchemy import Column, Integer, Boolean, Numeric, Date, DateTime, ForeignKey, Text, JSON
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class BillRecord(Base):
    """Expense obligation, optionally tracked as an installment"""

    __tablename__ = "bills"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    due_date = Column(Date, nullable=False)
    description = Column(Text, nullable=False, default="")
    is_recurring = Column(Boolean, nullable=False, default=False)
    total_owed = Column(Numeric(12, 2), nullable=True)
    remaining_balance = Column(Numeric(12, 2), nullable=True)
    payment_dates = Column(JSON, nullable=False, default=list)  # UTC timestamp strings
    payment_amounts = Column(JSON, nullable=False, default=list)  # decimal strings, parallel to payment_dates
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    scheduled_payments = relationship(
        "ScheduledPaymentRecord", back_populates="bill", cascade="all, delete-orphan"
    )


class PaycheckRecord(Base):
    """Income entry"""

    __tablename__ = "paychecks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    amount = Column(Numeric(12, 2), nullable=False)
    frequency = Column(Text, nullable=False, default="monthly")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class ScheduledPaymentRecord(Base):
    """Future payment intent for a bill"""

    __tablename__ = "scheduled_payments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    bill_id = Column(Integer, ForeignKey("bills.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    due_date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    bill = relationship("BillRecord", back_populates="scheduled_payments")


TABLES = {
    BillRecord.__tablename__: BillRecord,
    PaycheckRecord.__tablename__: PaycheckRecord,
    ScheduledPaymentRecord.__tablename__: ScheduledPaymentRecord,
}
