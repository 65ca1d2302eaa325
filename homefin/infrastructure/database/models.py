"""SQLAlchemy ORM models for finance records"""

import uuid
from sqlalchemy import Column, String, Boolean, Float, DateTime, Date, Text, JSON, Uuid
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class ExpenseRecord(Base):
    """Expense, including optional room-rent payment details"""

    __tablename__ = "expense"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    amount = Column(Float, nullable=False)
    category = Column(Text, nullable=False)
    subcategory = Column(Text, nullable=True)
    description = Column(Text, nullable=False)
    date = Column(DateTime, nullable=False, index=True)
    payment_method = Column(Text, nullable=True)
    location = Column(Text, nullable=True)
    recurring = Column(Boolean, nullable=False, default=False)
    tags = Column(JSON, nullable=False, default=list)

    # Room rent details (all null for ordinary expenses)
    payment_date = Column(Date, nullable=True)
    payment_status = Column(String(16), nullable=True)
    rent_start_date = Column(Date, nullable=True)
    rent_end_date = Column(Date, nullable=True)
    weekly_rate = Column(Float, nullable=True)
    calculated_amount = Column(Float, nullable=True)
    landlord_name = Column(Text, nullable=True)
    room_details = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class IncomeRecord(Base):
    __tablename__ = "income"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    amount = Column(Float, nullable=False)
    source = Column(Text, nullable=False)
    type = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="")
    date = Column(DateTime, nullable=False, index=True)
    recurring = Column(Boolean, nullable=False, default=False)
    frequency = Column(String(16), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class BudgetRecord(Base):
    """Spending envelope"""

    __tablename__ = "budget"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    category = Column(Text, nullable=False)
    amount = Column(Float, nullable=False)
    spent = Column(Float, nullable=False, default=0.0)
    period = Column(String(16), nullable=False, default="monthly")
    rollover = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class FamilyRecipientRecord(Base):
    __tablename__ = "family_recipient"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    relationship = Column(Text, nullable=False)
    country = Column(Text, nullable=False, default="Nepal")
    phone = Column(Text, nullable=True)
    email = Column(Text, nullable=True)
    preferred_method = Column(String(32), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class FamilyRemittanceRecord(Base):
    """Money sent home, with the rate and fee locked in at send time"""

    __tablename__ = "family_remittance"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    recipient_id = Column(Text, nullable=False)
    recipient_name = Column(Text, nullable=False)
    amount = Column(Float, nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    exchange_rate = Column(Float, nullable=False)
    local_amount = Column(Float, nullable=False)
    local_currency = Column(String(3), nullable=False, default="NPR")
    transfer_method = Column(String(32), nullable=False)
    transfer_fee = Column(Float, nullable=False)
    total_cost = Column(Float, nullable=False)
    purpose = Column(String(32), nullable=False)
    delivery_option = Column(String(32), nullable=False)
    status = Column(String(16), nullable=False, default="pending")
    transfer_reference = Column(Text, nullable=True)
    expected_delivery = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)
    date = Column(DateTime, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
