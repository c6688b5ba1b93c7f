"""SQLAlchemy database models"""
import uuid

from sqlalchemy import JSON, Column, Date, DateTime, Float, String, Text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID

from asset_inventory.domain.entities.asset import DEFAULT_ASSIGNEE, DEFAULT_LOCATION, utcnow
from asset_inventory.infrastructure.config.settings import settings
from asset_inventory.infrastructure.database.base import Base


def get_id_column():
    """Get ID column based on database type"""
    if settings.DATABASE_TYPE == "postgresql":
        return Column(PG_UUID(as_uuid=False), primary_key=True, default=lambda: str(uuid.uuid4()))
    else:
        return Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))


class AssetModel(Base):
    """Asset database model. One flat table, no foreign keys."""
    __tablename__ = "assets"

    id = get_id_column()
    name = Column(String(255), nullable=False)
    category = Column(String(100), nullable=False, index=True)
    status = Column(String(50), nullable=False, index=True)
    location = Column(String(255), nullable=False, default=DEFAULT_LOCATION)
    assigned_to = Column(String(255), nullable=False, default=DEFAULT_ASSIGNEE)
    purchase_date = Column(Date, nullable=False)
    warranty_end_date = Column(Date, nullable=True)
    value = Column(Float, nullable=False, default=0.0)
    serial_number = Column(String(255), nullable=True)
    manufacturer = Column(String(255), nullable=True)
    model = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    history = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
