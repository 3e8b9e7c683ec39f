from sqlalchemy import Column, DateTime, Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    pass


class Entity(Base):
    __tablename__ = "entities"
    __table_args__ = (
        Index("ix_entities_type_status", "type", "status"),
    )

    id = Column(String(64), primary_key=True)
    type = Column(String(64), nullable=False, comment="medication, therapy, condition, resource, ...")
    slug = Column(String(255), nullable=False, unique=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)

    # Open-schema clinical/resource content (JSONB)
    content = Column(JSONB, nullable=True, comment="Fielded clinical or resource content")

    # ``metadata`` is reserved on declarative classes, hence the attribute name
    metadata_ = Column("metadata", JSONB, nullable=True, comment="Category, brand names, tags")

    status = Column(String(32), nullable=False, default="active")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<Entity type={self.type} slug={self.slug}>"
