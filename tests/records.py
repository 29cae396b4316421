"""Record types used across the cursor codec tests."""

import base64
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import NamedTuple

from pydantic import BaseModel
from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, func, select
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, column_property, mapped_column


@dataclass
class Row:
    ID: int
    Name: str


@dataclass
class Reading:
    id: int
    value: float


class Point(NamedTuple):
    x: int
    y: int


class Post(BaseModel):
    id: int
    title: str
    created_at: datetime
    score: float | None = None
    price: Decimal = Decimal("0")


class Status(str, Enum):
    OPEN = "open"
    DONE = "done"


class Base(DeclarativeBase):
    """Declarative base for test models."""

    pass


class Message(Base):
    """Minimal mapped model with a UUID key and audit timestamp."""

    __tablename__ = "messages"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    channel: Mapped[str] = mapped_column(String(64), nullable=False)
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    edited_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class Comment(Base):
    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    ticket_id: Mapped[int] = mapped_column(ForeignKey("tickets.id"), nullable=False)


class Ticket(Base):
    """Mapped model whose declared types differ from its column types."""

    __tablename__ = "tickets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    status: Mapped[Status] = mapped_column(String(16), nullable=False)
    labels: Mapped[dict[str, int] | None] = mapped_column(JSON, nullable=True)
    comment_count = column_property(
        select(func.count(Comment.id))
        .where(Comment.ticket_id == id)
        .correlate_except(Comment)
        .scalar_subquery()
    )


def b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")
