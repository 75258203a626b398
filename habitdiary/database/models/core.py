"""
Core Models
------------

Tables of the diary database.

Models:
    - SchemaInfo: Schema version tracking for migrations
    - HabitCategory: A tracked habit (abbreviation, order, visibility)
    - DayEntry: One recorded calendar day
    - EntryFlag: Whether one category occurred on one recorded day

Flags are stored one row per (day, category) rather than one column per
category, so adding categories never changes the table shape.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    false,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, utc_now


# ----- Schema Versioning -----
class SchemaInfo(Base):
    """
    Tracks applied schema versions.

    One row is written by each migration step, in the same transaction as
    the step itself. The stored version is the highest row; a diary
    without this table is at version 0.

    Attributes:
        version: Schema version number (primary key)
        applied_at: When this version was applied
        description: Human-readable description of the change
    """

    __tablename__ = "schema_info"

    version: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=False, doc="Schema version number"
    )
    applied_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        doc="Timestamp when migration was applied",
    )
    description: Mapped[Optional[str]] = mapped_column(
        Text, nullable=True, doc="Description of schema changes in this version"
    )

    def __repr__(self) -> str:
        return f"<SchemaInfo(version={self.version})>"


# ----- Categories -----
class HabitCategory(Base, TimestampMixin):
    """
    A tracked habit.

    Categories are never deleted so their history cannot be orphaned;
    they are hidden instead.

    Attributes:
        id: Primary key
        abbreviation: Short unique name, compared case-insensitively
        display_order: Left-to-right presentation position
        hidden: Excluded from new-entry prompts when True
    """

    __tablename__ = "categories"
    __table_args__ = (
        CheckConstraint("abbreviation != ''", name="ck_category_non_empty_abbreviation"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    abbreviation: Mapped[str] = mapped_column(
        String(collation="nocase"), unique=True, nullable=False
    )
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    hidden: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )

    flags: Mapped[List["EntryFlag"]] = relationship(
        "EntryFlag", back_populates="category"
    )

    def __repr__(self) -> str:
        return (
            f"<HabitCategory(id={self.id}, abbreviation={self.abbreviation}, "
            f"hidden={self.hidden})>"
        )


# ----- Entries -----
class DayEntry(Base, TimestampMixin):
    """
    A recorded calendar day.

    The presence of a row distinguishes "recorded, nothing happened" from
    "not recorded"; both read as all-false flags.

    Attributes:
        date: The day (primary key)
        flags: Per-category flags of the day
    """

    __tablename__ = "day_entries"

    date: Mapped[date] = mapped_column(Date, primary_key=True)

    flags: Mapped[List["EntryFlag"]] = relationship(
        "EntryFlag",
        back_populates="entry",
        cascade="all, delete-orphan",
        order_by="EntryFlag.category_id",
    )

    def __repr__(self) -> str:
        return f"<DayEntry(date={self.date})>"


class EntryFlag(Base):
    """
    Whether one category occurred on one recorded day.

    Attributes:
        date: Day of the entry (foreign key to day_entries)
        category_id: Category (foreign key to categories)
        occurred: True if the habit occurred that day
    """

    __tablename__ = "entry_flags"

    date: Mapped[date] = mapped_column(
        Date, ForeignKey("day_entries.date", ondelete="CASCADE"), primary_key=True
    )
    category_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("categories.id", ondelete="RESTRICT"),
        primary_key=True,
        index=True,
    )
    occurred: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    entry: Mapped["DayEntry"] = relationship("DayEntry", back_populates="flags")
    category: Mapped["HabitCategory"] = relationship(
        "HabitCategory", back_populates="flags"
    )

    def __repr__(self) -> str:
        return (
            f"<EntryFlag(date={self.date}, category_id={self.category_id}, "
            f"occurred={self.occurred})>"
        )
