from __future__ import annotations

from sqlalchemy import JSON, BigInteger, Boolean, Column, DateTime, Integer, String, Text

from .db import Base


class OverlayModel(Base):
    __tablename__ = "overlays"

    task_id = Column(String(64), primary_key=True)
    pinned = Column(Boolean, nullable=False, default=False)
    snoozed_until = Column(DateTime(timezone=True), nullable=True)
    sort_order = Column(Integer, nullable=True)


class CachedTaskModel(Base):
    __tablename__ = "cached_tasks"

    id = Column(String(64), primary_key=True)
    position = Column(Integer, nullable=False, default=0, index=True)
    name = Column(Text, nullable=False, default="")
    status = Column(String(100), nullable=False, default="")
    list_name = Column(String(200), nullable=False, default="")
    due_date = Column(DateTime(timezone=True), nullable=True)
    priority = Column(Integer, nullable=True)
    url = Column(Text, nullable=False, default="")
    tags = Column(JSON, nullable=False, default=list)
    description = Column(Text, nullable=True)
    custom_item_id = Column(BigInteger, nullable=True)
    custom_id = Column(String(100), nullable=True)
    parent_id = Column(String(64), nullable=True, index=True)
    assignee_ids = Column(JSON, nullable=False, default=list)


class AppStateModel(Base):
    __tablename__ = "app_state"

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=True)
