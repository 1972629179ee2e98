from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from database import Base
import uuid


def _uuid_str() -> str:
    return str(uuid.uuid4())


class Block(Base):
    __tablename__ = "blocks"

    id = Column(String(36), primary_key=True, default=_uuid_str)
    name = Column(String(100), nullable=False)
    city = Column(String(50), nullable=False, default="bengaluru")
    display_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    rooms = relationship("Room", back_populates="block")


class Room(Base):
    __tablename__ = "rooms"

    id = Column(String(36), primary_key=True, default=_uuid_str)
    block_id = Column(String(36), ForeignKey("blocks.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    capacity = Column(Integer, nullable=False, default=0)
    current_occupancy = Column(Integer, default=0)
    display_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, default=True)
    layout_json = Column(JSON, nullable=True)  # {"rows", "cols", "cells": {"r,c": type}, "groups": [...]}
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    block = relationship("Block", back_populates="rooms")
    seats = relationship("Seat", back_populates="room")


class Seat(Base):
    __tablename__ = "seats"

    id = Column(String(36), primary_key=True, default=_uuid_str)
    room_id = Column(String(36), ForeignKey("rooms.id"), nullable=False, index=True)
    row_number = Column(Integer, nullable=False)
    column_number = Column(Integer, nullable=False)
    seat_label = Column(String(20), nullable=False)
    team_size_preference = Column(Integer, nullable=True)
    seat_group_id = Column(String(36), nullable=True, index=True)  # shared by seats merged into one bench
    is_available = Column(Boolean, default=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    room = relationship("Room", back_populates="seats")


class Team(Base):
    __tablename__ = "teams"

    id = Column(String(36), primary_key=True, default=_uuid_str)
    team_name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class SeatAllocation(Base):
    __tablename__ = "seat_allocations"

    id = Column(String(36), primary_key=True, default=_uuid_str)
    team_id = Column(String(36), ForeignKey("teams.id"), nullable=False, unique=True)
    seat_id = Column(String(36), ForeignKey("seats.id"), nullable=False)
    block_id = Column(String(36), ForeignKey("blocks.id"), nullable=True)
    room_id = Column(String(36), ForeignKey("rooms.id"), nullable=True, index=True)
    team_size = Column(Integer, nullable=False)
    allocated_at = Column(DateTime(timezone=True), server_default=func.now())

    team = relationship("Team")
    seat = relationship("Seat")
