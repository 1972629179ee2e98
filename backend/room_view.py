import json
import logging
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from models import Block, Room, Seat, SeatAllocation

logger = logging.getLogger(__name__)

CITY_ALIASES = ("bengaluru", "blr", "bangalore")
CITY_NAME_FRAGMENTS = ("bengaluru", "bangalore")


def normalize_city(value: Optional[str]) -> str:
    return str(value or "").strip().lower()


def is_supported_city(value: Optional[str]) -> bool:
    return normalize_city(value) in CITY_ALIASES


def room_slug(value: Optional[str]) -> str:
    return str(value or "").replace(" ", "-").strip().lower()


def find_city_blocks(db: Session, city: str) -> List[Block]:
    if not is_supported_city(city):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="city not found or not supported")
    normalized_city = func.lower(func.trim(Block.city))
    blocks = (
        db.query(Block)
        .filter(
            or_(
                normalized_city.in_(CITY_ALIASES),
                *[normalized_city.like(f"%{fragment}%") for fragment in CITY_NAME_FRAGMENTS],
            )
        )
        .order_by(Block.display_order.asc(), Block.name.asc())
        .all()
    )
    if not blocks:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="no blocks found for this city")
    return blocks


def list_city_rooms(db: Session, city: str) -> List[Room]:
    blocks = find_city_blocks(db, city)
    order = {block.id: idx for idx, block in enumerate(blocks)}
    rooms = db.query(Room).filter(Room.block_id.in_(list(order))).all()
    return sorted(rooms, key=lambda room: (order[room.block_id], room.display_order, room.name))


def find_room(db: Session, city: str, room_name: str) -> Room:
    wanted = str(room_name or "").strip()
    if not wanted:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="room name required")
    target_slug = room_slug(wanted)
    for room in list_city_rooms(db, city):
        # "robotics-lab" matches "Robotics Lab"; plain names like "1" match exactly.
        if room_slug(room.name) == target_slug or room.name.strip() == wanted:
            return room
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="room not found")


def decode_layout(room: Room) -> Optional[Dict[str, Any]]:
    raw = room.layout_json
    if raw is None:
        return None
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError:
            logger.warning(f"Room {room.id} has an unreadable layout_json; serving no layout")
            return None
    if not isinstance(raw, dict):
        logger.warning(f"Room {room.id} layout_json is not an object; serving no layout")
        return None
    return raw


def _group_seats(db: Session, allocation: SeatAllocation) -> List[Seat]:
    seat = allocation.seat
    if seat is None:
        return []
    seats: List[Seat] = []
    if seat.seat_group_id:
        seats = (
            db.query(Seat)
            .filter(Seat.room_id == allocation.room_id, Seat.seat_group_id == seat.seat_group_id)
            .order_by(Seat.row_number.asc(), Seat.column_number.asc())
            .all()
        )
    return seats or [seat]


def build_team_allocation(db: Session, allocation: SeatAllocation) -> Dict[str, Any]:
    seats = _group_seats(db, allocation)
    if len(seats) > 1:
        seat_label = "-".join(seat.seat_label for seat in seats)
    else:
        seat_label = allocation.seat.seat_label if allocation.seat else ""
    return {
        "team_id": allocation.team_id,
        "team_name": allocation.team.team_name if allocation.team else "",
        "seat_label": seat_label,
        "positions": [{"row": seat.row_number, "col": seat.column_number} for seat in seats],
    }


def build_room_allocations(db: Session, room: Room) -> List[Dict[str, Any]]:
    allocations = (
        db.query(SeatAllocation)
        .filter(SeatAllocation.room_id == room.id)
        .order_by(SeatAllocation.allocated_at.asc(), SeatAllocation.id.asc())
        .all()
    )
    return [build_team_allocation(db, allocation) for allocation in allocations]


def build_public_room_view(db: Session, city: str, room_name: str) -> Dict[str, Any]:
    room = find_room(db, city, room_name)
    return {
        "room_id": room.id,
        "room_name": room.name,
        "block_name": room.block.name if room.block else None,
        "layout": decode_layout(room),
        "allocations": build_room_allocations(db, room),
    }
