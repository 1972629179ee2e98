import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from room_view import build_public_room_view, list_city_rooms, room_slug
from schemas import PublicRoomViewResponse, RoomRenderResponse, RoomSummaryResponse
from seating_layout import parse_layout_or_default
from seating_occupancy import Allocation, resolve_occupancy
from seating_render import render_regions

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/public/viewroom/{city}", response_model=List[RoomSummaryResponse])
def get_public_city_rooms(city: str, db: Session = Depends(get_db)):
    rooms = list_city_rooms(db, city)
    return [
        RoomSummaryResponse(
            id=room.id,
            block_id=room.block_id,
            block_name=room.block.name if room.block else None,
            name=room.name,
            slug=room_slug(room.name),
            capacity=room.capacity or 0,
            current_occupancy=room.current_occupancy,
            display_order=room.display_order or 0,
            is_active=bool(room.is_active),
        )
        for room in rooms
    ]


@router.get("/public/viewroom/{city}/{room_name}", response_model=PublicRoomViewResponse)
def get_public_room_view(city: str, room_name: str, db: Session = Depends(get_db)):
    return build_public_room_view(db, city, room_name)


@router.get("/public/viewroom/{city}/{room_name}/render", response_model=RoomRenderResponse)
def render_public_room_view(city: str, room_name: str, db: Session = Depends(get_db)):
    view = build_public_room_view(db, city, room_name)
    grid = parse_layout_or_default(view["layout"])
    allocations = [Allocation.from_payload(item) for item in view["allocations"]]
    occupancy = resolve_occupancy(grid, allocations)
    regions = render_regions(occupancy)
    logger.info(
        f"Rendered room {view['room_name']}: {len(regions)} regions, "
        f"{len(occupancy.placed_allocations)} allocations"
    )
    return RoomRenderResponse(
        room_name=view["room_name"],
        block_name=view["block_name"],
        rows=grid.rows,
        cols=grid.cols,
        regions=[region.to_dict() for region in regions],
        unclaimed=[{"row": coord.row, "col": coord.col} for coord in occupancy.unclaimed()],
    )
