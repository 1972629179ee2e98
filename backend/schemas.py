from pydantic import BaseModel
from typing import Optional, List, Dict, Any

from seating_layout import CellType
from seating_render import RegionKind


# Room view Schemas
class SeatPosition(BaseModel):
    row: int
    col: int


class TeamAllocationResponse(BaseModel):
    team_id: str
    team_name: str = ""
    seat_label: str = ""
    positions: List[SeatPosition] = []


class PublicRoomViewResponse(BaseModel):
    room_id: str
    room_name: str
    block_name: Optional[str] = None
    layout: Optional[Dict[str, Any]] = None
    allocations: List[TeamAllocationResponse] = []


# Rendered layout Schemas
class RenderedRegionResponse(BaseModel):
    kind: RegionKind
    label: Optional[str] = None
    row_start: int
    row_end: int
    col_start: int
    col_end: int
    grid_row: str
    grid_column: str
    style: str
    team_id: Optional[str] = None
    group_index: Optional[int] = None
    cell_type: Optional[CellType] = None


class RoomRenderResponse(BaseModel):
    room_name: str
    block_name: Optional[str] = None
    rows: int
    cols: int
    regions: List[RenderedRegionResponse] = []
    unclaimed: List[SeatPosition] = []


class RoomSummaryResponse(BaseModel):
    id: str
    block_id: str
    block_name: Optional[str] = None
    name: str
    slug: str
    capacity: int
    current_occupancy: Optional[int] = 0
    display_order: int
    is_active: bool
