import enum
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from seating_layout import CellType, Coord, Grid
from seating_occupancy import Allocation, OccupancyMap, resolve_occupancy

EMPTY_LABEL = "—"

CELL_STYLES = {
    CellType.WALL: "cell-wall",
    CellType.PILLAR: "cell-pillar",
    CellType.SEAT: "cell-seat",
    CellType.SCREEN: "cell-screen",
    CellType.ENTRANCE: "cell-entrance",
    CellType.SPACE: "cell-space",
    CellType.EMPTY: "cell-empty",
}
GROUP_STYLE = "group-open"
ALLOCATION_STYLE = "allocation"

TEXT_GLYPHS = {
    CellType.WALL: "#",
    CellType.PILLAR: "O",
    CellType.SEAT: "s",
    CellType.SCREEN: "=",
    CellType.ENTRANCE: "E",
    CellType.SPACE: "_",
    CellType.EMPTY: ".",
}
GROUP_GLYPH = "+"
ALLOCATION_GLYPH = "@"
UNCLAIMED_GLYPH = "?"


class RegionKind(str, enum.Enum):
    CELL = "cell"
    GROUP = "group"
    ALLOCATION = "allocation"


@dataclass(frozen=True)
class Rect:
    row_start: int
    row_end: int
    col_start: int
    col_end: int

    @property
    def grid_row(self) -> str:
        return f"{self.row_start} / {self.row_end + 1}"

    @property
    def grid_column(self) -> str:
        return f"{self.col_start} / {self.col_end + 1}"

    def covers(self, row: int, col: int) -> bool:
        return self.row_start <= row <= self.row_end and self.col_start <= col <= self.col_end


def bounding_box(positions: Iterable[Coord]) -> Rect:
    coords = list(positions)
    if not coords:
        raise ValueError("Cannot compute a bounding box of no positions")
    rows = [coord.row for coord in coords]
    cols = [coord.col for coord in coords]
    return Rect(min(rows), max(rows), min(cols), max(cols))


@dataclass(frozen=True)
class Region:
    kind: RegionKind
    rect: Rect
    style: str
    label: Optional[str] = None
    team_id: Optional[str] = None
    group_index: Optional[int] = None
    cell_type: Optional[CellType] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "label": self.label,
            "row_start": self.rect.row_start,
            "row_end": self.rect.row_end,
            "col_start": self.rect.col_start,
            "col_end": self.rect.col_end,
            "grid_row": self.rect.grid_row,
            "grid_column": self.rect.grid_column,
            "style": self.style,
            "team_id": self.team_id,
            "group_index": self.group_index,
            "cell_type": self.cell_type.value if self.cell_type else None,
        }


def allocation_label(allocation: Allocation) -> str:
    return allocation.team_name or allocation.seat_label or EMPTY_LABEL


def seat_count_label(count: int) -> str:
    return f"{count} SEAT{'S' if count > 1 else ''}"


def render_regions(occupancy: OccupancyMap) -> List[Region]:
    """Drawable regions in paint order: raw cells, open groups, then allocations."""
    regions: List[Region] = []
    for coord, cell_type in occupancy.raw_cells():
        regions.append(
            Region(
                kind=RegionKind.CELL,
                rect=Rect(coord.row, coord.row, coord.col, coord.col),
                style=CELL_STYLES[cell_type],
                cell_type=cell_type,
            )
        )

    for group in occupancy.open_groups:
        regions.append(
            Region(
                kind=RegionKind.GROUP,
                rect=bounding_box(group.positions),
                style=GROUP_STYLE,
                label=seat_count_label(group.size),
                group_index=group.index,
            )
        )

    for placed in occupancy.placed_allocations:
        regions.append(
            Region(
                kind=RegionKind.ALLOCATION,
                rect=bounding_box(placed.positions),
                style=ALLOCATION_STYLE,
                label=allocation_label(placed.allocation),
                team_id=placed.allocation.team_id,
            )
        )
    return regions


def render_room(grid: Grid, allocations: Iterable[Allocation]) -> List[Region]:
    return render_regions(resolve_occupancy(grid, allocations))


def render_text(occupancy: OccupancyMap) -> str:
    grid = occupancy.grid
    canvas = [[UNCLAIMED_GLYPH] * grid.cols for _ in range(grid.rows)]
    for region in render_regions(occupancy):
        if region.kind is RegionKind.CELL:
            glyph = TEXT_GLYPHS[region.cell_type]
        elif region.kind is RegionKind.GROUP:
            glyph = GROUP_GLYPH
        else:
            glyph = ALLOCATION_GLYPH
        rect = region.rect
        for row in range(rect.row_start, rect.row_end + 1):
            for col in range(rect.col_start, rect.col_end + 1):
                canvas[row - 1][col - 1] = glyph
    return "\n".join("".join(line) for line in canvas)
