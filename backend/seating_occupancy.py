"""
Ownership resolution for a room view.

Every coordinate of the grid gets at most one owner, by precedence:
an allocation, then a seat group with no allocated member, then the raw cell.
Coordinates of a group that is only partly allocated are left unclaimed.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional, Sequence, Set, Tuple, Union

from seating_layout import CellType, Coord, Grid, SeatGroup, coord_from_position

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Allocation:
    team_id: str
    team_name: str = ""
    seat_label: str = ""
    positions: Tuple[Coord, ...] = ()

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Allocation":
        raw_positions = payload.get("positions") or []
        if not isinstance(raw_positions, (list, tuple)):
            logger.warning(f"Ignoring allocation positions of type {type(raw_positions).__name__}")
            raw_positions = []
        positions: List[Coord] = []
        for raw in raw_positions:
            coord = coord_from_position(raw)
            if coord is None:
                logger.warning(f"Skipping malformed allocation position {raw!r}")
                continue
            positions.append(coord)
        return cls(
            team_id=str(payload.get("team_id") or ""),
            team_name=str(payload.get("team_name") or ""),
            seat_label=str(payload.get("seat_label") or ""),
            positions=tuple(positions),
        )


class AllocatedOwner(NamedTuple):
    allocation_index: int
    team_id: str


class GroupOwner(NamedTuple):
    group_index: int


class RawOwner(NamedTuple):
    cell_type: CellType


Owner = Union[AllocatedOwner, GroupOwner, RawOwner]


class PlacedAllocation(NamedTuple):
    index: int
    allocation: Allocation
    positions: Tuple[Coord, ...]


@dataclass(frozen=True)
class OccupancyMap:
    grid: Grid
    owners: Tuple[Optional[Owner], ...]
    open_groups: Tuple[SeatGroup, ...]
    placed_allocations: Tuple[PlacedAllocation, ...]

    def owner_at(self, row: int, col: int) -> Optional[Owner]:
        return self.owners[self.grid.key(row, col)]

    def raw_cells(self) -> List[Tuple[Coord, CellType]]:
        cells = []
        for key, owner in enumerate(self.owners):
            if isinstance(owner, RawOwner):
                cells.append((self.grid.coord(key), owner.cell_type))
        return cells

    def unclaimed(self) -> List[Coord]:
        return [self.grid.coord(key) for key, owner in enumerate(self.owners) if owner is None]


def _index_allocations(
    grid: Grid, allocations: Sequence[Allocation]
) -> Tuple[Dict[int, int], List[PlacedAllocation]]:
    allocated: Dict[int, int] = {}
    placed: List[PlacedAllocation] = []
    for idx, allocation in enumerate(allocations):
        in_bounds: List[Coord] = []
        for coord in allocation.positions:
            if not grid.in_bounds(*coord):
                logger.warning(
                    f"Allocation for team {allocation.team_id} has position {tuple(coord)} "
                    f"outside the {grid.rows}x{grid.cols} grid"
                )
                continue
            # Overlapping allocations are not expected; the later one wins the index.
            allocated[grid.key(*coord)] = idx
            in_bounds.append(coord)
        if not in_bounds:
            continue
        placed.append(PlacedAllocation(idx, allocation, tuple(in_bounds)))
    return allocated, placed


def _is_group_allocated(grid: Grid, group: SeatGroup, allocated: Mapping[int, int]) -> bool:
    return any(grid.key(*coord) in allocated for coord in group.positions)


def resolve_occupancy(grid: Grid, allocations: Iterable[Allocation]) -> OccupancyMap:
    allocation_list = list(allocations)
    allocated, placed = _index_allocations(grid, allocation_list)

    suppressed: Set[int] = set()
    open_groups: List[SeatGroup] = []
    for group in grid.groups:
        if _is_group_allocated(grid, group, allocated):
            suppressed.add(group.index)
        elif group.positions:
            open_groups.append(group)

    owners: List[Optional[Owner]] = []
    for key in range(grid.size):
        allocation_idx = allocated.get(key)
        if allocation_idx is not None:
            owners.append(AllocatedOwner(allocation_idx, allocation_list[allocation_idx].team_id))
            continue
        group_idx = grid.group_index.get(key)
        if group_idx is not None:
            owners.append(None if group_idx in suppressed else GroupOwner(group_idx))
            continue
        owners.append(RawOwner(grid.cells.get(key, CellType.EMPTY)))

    unclaimed = sum(1 for owner in owners if owner is None)
    if unclaimed:
        logger.info(f"{unclaimed} seat(s) in partially allocated groups left unclaimed")

    return OccupancyMap(
        grid=grid,
        owners=tuple(owners),
        open_groups=tuple(open_groups),
        placed_allocations=tuple(placed),
    )
