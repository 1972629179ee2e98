from seating_layout import CellType, Coord, parse_layout
from seating_occupancy import (
    AllocatedOwner,
    Allocation,
    GroupOwner,
    RawOwner,
    resolve_occupancy,
)


def _bench_grid():
    return parse_layout({"rows": 2, "cols": 2, "cells": {}, "groups": [{"positions": ["1,1", "1,2"]}]})


def _hall_grid():
    return parse_layout({
        "rows": 4,
        "cols": 5,
        "cells": {
            "1,1": "wall", "1,2": "wall", "1,3": "screen", "1,4": "wall", "1,5": "wall",
            "2,1": "seat", "2,2": "seat", "2,4": "seat", "2,5": "seat",
            "3,1": "seat", "3,2": "seat", "3,3": "pillar", "3,4": "seat",
            "4,3": "entrance",
        },
        "groups": [
            {"positions": ["2,1", "2,2", "3,1", "3,2"]},
            {"positions": ["2,4", "2,5"]},
        ],
    })


def test_unallocated_group_owns_its_seats():
    occupancy = resolve_occupancy(_bench_grid(), [])
    assert occupancy.owner_at(1, 1) == GroupOwner(0)
    assert occupancy.owner_at(1, 2) == GroupOwner(0)
    assert occupancy.owner_at(2, 1) == RawOwner(CellType.EMPTY)
    assert [group.index for group in occupancy.open_groups] == [0]
    assert occupancy.placed_allocations == ()


def test_allocation_takes_precedence_over_group():
    alpha = Allocation(team_id="T1", team_name="Alpha", positions=(Coord(1, 1), Coord(1, 2)))
    occupancy = resolve_occupancy(_bench_grid(), [alpha])
    assert occupancy.owner_at(1, 1) == AllocatedOwner(0, "T1")
    assert occupancy.owner_at(1, 2) == AllocatedOwner(0, "T1")
    assert occupancy.open_groups == ()
    assert occupancy.raw_cells() == [(Coord(2, 1), CellType.EMPTY), (Coord(2, 2), CellType.EMPTY)]


def test_partial_group_allocation_leaves_rest_unclaimed():
    alpha = Allocation(team_id="T1", team_name="Alpha", positions=(Coord(1, 1),))
    occupancy = resolve_occupancy(_bench_grid(), [alpha])
    assert occupancy.open_groups == ()
    assert occupancy.owner_at(1, 1) == AllocatedOwner(0, "T1")
    assert occupancy.owner_at(1, 2) is None
    assert occupancy.unclaimed() == [Coord(1, 2)]


def test_grouped_seats_are_never_raw_cells():
    occupancy = resolve_occupancy(_hall_grid(), [])
    raw = dict(occupancy.raw_cells())
    for coord in [Coord(2, 1), Coord(2, 2), Coord(3, 1), Coord(3, 2), Coord(2, 4), Coord(2, 5)]:
        assert coord not in raw
    assert raw[Coord(3, 4)] is CellType.SEAT
    assert raw[Coord(3, 3)] is CellType.PILLAR
    assert raw[Coord(4, 3)] is CellType.ENTRANCE


def test_every_coordinate_has_exactly_one_owner_without_partial_groups():
    allocations = [Allocation(team_id="T2", team_name="Beta", positions=(Coord(2, 4), Coord(2, 5)))]
    occupancy = resolve_occupancy(_hall_grid(), allocations)
    assert len(occupancy.owners) == 20
    assert all(owner is not None for owner in occupancy.owners)
    assert occupancy.unclaimed() == []
    assert [group.index for group in occupancy.open_groups] == [0]


def test_empty_allocations_and_groups_are_skipped():
    grid = parse_layout({"rows": 2, "cols": 2, "groups": [{"positions": []}, {"positions": ["2,2"]}]})
    occupancy = resolve_occupancy(grid, [Allocation(team_id="T9", team_name="Ghost")])
    assert occupancy.placed_allocations == ()
    assert [group.index for group in occupancy.open_groups] == [1]


def test_out_of_bounds_allocation_positions_are_dropped():
    grid = parse_layout({"rows": 2, "cols": 2})
    allocation = Allocation(team_id="T3", positions=(Coord(2, 2), Coord(5, 5)))
    occupancy = resolve_occupancy(grid, [allocation])
    (placed,) = occupancy.placed_allocations
    assert placed.positions == (Coord(2, 2),)
    assert occupancy.owner_at(2, 2) == AllocatedOwner(0, "T3")


def test_fallback_grid_with_allocation():
    allocation = Allocation(team_id="T4", team_name="Delta", positions=(Coord(5, 5), Coord(5, 6)))
    occupancy = resolve_occupancy(parse_layout(None), [allocation])
    raw = occupancy.raw_cells()
    assert len(raw) == 10 * 12 - 2
    assert all(cell_type is CellType.EMPTY for _, cell_type in raw)
    assert occupancy.open_groups == ()
    assert len(occupancy.placed_allocations) == 1


def test_resolution_is_idempotent():
    grid = _hall_grid()
    allocations = [Allocation(team_id="T2", team_name="Beta", positions=(Coord(2, 4),))]
    assert resolve_occupancy(grid, allocations) == resolve_occupancy(grid, allocations)


def test_overlapping_allocations_keep_later_allocation():
    first = Allocation(team_id="T1", team_name="Alpha", positions=(Coord(1, 1), Coord(1, 2)))
    second = Allocation(team_id="T2", team_name="Beta", positions=(Coord(1, 2),))
    occupancy = resolve_occupancy(parse_layout({"rows": 1, "cols": 2}), [first, second])
    assert occupancy.owner_at(1, 1) == AllocatedOwner(0, "T1")
    assert occupancy.owner_at(1, 2) == AllocatedOwner(1, "T2")
    assert len(occupancy.placed_allocations) == 2


def test_allocation_from_payload_normalizes_positions():
    allocation = Allocation.from_payload({
        "team_id": 42,
        "team_name": None,
        "seat_label": "B1-B2",
        "positions": [{"row": 2, "col": 1}, {"row": "2", "col": "2"}, {"row": None}],
    })
    assert allocation.team_id == "42"
    assert allocation.team_name == ""
    assert allocation.seat_label == "B1-B2"
    assert allocation.positions == (Coord(2, 1), Coord(2, 2))


def test_allocation_from_payload_ignores_non_list_positions():
    assert Allocation.from_payload({"team_id": "T1", "positions": 5}).positions == ()
    assert Allocation.from_payload({"team_id": "T1", "positions": "1,1"}).positions == ()
