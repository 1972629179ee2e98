import enum
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, NamedTuple, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_ROWS = 10
DEFAULT_COLS = 12
COORD_KEY_RE = re.compile(r"^\s*(\d+)\s*,\s*(\d+)\s*$")


class CellType(str, enum.Enum):
    WALL = "wall"
    PILLAR = "pillar"
    SEAT = "seat"
    SCREEN = "screen"
    ENTRANCE = "entrance"
    SPACE = "space"
    EMPTY = "empty"

    @classmethod
    def parse(cls, raw: Any) -> "CellType":
        value = str(raw or "").strip().lower()
        if not value:
            return cls.EMPTY
        try:
            return cls(value)
        except ValueError:
            logger.warning(f"Unknown cell type {raw!r}; treating as empty")
            return cls.EMPTY


class Coord(NamedTuple):
    row: int
    col: int


def parse_coord_key(raw: Any) -> Optional[Coord]:
    """Parse a ``"row,col"`` key. Returns None when the key is malformed."""
    match = COORD_KEY_RE.match(str(raw or ""))
    if not match:
        return None
    return Coord(int(match.group(1)), int(match.group(2)))


def coord_from_position(value: Any) -> Optional[Coord]:
    """Accept either a ``{"row": r, "col": c}`` mapping or a ``"r,c"`` key."""
    if isinstance(value, Mapping):
        try:
            return Coord(int(value["row"]), int(value["col"]))
        except (KeyError, TypeError, ValueError):
            return None
    if isinstance(value, str):
        return parse_coord_key(value)
    return None


@dataclass(frozen=True)
class SeatGroup:
    index: int
    positions: Tuple[Coord, ...]
    group_id: Optional[str] = None
    team_size: Optional[int] = None

    @property
    def size(self) -> int:
        return len(self.positions)


@dataclass(frozen=True)
class Grid:
    rows: int
    cols: int
    cells: Dict[int, CellType] = field(default_factory=dict, repr=False)
    groups: Tuple[SeatGroup, ...] = ()
    group_index: Dict[int, int] = field(default_factory=dict, repr=False, compare=False)

    @property
    def size(self) -> int:
        return self.rows * self.cols

    def in_bounds(self, row: int, col: int) -> bool:
        return 1 <= row <= self.rows and 1 <= col <= self.cols

    def key(self, row: int, col: int) -> int:
        if not self.in_bounds(row, col):
            raise ValueError(f"({row}, {col}) is outside the {self.rows}x{self.cols} grid")
        return (row - 1) * self.cols + (col - 1)

    def coord(self, key: int) -> Coord:
        return Coord(key // self.cols + 1, key % self.cols + 1)

    def coords(self) -> Iterator[Coord]:
        for row in range(1, self.rows + 1):
            for col in range(1, self.cols + 1):
                yield Coord(row, col)

    def cell_type_at(self, row: int, col: int) -> CellType:
        return self.cells.get(self.key(row, col), CellType.EMPTY)

    def group_containing(self, row: int, col: int) -> Optional[SeatGroup]:
        if not self.in_bounds(row, col):
            return None
        group_idx = self.group_index.get(self.key(row, col))
        if group_idx is None:
            return None
        return self.groups[group_idx]


def default_grid() -> Grid:
    return Grid(rows=DEFAULT_ROWS, cols=DEFAULT_COLS)


def _positive_dimension(payload: Mapping, name: str, default: int) -> int:
    raw = payload.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValueError(f"Layout {name} must be a positive integer")
    if value <= 0:
        raise ValueError(f"Layout {name} must be a positive integer")
    return value


def _parse_team_size(raw: Any) -> Optional[int]:
    try:
        return int(raw) if raw is not None else None
    except (TypeError, ValueError):
        return None


def parse_layout(payload: Optional[Mapping[str, Any]]) -> Grid:
    """Build a :class:`Grid` from a stored ``{rows, cols, cells, groups}`` layout.

    A missing layout yields the 10x12 fallback grid. Malformed or out-of-bounds
    coordinate keys are skipped with a warning. Non-positive dimensions and
    wrongly shaped ``cells``, ``groups`` or group ``positions`` raise
    ``ValueError``.
    """
    if not payload:
        return default_grid()
    if not isinstance(payload, Mapping):
        raise ValueError("Layout must be an object")

    rows = _positive_dimension(payload, "rows", DEFAULT_ROWS)
    cols = _positive_dimension(payload, "cols", DEFAULT_COLS)
    grid = Grid(rows=rows, cols=cols)

    raw_cells = payload.get("cells") or {}
    if not isinstance(raw_cells, Mapping):
        raise ValueError("Layout cells must be an object")
    cells: Dict[int, CellType] = {}
    for raw_key, raw_type in raw_cells.items():
        coord = parse_coord_key(raw_key)
        if coord is None or not grid.in_bounds(*coord):
            logger.warning(f"Skipping layout cell {raw_key!r} outside {rows}x{cols} grid")
            continue
        cells[grid.key(*coord)] = CellType.parse(raw_type)

    raw_groups = payload.get("groups") or []
    if not isinstance(raw_groups, (list, tuple)):
        raise ValueError("Layout groups must be a list")
    groups: List[SeatGroup] = []
    group_index: Dict[int, int] = {}
    for raw_group in raw_groups:
        if not isinstance(raw_group, Mapping):
            continue
        raw_positions = raw_group.get("positions") or []
        if not isinstance(raw_positions, (list, tuple)):
            raise ValueError("Group positions must be a list")
        idx = len(groups)
        positions: List[Coord] = []
        for raw_pos in raw_positions:
            coord = coord_from_position(raw_pos)
            if coord is None or not grid.in_bounds(*coord):
                logger.warning(f"Skipping group position {raw_pos!r} outside {rows}x{cols} grid")
                continue
            if coord in positions:
                continue
            positions.append(coord)
            # A coordinate claimed by two groups keeps the later one.
            group_index[grid.key(*coord)] = idx
        group_id = raw_group.get("id")
        groups.append(
            SeatGroup(
                index=idx,
                positions=tuple(positions),
                group_id=str(group_id) if group_id else None,
                team_size=_parse_team_size(raw_group.get("team_size")),
            )
        )

    return Grid(rows=rows, cols=cols, cells=cells, groups=tuple(groups), group_index=group_index)


def parse_layout_or_default(payload: Optional[Mapping[str, Any]]) -> Grid:
    try:
        return parse_layout(payload)
    except ValueError as exc:
        logger.warning(f"Invalid room layout, using default grid: {exc}")
        return default_grid()
