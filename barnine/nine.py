"""Nine-grid workspace position.

A 3x3 toroidal grid of workspaces. Relative moves wrap around on both axes;
absolute jumps come from the window manager's workspace numbers.
"""

from enum import Enum
from typing import Dict

from .errors import InvalidGridCommandError, InvalidGridIdError


class Direction(str, Enum):
    """Relative grid movement."""
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


class Position(Enum):
    """One of the nine grid cells, valued as (column, row)."""
    TOP_LEFT = (0, 0)
    MIDDLE_LEFT = (0, 1)
    BOTTOM_LEFT = (0, 2)
    TOP_MIDDLE = (1, 0)
    MIDDLE_MIDDLE = (1, 1)
    BOTTOM_MIDDLE = (1, 2)
    TOP_RIGHT = (2, 0)
    MIDDLE_RIGHT = (2, 1)
    BOTTOM_RIGHT = (2, 2)

    @classmethod
    def default(cls) -> "Position":
        return cls.TOP_LEFT

    @classmethod
    def at(cls, column: int, row: int) -> "Position":
        return cls((column % 3, row % 3))

    @classmethod
    def from_workspace(cls, workspace: int) -> "Position":
        """Map a sway workspace number to its cell.

        Raises:
            InvalidGridIdError: If the number is not one of the nine mapped ids
        """
        try:
            return WORKSPACE_TO_POSITION[workspace]
        except (KeyError, TypeError):
            raise InvalidGridIdError(workspace) from None

    @property
    def column(self) -> int:
        return self.value[0]

    @property
    def row(self) -> int:
        return self.value[1]

    @property
    def workspace(self) -> int:
        """Sway workspace number of this cell."""
        return POSITION_TO_WORKSPACE[self]

    def move(self, direction: Direction) -> "Position":
        """Step one cell in ``direction``, wrapping at the grid edges.

        Raises:
            InvalidGridCommandError: If ``direction`` is not a Direction
        """
        try:
            direction = Direction(direction)
        except ValueError:
            raise InvalidGridCommandError(direction) from None
        if direction is Direction.LEFT:
            return Position.at(self.column - 1, self.row)
        if direction is Direction.RIGHT:
            return Position.at(self.column + 1, self.row)
        if direction is Direction.UP:
            return Position.at(self.column, self.row - 1)
        return Position.at(self.column, self.row + 1)

    def glyph(self) -> str:
        """Three-character marker: column picks the slot, row picks the letter."""
        slots = ["_", "_", "_"]
        slots[self.column] = "TMB"[self.row]
        return "".join(slots)

    def __str__(self) -> str:
        return self.glyph()


POSITION_TO_WORKSPACE: Dict[Position, int] = {
    Position.TOP_LEFT: 2,
    Position.MIDDLE_LEFT: 1,
    Position.BOTTOM_LEFT: 7,
    Position.TOP_MIDDLE: 3,
    Position.MIDDLE_MIDDLE: 5,
    Position.BOTTOM_MIDDLE: 8,
    Position.TOP_RIGHT: 4,
    Position.MIDDLE_RIGHT: 6,
    Position.BOTTOM_RIGHT: 0,
}

WORKSPACE_TO_POSITION: Dict[int, Position] = {
    num: pos for pos, num in POSITION_TO_WORKSPACE.items()
}
