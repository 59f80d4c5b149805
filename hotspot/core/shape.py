from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable

from PySide6.QtCore import QPointF


class ShapeType(Enum):
    """The kinds of hotspot that can be drawn."""

    RECTANGLE = "rectangle"
    SQUARE = "square"
    CIRCLE = "circle"
    TRIANGLE = "triangle"


@dataclass(frozen=True)
class Shape:
    """A hotspot in image coordinates.

    ``index`` is the 1-based position of the shape in the list it was last
    committed with; it is renumbered whenever that list changes.
    """

    type: ShapeType
    start_x: float
    start_y: float
    end_x: float
    end_y: float
    index: int = 1

    @property
    def start(self) -> QPointF:
        return QPointF(self.start_x, self.start_y)

    @property
    def end(self) -> QPointF:
        return QPointF(self.end_x, self.end_y)

    @classmethod
    def from_points(cls, shape_type: ShapeType, start: QPointF, end: QPointF, index: int = 1):
        return cls(shape_type, start.x(), start.y(), end.x(), end.y(), index)

    def with_index(self, index: int) -> "Shape":
        if index == self.index:
            return self
        return replace(self, index=index)

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "startX": self.start_x,
            "startY": self.start_y,
            "endX": self.end_x,
            "endY": self.end_y,
            "index": self.index,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Shape":
        return cls(
            type=ShapeType(data["type"]),
            start_x=float(data["startX"]),
            start_y=float(data["startY"]),
            end_x=float(data["endX"]),
            end_y=float(data["endY"]),
            index=int(data.get("index", 1)),
        )


def renumber(shapes: Iterable[Shape]) -> tuple[Shape, ...]:
    """Return ``shapes`` with indices set to their 1-based positions."""

    return tuple(shape.with_index(position) for position, shape in enumerate(shapes, start=1))
