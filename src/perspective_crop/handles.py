"""Mutable corner-handle state owned by an interactive front end."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from perspective_crop.geometry import Point2D, PointLike, Quadrilateral


def _default_handles() -> List[Point2D]:
    return [Point2D(20, 20), Point2D(100, 20), Point2D(100, 100), Point2D(20, 100)]


@dataclass
class CornerHandles:
    """Four draggable corners plus a whole-polygon offset.

    Front ends mutate this object while the user drags; the crop engine only
    ever sees the immutable :class:`Quadrilateral` returned by :meth:`snapshot`.
    """

    handles: List[Point2D] = field(default_factory=_default_handles)
    offset: Point2D = field(default_factory=lambda: Point2D(0, 0))

    def __post_init__(self) -> None:
        self.handles = [Point2D.coerce(point) for point in self.handles]
        if len(self.handles) != 4:
            raise ValueError(f"Exactly four handles are required, got {len(self.handles)}")
        self.offset = Point2D.coerce(self.offset)

    def move_handle(self, index: int, position: PointLike) -> None:
        """Place one handle at ``position``, given relative to the polygon offset."""
        if not 0 <= index < 4:
            raise IndexError(f"Handle index must be in 0..3, got {index}")
        self.handles[index] = Point2D.coerce(position)

    def translate(self, dx: float, dy: float) -> None:
        """Drag the whole polygon."""
        self.offset = self.offset + Point2D(dx, dy)

    def reset(self, width: float, height: float, margin: float = 20.0) -> None:
        """Inset the handles ``margin`` pixels from the edges of a ``width`` x ``height`` image."""
        right = max(width - margin, margin)
        bottom = max(height - margin, margin)
        self.handles = [
            Point2D(margin, margin),
            Point2D(right, margin),
            Point2D(right, bottom),
            Point2D(margin, bottom),
        ]
        self.offset = Point2D(0, 0)

    def snapshot(self) -> Quadrilateral:
        """Current corners in source pixel space."""
        return Quadrilateral(tuple(handle + self.offset for handle in self.handles))  # type: ignore[arg-type]


__all__ = ["CornerHandles"]
