import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, Optional

from PySide6.QtCore import QLineF, QPoint, QPointF, QRect, QRectF, QSize, Qt
from PySide6.QtGui import QBrush, QColor, QFont, QImage, QPainter, QPainterPath, QPen

from hotspot.core.errors import DegenerateGeometry
from hotspot.core.geometry import Placement, compute_placement, image_to_screen
from hotspot.core.shape import Shape, ShapeType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HotspotStyle:
    """Colors and metrics used to draw hotspots, all in canvas pixels."""

    stroke_color: QColor = field(default_factory=lambda: QColor("red"))
    stroke_width: int = 2
    fill_color: QColor = field(default_factory=lambda: QColor("yellow"))
    line_color: QColor = field(default_factory=lambda: QColor("red"))
    line_width: int = 2
    line_spacing: int = 10
    handle_radius: float = 7.0
    handle_fill: QColor = field(default_factory=lambda: QColor("white"))
    handle_outline: QColor = field(default_factory=lambda: QColor("black"))
    label_color: QColor = field(default_factory=lambda: QColor("black"))
    font_family: str = "Arial"
    font_pixel_size: int = 10


class ShapeRenderer:
    """Draws a single hotspot onto a painter.

    Every call leaves the painter's pen, brush, opacity and clip exactly as
    it found them.
    """

    def __init__(self, style: Optional[HotspotStyle] = None):
        self.style = style or HotspotStyle()

    def render(self, painter: QPainter, shape: Shape, placement: Placement, opacity: float):
        start = image_to_screen(shape.start, placement)
        end = image_to_screen(shape.end, placement)
        x, y = start.x(), start.y()
        width = end.x() - x
        height = end.y() - y

        painter.save()
        try:
            painter.setPen(QPen(self.style.stroke_color, self.style.stroke_width))
            painter.setBrush(Qt.NoBrush)

            if shape.type is ShapeType.RECTANGLE:
                self._draw_rect(painter, QRectF(x, y, width, height), opacity)
            elif shape.type is ShapeType.SQUARE:
                side = min(abs(width), abs(height))
                rect = QRectF(x, y, side * _sign(width), side * _sign(height))
                self._draw_rect(painter, rect, opacity)
            elif shape.type is ShapeType.CIRCLE:
                radius = min(abs(width), abs(height)) / 2
                center = QPointF(x + width / 2, y + height / 2)
                self._draw_circle(painter, center, radius, opacity)
            elif shape.type is ShapeType.TRIANGLE:
                self._draw_triangle(painter, QRectF(x, y, width, height), opacity)
            else:
                raise ValueError(f"Unknown shape type: {shape.type!r}")
        finally:
            painter.restore()

        self.draw_handle(painter, start, shape.index)

    def draw_handle(self, painter: QPainter, center: QPointF, index: int):
        """Draw the numbered marker at a shape's start point."""
        radius = self.style.handle_radius
        painter.save()
        try:
            painter.setPen(QPen(self.style.handle_outline, 1))
            painter.setBrush(self.style.handle_fill)
            painter.drawEllipse(center, radius, radius)

            font = QFont(self.style.font_family)
            font.setPixelSize(self.style.font_pixel_size)
            painter.setFont(font)
            painter.setPen(self.style.label_color)
            label_rect = QRectF(center.x() - radius, center.y() - radius, radius * 2, radius * 2)
            painter.drawText(label_rect, Qt.AlignCenter, str(index))
        finally:
            painter.restore()

    # Shape bodies --------------------------------------------------------
    def _draw_rect(self, painter: QPainter, rect: QRectF, opacity: float):
        rect = rect.normalized()
        painter.drawRect(rect)
        self._draw_pattern(painter, rect, opacity)

    def _draw_circle(self, painter: QPainter, center: QPointF, radius: float, opacity: float):
        painter.drawEllipse(center, radius, radius)
        if radius <= 0:
            return

        path = QPainterPath()
        path.addEllipse(center, radius, radius)

        painter.save()
        painter.setClipPath(path, Qt.IntersectClip)
        self._fill(painter, path, opacity)

        painter.setPen(QPen(self.style.line_color, self.style.line_width))
        for y in self._scanlines(center.y() - radius, center.y() + radius):
            remainder = radius * radius - (y - center.y()) ** 2
            if remainder < 0:
                continue
            dx = math.sqrt(remainder)
            painter.drawLine(QLineF(center.x() - dx, y, center.x() + dx, y))
        painter.restore()

    def _draw_triangle(self, painter: QPainter, bounds: QRectF, opacity: float):
        path = triangle_path(bounds)
        painter.drawPath(path)

        painter.save()
        painter.setClipPath(path, Qt.IntersectClip)
        self._draw_pattern(painter, bounds, opacity)
        painter.restore()

    # Fill pattern --------------------------------------------------------
    def _draw_pattern(self, painter: QPainter, rect: QRectF, opacity: float):
        rect = rect.normalized()
        path = QPainterPath()
        path.addRect(rect)
        self._fill(painter, path, opacity)

        painter.save()
        painter.setPen(QPen(self.style.line_color, self.style.line_width))
        for y in self._scanlines(rect.top(), rect.bottom()):
            painter.drawLine(QLineF(rect.left(), y, rect.right(), y))
        painter.restore()

    def _fill(self, painter: QPainter, path: QPainterPath, opacity: float):
        painter.save()
        painter.setOpacity(max(0.0, min(1.0, opacity)))
        painter.fillPath(path, QBrush(self.style.fill_color))
        painter.restore()

    def _scanlines(self, top: float, bottom: float) -> Iterable[float]:
        spacing = max(1, self.style.line_spacing)
        y = top
        while y <= bottom:
            yield y
            y += spacing


class CanvasRenderer:
    """Composites the image and its hotspots onto the canvas surface."""

    def __init__(self, shape_renderer: Optional[ShapeRenderer] = None):
        self.shape_renderer = shape_renderer or ShapeRenderer()

    def paint(
        self,
        painter: QPainter,
        canvas_size: QSize,
        image: Optional[QImage],
        shapes: Iterable[Shape],
        opacity: float,
        provisional: Optional[Shape] = None,
    ) -> Optional[Placement]:
        """Repaint everything. Returns the placement used, or ``None`` when
        nothing beyond clearing the surface could be drawn."""

        painter.save()
        try:
            painter.setCompositionMode(QPainter.CompositionMode_Source)
            painter.fillRect(QRect(QPoint(0, 0), canvas_size), Qt.transparent)
            painter.setCompositionMode(QPainter.CompositionMode_SourceOver)

            if image is None or image.isNull():
                return None

            try:
                placement = compute_placement(
                    image.width(), image.height(), canvas_size.width(), canvas_size.height()
                )
            except DegenerateGeometry as e:
                logger.debug("Skipping frame: %s", e)
                return None

            painter.setRenderHint(QPainter.SmoothPixmapTransform, True)
            painter.drawImage(placement.target_rect(), image)

            for shape in shapes:
                self.shape_renderer.render(painter, shape, placement, opacity)
            if provisional is not None:
                self.shape_renderer.render(painter, provisional, placement, opacity)
            return placement
        finally:
            painter.restore()


def triangle_path(bounds: QRectF) -> QPainterPath:
    """Isosceles triangle with its apex at the top-center of ``bounds``.

    ``bounds`` may carry negative extents; "top" is the start edge.
    """
    x, y = bounds.x(), bounds.y()
    width, height = bounds.width(), bounds.height()
    path = QPainterPath()
    path.moveTo(x, y + height)
    path.lineTo(x + width / 2, y)
    path.lineTo(x + width, y + height)
    path.closeSubpath()
    return path


def _sign(value: float) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0
