from dataclasses import dataclass

from PySide6.QtCore import QPointF, QRectF, QSize

from hotspot.core.errors import DegenerateGeometry


@dataclass(frozen=True)
class Placement:
    """Where the image sits on the canvas: ``canvas = image * scale + offset``."""

    offset_x: float
    offset_y: float
    scale: float
    draw_width: float
    draw_height: float

    def target_rect(self) -> QRectF:
        return QRectF(self.offset_x, self.offset_y, self.draw_width, self.draw_height)


def compute_placement(image_width, image_height, canvas_width, canvas_height) -> Placement:
    """Fit an image inside the canvas, preserving its aspect ratio.

    The image fills the canvas along one axis and is centered along the
    other (letterboxing). Non-positive dimensions raise
    :class:`DegenerateGeometry`.
    """

    if image_width <= 0 or image_height <= 0:
        raise DegenerateGeometry(f"invalid image size {image_width}x{image_height}")
    if canvas_width <= 0 or canvas_height <= 0:
        raise DegenerateGeometry(f"invalid canvas size {canvas_width}x{canvas_height}")

    offset_x = 0.0
    offset_y = 0.0
    # Compare aspect ratios by cross-multiplying to stay exact on integers.
    image_span = image_width * canvas_height
    canvas_span = canvas_width * image_height
    if image_span == canvas_span:
        draw_width = float(canvas_width)
        draw_height = float(canvas_height)
    elif image_span > canvas_span:
        draw_width = float(canvas_width)
        draw_height = canvas_width * image_height / image_width
        offset_y = max(0.0, (canvas_height - draw_height) / 2)
    else:
        draw_height = float(canvas_height)
        draw_width = canvas_height * image_width / image_height
        offset_x = max(0.0, (canvas_width - draw_width) / 2)

    return Placement(
        offset_x=offset_x,
        offset_y=offset_y,
        scale=draw_width / image_width,
        draw_width=draw_width,
        draw_height=draw_height,
    )


def client_to_canvas(client_pos: QPointF, canvas_size: QSize, display_rect: QRectF) -> QPointF:
    """Map a pointer position in display coordinates to canvas pixels.

    The canvas keeps a fixed pixel size while its on-screen rect may be
    larger or smaller, so each axis is rescaled by ``pixels / display``.
    """

    if display_rect.width() <= 0 or display_rect.height() <= 0:
        raise DegenerateGeometry("display rect has no area")
    scale_x = canvas_size.width() / display_rect.width()
    scale_y = canvas_size.height() / display_rect.height()
    return QPointF(
        (client_pos.x() - display_rect.left()) * scale_x,
        (client_pos.y() - display_rect.top()) * scale_y,
    )


def screen_to_image(point: QPointF, placement: Placement) -> QPointF:
    if placement.scale <= 0:
        raise DegenerateGeometry("placement scale must be positive")
    return QPointF(
        (point.x() - placement.offset_x) / placement.scale,
        (point.y() - placement.offset_y) / placement.scale,
    )


def image_to_screen(point: QPointF, placement: Placement) -> QPointF:
    return QPointF(
        point.x() * placement.scale + placement.offset_x,
        point.y() * placement.scale + placement.offset_y,
    )
