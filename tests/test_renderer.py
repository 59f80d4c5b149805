import pytest
from PySide6.QtCore import QPointF, QSize, Qt
from PySide6.QtGui import QColor, QImage, QPainter, QPen

from hotspot.core.geometry import Placement
from hotspot.core.renderer import CanvasRenderer, HotspotStyle, ShapeRenderer
from hotspot.core.shape import Shape, ShapeType

IDENTITY = Placement(0, 0, 1.0, 200, 200)
YELLOW = QColor("yellow")
RED = QColor("red")
WHITE = QColor("white")


@pytest.fixture
def target(qapp):
    image = QImage(200, 200, QImage.Format_ARGB32)
    image.fill(WHITE)
    return image


def render(target, shape, opacity=1.0, renderer=None, placement=IDENTITY):
    renderer = renderer or ShapeRenderer()
    painter = QPainter(target)
    renderer.render(painter, shape, placement, opacity)
    painter.end()
    return target


def test_rectangle_fill_and_guide_lines(target):
    render(target, Shape(ShapeType.RECTANGLE, 20, 20, 120, 80))

    assert target.pixelColor(70, 35) == YELLOW
    assert target.pixelColor(70, 50) == RED
    assert target.pixelColor(150, 150) == WHITE


def test_rectangle_drawn_right_to_left_keeps_pattern(target):
    render(target, Shape(ShapeType.RECTANGLE, 120, 80, 20, 20))

    assert target.pixelColor(70, 35) == YELLOW
    assert target.pixelColor(70, 50) == RED


def test_fill_alpha_follows_opacity(target):
    render(target, Shape(ShapeType.RECTANGLE, 20, 20, 120, 80), opacity=0.0)
    assert target.pixelColor(70, 35) == WHITE
    assert target.pixelColor(70, 50) == RED


def test_half_opacity_blends_fill(target):
    render(target, Shape(ShapeType.RECTANGLE, 20, 20, 120, 80), opacity=0.5)

    color = target.pixelColor(70, 35)
    assert color.red() == 255
    assert color.green() == 255
    assert 100 < color.blue() < 160


def test_square_uses_shorter_side_with_drag_signs(target):
    # width 40, height -100: the square extends 40px upwards from the start.
    render(target, Shape(ShapeType.SQUARE, 20, 140, 60, 40))

    assert target.pixelColor(40, 115) == YELLOW
    assert target.pixelColor(40, 80) == WHITE


def test_circle_is_clipped_to_its_radius(target):
    render(target, Shape(ShapeType.CIRCLE, 20, 20, 120, 80))

    assert target.pixelColor(70, 45) == YELLOW
    assert target.pixelColor(70, 50) == RED
    assert target.pixelColor(110, 50) == WHITE
    assert target.pixelColor(30, 35) == WHITE


def test_triangle_is_clipped_to_its_outline(target):
    render(target, Shape(ShapeType.TRIANGLE, 20, 20, 120, 120))

    assert target.pixelColor(70, 95) == YELLOW
    assert target.pixelColor(25, 35) == WHITE
    assert target.pixelColor(115, 35) == WHITE


def test_triangle_dragged_upwards_keeps_pattern(target):
    # Apex sits on the start edge, so this triangle points down.
    render(target, Shape(ShapeType.TRIANGLE, 20, 120, 120, 20))

    assert target.pixelColor(70, 45) == YELLOW
    assert target.pixelColor(70, 50) == RED
    assert target.pixelColor(25, 110) == WHITE
    assert target.pixelColor(115, 110) == WHITE


def test_handle_is_drawn_at_start_point(target):
    renderer = ShapeRenderer(HotspotStyle(handle_radius=20))
    render(target, Shape(ShapeType.RECTANGLE, 20, 20, 120, 80), renderer=renderer)

    # Inside the handle disc but clear of the label.
    assert target.pixelColor(32, 26) == WHITE
    assert target.pixelColor(70, 35) == YELLOW


class RecordingRenderer(ShapeRenderer):
    def __init__(self, style=None):
        super().__init__(style)
        self.handles = []

    def draw_handle(self, painter, center, index):
        self.handles.append((center, index))
        super().draw_handle(painter, center, index)


def test_handle_is_placed_in_screen_space_with_index(target):
    renderer = RecordingRenderer()
    placement = Placement(0, 75, 0.5, 400, 150)

    render(target, Shape(ShapeType.CIRCLE, 200, 50, 400, 150, index=3), renderer=renderer, placement=placement)

    assert renderer.handles == [(QPointF(100, 100), 3)]


def test_render_restores_painter_state(target):
    painter = QPainter(target)
    painter.setPen(QPen(QColor("blue"), 5))
    painter.setOpacity(0.8)

    for shape_type in ShapeType:
        ShapeRenderer().render(painter, Shape(shape_type, 10, 10, 90, 90), IDENTITY, 0.3)

    assert painter.pen().color() == QColor("blue")
    assert painter.pen().width() == 5
    assert painter.opacity() == pytest.approx(0.8)
    assert not painter.hasClipping()
    painter.end()


def test_line_spacing_comes_from_style(target):
    renderer = ShapeRenderer(HotspotStyle(line_spacing=5))
    render(target, Shape(ShapeType.RECTANGLE, 20, 20, 120, 80), renderer=renderer)

    assert target.pixelColor(70, 35) == RED


def test_unknown_shape_type_raises(target):
    painter = QPainter(target)
    try:
        with pytest.raises(ValueError):
            ShapeRenderer().render(painter, Shape("hexagon", 0, 0, 10, 10), IDENTITY, 1.0)
    finally:
        painter.end()


def test_canvas_renderer_letterboxes_image(qapp, make_image):
    surface = QImage(400, 300, QImage.Format_ARGB32)
    painter = QPainter(surface)
    placement = CanvasRenderer().paint(
        painter, QSize(400, 300), make_image(800, 300, Qt.gray), [], 1.0
    )
    painter.end()

    assert placement == Placement(0, 75, 0.5, 400, 150)
    assert surface.pixelColor(200, 30).alpha() == 0
    assert surface.pixelColor(200, 150) == QColor(Qt.gray)


def test_canvas_renderer_draws_committed_and_provisional_shapes(qapp, make_image):
    surface = QImage(200, 200, QImage.Format_ARGB32)
    painter = QPainter(surface)
    CanvasRenderer().paint(
        painter,
        QSize(200, 200),
        make_image(200, 200, Qt.white),
        [Shape(ShapeType.RECTANGLE, 20, 20, 80, 80)],
        1.0,
        provisional=Shape(ShapeType.RECTANGLE, 120, 120, 180, 180, index=2),
    )
    painter.end()

    assert surface.pixelColor(50, 35) == YELLOW
    assert surface.pixelColor(150, 135) == YELLOW


def test_canvas_renderer_without_image_only_clears(qapp):
    surface = QImage(50, 50, QImage.Format_ARGB32)
    surface.fill(RED)
    painter = QPainter(surface)
    placement = CanvasRenderer().paint(painter, QSize(50, 50), None, [], 1.0)
    painter.end()

    assert placement is None
    assert surface.pixelColor(10, 10).alpha() == 0


def test_canvas_renderer_skips_degenerate_image(qapp):
    surface = QImage(50, 50, QImage.Format_ARGB32)
    painter = QPainter(surface)
    placement = CanvasRenderer().paint(painter, QSize(50, 50), QImage(), [], 1.0)
    painter.end()

    assert placement is None
