import logging
from enum import Enum, auto
from typing import Optional

from PySide6.QtCore import QObject, QPointF, QRectF, QSize, Qt, Signal, Slot
from PySide6.QtGui import QImage, QPainter

from hotspot.core.drawing_context import DrawingContext
from hotspot.core.errors import DegenerateGeometry, NoActiveImage
from hotspot.core.geometry import client_to_canvas, screen_to_image
from hotspot.core.history import HistoryLog
from hotspot.core.renderer import CanvasRenderer, HotspotStyle, ShapeRenderer
from hotspot.core.shape import Shape

logger = logging.getLogger(__name__)


class SessionState(Enum):
    IDLE = auto()
    ARMED = auto()
    DRAWING = auto()


class SessionController(QObject):
    """Owns one annotation session: the image, the shapes and their history.

    Pointer gestures arrive in display coordinates together with the rect the
    canvas occupies on screen. Every handler runs to completion and never
    raises; events that do not apply to the current state are ignored.
    """

    surface_changed = Signal()
    image_changed = Signal()
    image_failed = Signal(str)
    shapes_changed = Signal(object)
    history_changed = Signal(bool, bool)
    state_changed = Signal(object)

    def __init__(
        self,
        store,
        canvas_size: QSize,
        image_loader=None,
        drawing_context: Optional[DrawingContext] = None,
        style: Optional[HotspotStyle] = None,
        parent=None,
    ):
        super().__init__(parent)
        self.store = store
        self.image_loader = image_loader
        self.drawing_context = drawing_context or DrawingContext()
        self.renderer = CanvasRenderer(ShapeRenderer(style))
        self.history = HistoryLog()

        self.canvas_size = QSize(canvas_size)
        self.surface = QImage(self.canvas_size, QImage.Format_ARGB32_Premultiplied)
        if not self.surface.isNull():
            self.surface.fill(Qt.transparent)

        self.image: Optional[QImage] = None
        self.placement = None
        self.shapes: tuple[Shape, ...] = self.history.active
        self.state = SessionState.IDLE
        self.gesture_start_point: Optional[QPointF] = None
        self.provisional: Optional[Shape] = None
        self._pending_request: Optional[int] = None

        self.drawing_context.opacity_changed.connect(self._on_opacity_changed)
        if self.image_loader is not None:
            self.image_loader.image_loaded.connect(self._on_image_loaded)
            self.image_loader.image_failed.connect(self._on_image_failed)

    # State ----------------------------------------------------------------
    @property
    def drawing_enabled(self) -> bool:
        return self.drawing_context.drawing_enabled

    @property
    def gesture_in_progress(self) -> bool:
        return self.state is SessionState.DRAWING

    def _set_state(self, state: SessionState):
        if state is self.state:
            return
        self.state = state
        self.state_changed.emit(state)

    @Slot()
    def enable_drawing(self):
        self.drawing_context.set_drawing_enabled(True)
        if self.state is SessionState.IDLE:
            self._set_state(SessionState.ARMED)

    @Slot(object)
    def set_shape_type(self, shape_type):
        try:
            self.drawing_context.set_shape_type(shape_type)
        except ValueError:
            logger.warning("Ignoring unknown shape type %r", shape_type)

    @Slot(float)
    def set_opacity(self, opacity):
        self.drawing_context.set_opacity(opacity)

    @Slot(int)
    def set_opacity_percent(self, value):
        self.set_opacity(int(value) / 100)

    @Slot(float)
    def _on_opacity_changed(self, _opacity):
        self.repaint()

    # Gestures -------------------------------------------------------------
    def _display_rect(self, display_rect):
        if display_rect is None:
            return QRectF(0, 0, self.canvas_size.width(), self.canvas_size.height())
        return QRectF(display_rect)

    def map_to_image(self, client_pos: QPointF, display_rect: Optional[QRectF] = None) -> QPointF:
        if self.placement is None:
            raise NoActiveImage("no image has been placed on the canvas")
        canvas_pos = client_to_canvas(QPointF(client_pos), self.canvas_size, self._display_rect(display_rect))
        return screen_to_image(canvas_pos, self.placement)

    def _build_shape(self, end: QPointF, index: int) -> Shape:
        return Shape.from_points(self.drawing_context.shape_type, self.gesture_start_point, end, index)

    def gesture_start(self, client_pos: QPointF, display_rect: Optional[QRectF] = None) -> bool:
        if not self.drawing_enabled or self.gesture_in_progress:
            return False
        try:
            start = self.map_to_image(client_pos, display_rect)
        except (NoActiveImage, DegenerateGeometry) as e:
            logger.debug("Ignoring gesture start: %s", e)
            return False

        self.gesture_start_point = start
        self._set_state(SessionState.DRAWING)
        return True

    def gesture_move(self, client_pos: QPointF, display_rect: Optional[QRectF] = None) -> bool:
        if not self.drawing_enabled or not self.gesture_in_progress:
            return False
        try:
            end = self.map_to_image(client_pos, display_rect)
        except (NoActiveImage, DegenerateGeometry) as e:
            logger.debug("Ignoring gesture move: %s", e)
            return False

        self.provisional = self._build_shape(end, len(self.shapes) + 1)
        self.repaint()
        return True

    def gesture_end(self, client_pos: QPointF, display_rect: Optional[QRectF] = None) -> bool:
        if not self.drawing_enabled or not self.gesture_in_progress:
            return False
        try:
            end = self.map_to_image(client_pos, display_rect)
        except (NoActiveImage, DegenerateGeometry) as e:
            logger.debug("Abandoning gesture: %s", e)
            self._cancel_gesture()
            return False

        shape = self._build_shape(end, len(self.shapes) + 1)
        self.provisional = None
        self.gesture_start_point = None
        self.drawing_context.set_drawing_enabled(False)
        self._set_state(SessionState.IDLE)
        self._apply_snapshot(self.history.commit([*self.shapes, shape]))
        return True

    def _cancel_gesture(self):
        self.provisional = None
        self.gesture_start_point = None
        if self.state is SessionState.DRAWING:
            self._set_state(SessionState.ARMED)
        self.repaint()

    # History --------------------------------------------------------------
    @Slot()
    def undo(self) -> bool:
        snapshot = self.history.undo()
        if snapshot is None:
            logger.debug("Nothing to undo")
            return False
        self._apply_snapshot(snapshot)
        return True

    @Slot()
    def redo(self) -> bool:
        snapshot = self.history.redo()
        if snapshot is None:
            logger.debug("Nothing to redo")
            return False
        self._apply_snapshot(snapshot)
        return True

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def can_redo(self) -> bool:
        return self.history.can_redo()

    def _apply_snapshot(self, snapshot):
        self.shapes = tuple(snapshot)
        self.repaint()
        self.persist()
        self.shapes_changed.emit(self.shapes)
        self.history_changed.emit(self.can_undo(), self.can_redo())

    def persist(self):
        try:
            self.store.save(self.shapes)
        except Exception:
            # Store failures must not reach the caller.
            logger.exception("Persisting %d shape(s) failed", len(self.shapes))

    # Image ----------------------------------------------------------------
    def load_image(self, file_path) -> Optional[int]:
        """Start decoding ``file_path``. Only the latest request is applied."""
        if self.image_loader is None:
            logger.warning("No image loader configured; cannot open %s", file_path)
            return None
        self._pending_request = self.image_loader.request(file_path)
        return self._pending_request

    @Slot(int, QImage)
    def _on_image_loaded(self, request_id, image):
        if request_id != self._pending_request:
            logger.debug("Dropping stale image result %d", request_id)
            return
        self._pending_request = None
        self.set_image(image)

    @Slot(int, str)
    def _on_image_failed(self, request_id, message):
        if request_id != self._pending_request:
            return
        self._pending_request = None
        self.image_failed.emit(message)

    def set_image(self, image: Optional[QImage]):
        self.image = image
        if self.gesture_in_progress:
            self._cancel_gesture()
        self.repaint()
        self.image_changed.emit()

    # Painting -------------------------------------------------------------
    @Slot()
    def repaint(self):
        if self.surface.isNull():
            logger.debug("Skipping repaint: canvas has no pixels")
            self.placement = None
            return None

        painter = QPainter(self.surface)
        try:
            self.placement = self.renderer.paint(
                painter,
                self.canvas_size,
                self.image,
                self.shapes,
                self.drawing_context.opacity,
                self.provisional,
            )
        finally:
            painter.end()
        self.surface_changed.emit()
        return self.placement
