from PySide6.QtCore import QRectF, QSize, Qt
from PySide6.QtGui import QMouseEvent, QPainter
from PySide6.QtWidgets import QSizePolicy, QWidget


class HotspotCanvas(QWidget):
    """Shows the controller's fixed-size surface stretched over the widget.

    Mouse positions are forwarded in widget coordinates together with the
    widget rect; the controller rescales them to surface pixels.
    """

    def __init__(self, controller, parent=None):
        super().__init__(parent)
        self.controller = controller
        self.setMouseTracking(False)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setCursor(Qt.CrossCursor)
        self.controller.surface_changed.connect(self.update)

    def sizeHint(self):
        return QSize(self.controller.canvas_size)

    def display_rect(self) -> QRectF:
        return QRectF(self.rect())

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), self.palette().window())
        painter.setRenderHint(QPainter.SmoothPixmapTransform, True)
        surface = self.controller.surface
        if not surface.isNull():
            painter.drawImage(self.display_rect(), surface)
        painter.end()

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() != Qt.LeftButton:
            return
        self.controller.gesture_start(event.position(), self.display_rect())

    def mouseMoveEvent(self, event: QMouseEvent):
        if not event.buttons() & Qt.LeftButton:
            return
        self.controller.gesture_move(event.position(), self.display_rect())

    def mouseReleaseEvent(self, event: QMouseEvent):
        if event.button() != Qt.LeftButton:
            return
        self.controller.gesture_end(event.position(), self.display_rect())
