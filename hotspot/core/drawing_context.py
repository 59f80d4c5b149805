from PySide6.QtCore import QObject, Signal, Slot

from hotspot.core.shape import ShapeType


class DrawingContext(QObject):
    shape_type_changed = Signal(object)
    opacity_changed = Signal(float)
    drawing_enabled_changed = Signal(bool)

    def __init__(self, shape_type=ShapeType.RECTANGLE, opacity=1.0):
        super().__init__()
        self.shape_type = ShapeType(shape_type)
        self.opacity = self._clamp_opacity(opacity)
        self.drawing_enabled = False

    @staticmethod
    def _clamp_opacity(value):
        return max(0.0, min(1.0, float(value)))

    @Slot(object)
    def set_shape_type(self, shape_type):
        # Accepts a ShapeType or its string value
        shape_type = ShapeType(shape_type)
        if shape_type == self.shape_type:
            return
        self.shape_type = shape_type
        self.shape_type_changed.emit(self.shape_type)

    @Slot(float)
    def set_opacity(self, opacity):
        opacity = self._clamp_opacity(opacity)
        if opacity == self.opacity:
            return
        self.opacity = opacity
        self.opacity_changed.emit(self.opacity)

    @Slot(bool)
    def set_drawing_enabled(self, enabled):
        enabled = bool(enabled)
        if enabled == self.drawing_enabled:
            return
        self.drawing_enabled = enabled
        self.drawing_enabled_changed.emit(self.drawing_enabled)
