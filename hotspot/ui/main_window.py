import os

from PySide6.QtCore import QSignalBlocker, Qt, Slot
from PySide6.QtGui import QAction
from PySide6.QtWidgets import (
    QComboBox,
    QFileDialog,
    QLabel,
    QMainWindow,
    QMessageBox,
    QSlider,
    QToolBar,
)

from hotspot.core.session import SessionState
from hotspot.core.shape import ShapeType
from hotspot.ui.canvas import HotspotCanvas


class MainWindow(QMainWindow):
    IMAGE_FILTERS = "Image Files (*.png *.jpg *.jpeg *.bmp *.gif *.webp *.tif *.tiff);;All Files (*)"
    MODE_LABELS = {
        SessionState.IDLE: "",
        SessionState.ARMED: "Drag on the image to place a hotspot",
        SessionState.DRAWING: "Drawing hotspot",
    }

    def __init__(self, controller, settings_controller):
        super().__init__()
        self.controller = controller
        self.settings_controller = settings_controller
        self.setWindowTitle("Hotspot Annotator")

        self.canvas = HotspotCanvas(self.controller, self)
        self.setCentralWidget(self.canvas)

        self._setup_toolbar()
        self._setup_status_bar()

        self.controller.history_changed.connect(self.update_history_actions)
        self.controller.image_failed.connect(self.on_image_failed)
        self.controller.image_changed.connect(self.on_image_changed)
        self.controller.shapes_changed.connect(self.update_shape_count)
        self.controller.state_changed.connect(self.update_mode)
        self.controller.drawing_context.opacity_changed.connect(self.on_opacity_changed)
        self.controller.drawing_context.drawing_enabled_changed.connect(
            self.add_hotspot_action.setChecked
        )
        self.update_history_actions(self.controller.can_undo(), self.controller.can_redo())
        self.update_shape_count(self.controller.shapes)
        self.update_mode(self.controller.state)

    def _setup_toolbar(self):
        self.toolbar = QToolBar("Hotspots")
        self.addToolBar(Qt.TopToolBarArea, self.toolbar)

        self.open_action = QAction("Open Image…", self)
        self.open_action.triggered.connect(self.open_image)
        self.toolbar.addAction(self.open_action)
        self.toolbar.addSeparator()

        self.add_hotspot_action = QAction("Add Hotspot", self)
        self.add_hotspot_action.setCheckable(True)
        self.add_hotspot_action.triggered.connect(self.on_add_hotspot)
        self.toolbar.addAction(self.add_hotspot_action)

        self.shape_combo = QComboBox()
        for shape_type in ShapeType:
            self.shape_combo.addItem(shape_type.value.capitalize(), shape_type.value)
        current = self.shape_combo.findData(self.controller.drawing_context.shape_type.value)
        self.shape_combo.setCurrentIndex(max(0, current))
        self.shape_combo.currentIndexChanged.connect(self.on_shape_changed)
        self.toolbar.addWidget(self.shape_combo)
        self.toolbar.addSeparator()

        self.toolbar.addWidget(QLabel("Opacity"))
        self.opacity_slider = QSlider(Qt.Horizontal)
        self.opacity_slider.setRange(0, 100)
        self.opacity_slider.setValue(round(self.controller.drawing_context.opacity * 100))
        self.opacity_slider.setMaximumWidth(120)
        self.opacity_slider.valueChanged.connect(self.controller.set_opacity_percent)
        self.toolbar.addWidget(self.opacity_slider)
        self.toolbar.addSeparator()

        self.undo_action = QAction("Undo", self)
        self.undo_action.triggered.connect(self.controller.undo)
        self.toolbar.addAction(self.undo_action)

        self.redo_action = QAction("Redo", self)
        self.redo_action.triggered.connect(self.controller.redo)
        self.toolbar.addAction(self.redo_action)

    def _setup_status_bar(self):
        self.mode_label = QLabel()
        self.shape_count_label = QLabel()
        self.statusBar().addPermanentWidget(self.mode_label)
        self.statusBar().addPermanentWidget(self.shape_count_label)

    @Slot()
    def open_image(self):
        file_path, _ = QFileDialog.getOpenFileName(
            self,
            "Open Image",
            self.settings_controller.last_directory,
            self.IMAGE_FILTERS,
        )
        if not file_path:
            return
        self.settings_controller.last_directory = os.path.dirname(file_path)
        self.statusBar().showMessage(f"Loading {os.path.basename(file_path)}…")
        self.controller.load_image(file_path)

    @Slot()
    def on_add_hotspot(self):
        self.controller.enable_drawing()
        self.add_hotspot_action.setChecked(self.controller.drawing_enabled)

    @Slot(int)
    def on_shape_changed(self, index):
        value = self.shape_combo.itemData(index)
        self.controller.set_shape_type(value)
        self.settings_controller.update_hotspot_settings(shape=value)

    @Slot(float)
    def on_opacity_changed(self, opacity):
        with QSignalBlocker(self.opacity_slider):
            self.opacity_slider.setValue(round(opacity * 100))
        self.settings_controller.update_hotspot_settings(opacity=opacity)

    @Slot(bool, bool)
    def update_history_actions(self, can_undo, can_redo):
        self.undo_action.setEnabled(can_undo)
        self.redo_action.setEnabled(can_redo)

    @Slot(object)
    def update_shape_count(self, shapes):
        self.shape_count_label.setText(f"Hotspots: {len(shapes)}")

    @Slot(object)
    def update_mode(self, state):
        self.mode_label.setText(self.MODE_LABELS.get(state, ""))

    @Slot()
    def on_image_changed(self):
        self.statusBar().clearMessage()

    @Slot(str)
    def on_image_failed(self, message):
        self.statusBar().clearMessage()
        QMessageBox.warning(self, "Unable to open image", message)

    def closeEvent(self, event):
        self.settings_controller.save_settings()
        super().closeEvent(event)
