import logging
import sys

from PySide6.QtWidgets import QApplication

from hotspot.core.drawing_context import DrawingContext
from hotspot.core.services.image_loader import ImageLoader
from hotspot.core.services.shape_store import JsonShapeStore
from hotspot.core.session import SessionController
from hotspot.core.settings_controller import SettingsController
from hotspot.ui.main_window import MainWindow


def main(argv=None):
    argv = sys.argv if argv is None else argv
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    q_app = QApplication(argv)
    settings_controller = SettingsController()
    drawing_context = DrawingContext(
        shape_type=settings_controller.shape_type,
        opacity=settings_controller.opacity,
    )
    controller = SessionController(
        store=JsonShapeStore(settings_controller.storage_path),
        canvas_size=settings_controller.get_canvas_size(),
        image_loader=ImageLoader(),
        drawing_context=drawing_context,
        style=settings_controller.get_hotspot_style(),
    )
    window = MainWindow(controller, settings_controller)
    window.resize(settings_controller.get_canvas_size())
    window.show()
    if len(argv) > 1:
        controller.load_image(argv[1])
    return q_app.exec()


if __name__ == "__main__":
    sys.exit(main())
