import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtCore import Qt
from PySide6.QtGui import QColor, QImage
from PySide6.QtWidgets import QApplication


@pytest.fixture
def qapp():
    """
    Creates a QApplication if none exists yet, so painters and fonts work.
    """
    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)
    yield app


@pytest.fixture
def make_image():
    def _make_image(width, height, color=Qt.gray):
        image = QImage(width, height, QImage.Format_ARGB32)
        image.fill(QColor(color))
        return image
    return _make_image
