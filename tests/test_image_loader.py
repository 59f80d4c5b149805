import pytest
from PIL import Image
from PySide6.QtCore import QSize
from PySide6.QtGui import QColor, QImage

from hotspot.core.services.image_loader import ImageLoader, decode_image
from hotspot.core.services.shape_store import MemoryShapeStore
from hotspot.core.session import SessionController


@pytest.fixture
def png_path(qapp, tmp_path):
    path = tmp_path / "photo.png"
    image = QImage(80, 30, QImage.Format_ARGB32)
    image.fill(QColor("green"))
    assert image.save(str(path))
    return path


def test_decode_image_reads_png(png_path):
    image = decode_image(png_path)

    assert image is not None
    assert image.size() == QSize(80, 30)


def test_decode_image_falls_back_to_pillow(qapp, tmp_path):
    path = tmp_path / "scan.pcx"
    Image.new("RGB", (12, 7), (255, 0, 0)).save(path, format="PCX")

    image = decode_image(path)

    assert image is not None
    assert image.size() == QSize(12, 7)


def test_decode_image_rejects_garbage(qapp, tmp_path):
    path = tmp_path / "garbage.png"
    path.write_bytes(b"definitely not an image")

    assert decode_image(path) is None


def test_loader_emits_loaded_image(qtbot, png_path):
    loader = ImageLoader()

    with qtbot.waitSignal(loader.image_loaded, timeout=5000) as blocker:
        request_id = loader.request(png_path)

    assert blocker.args[0] == request_id
    assert blocker.args[1].size() == QSize(80, 30)


def test_loader_reports_failures(qtbot, tmp_path):
    path = tmp_path / "missing.png"
    loader = ImageLoader()

    with qtbot.waitSignal(loader.image_failed, timeout=5000) as blocker:
        request_id = loader.request(path)

    assert blocker.args[0] == request_id
    assert str(path) in blocker.args[1]


def test_controller_places_image_once_decoded(qtbot, png_path):
    controller = SessionController(
        store=MemoryShapeStore(),
        canvas_size=QSize(400, 300),
        image_loader=ImageLoader(),
    )

    with qtbot.waitSignal(controller.image_changed, timeout=5000):
        controller.load_image(png_path)

    assert controller.image.size() == QSize(80, 30)
    assert controller.placement.scale == pytest.approx(5.0)
    assert controller.placement.offset_y == pytest.approx(75.0)
