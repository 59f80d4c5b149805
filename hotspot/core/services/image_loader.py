"""Background image decoding.

Files are decoded on a :class:`QThreadPool` worker; results are delivered
back through queued signals, so receivers run on the thread that owns the
loader.
"""

from __future__ import annotations

import itertools
import logging
import os

from PIL import Image, ImageQt, UnidentifiedImageError
from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal
from PySide6.QtGui import QImage, QImageReader

logger = logging.getLogger(__name__)


def decode_image(file_path: str | os.PathLike) -> QImage | None:
    """Decode ``file_path`` into a :class:`QImage`.

    Qt's readers are tried first, sniffing the format from content. Formats
    Qt cannot read are handed to Pillow. Returns ``None`` when neither
    succeeds.
    """

    path = os.fspath(file_path)
    reader = QImageReader(path)
    reader.setDecideFormatFromContent(True)
    reader.setAutoTransform(True)
    image = reader.read()
    if not image.isNull():
        return image

    try:
        with Image.open(path) as pil_image:
            pil_image.load()
            image = ImageQt.toqimage(pil_image.convert("RGBA")).copy()
    except (OSError, UnidentifiedImageError, ValueError) as e:
        logger.debug("Pillow could not decode %s: %s", path, e)
        return None

    if image.isNull():
        return None
    return image


class ImageLoadSignals(QObject):
    load_complete = Signal(int, QImage)
    load_failed = Signal(int, str)


class ImageLoadTask(QRunnable):
    def __init__(self, request_id: int, file_path: str):
        super().__init__()
        self.request_id = request_id
        self.file_path = file_path
        self.signals = ImageLoadSignals()

    def run(self):
        try:
            image = decode_image(self.file_path)
        except Exception as e:
            self.signals.load_failed.emit(self.request_id, f"Image load error: {e}")
            return

        if image is None:
            self.signals.load_failed.emit(
                self.request_id, f"Unsupported or corrupted image: {self.file_path}"
            )
            return
        self.signals.load_complete.emit(self.request_id, image)


class ImageLoader(QObject):
    """Decodes images off the GUI thread.

    ``request`` returns an id that is echoed in ``image_loaded`` or
    ``image_failed`` so callers can discard results they no longer want.
    """

    image_loaded = Signal(int, QImage)
    image_failed = Signal(int, str)

    def __init__(self, thread_pool: QThreadPool | None = None, parent=None):
        super().__init__(parent)
        self.thread_pool = thread_pool or QThreadPool.globalInstance()
        self._ids = itertools.count(1)

    def request(self, file_path: str | os.PathLike) -> int:
        request_id = next(self._ids)
        task = ImageLoadTask(request_id, os.fspath(file_path))
        task.signals.load_complete.connect(self.image_loaded)
        task.signals.load_failed.connect(self._on_failed)
        logger.debug("Decoding %s (request %d)", task.file_path, request_id)
        self.thread_pool.start(task)
        return request_id

    def _on_failed(self, request_id: int, message: str):
        logger.warning("Image request %d failed: %s", request_id, message)
        self.image_failed.emit(request_id, message)
