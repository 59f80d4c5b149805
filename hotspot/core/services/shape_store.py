from __future__ import annotations

import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Sequence

from hotspot.core.shape import Shape, renumber

logger = logging.getLogger(__name__)


class ShapeStore(ABC):
    """Sink for the active shape list."""

    @abstractmethod
    def save(self, shapes: Sequence[Shape]) -> None:
        """
        Persists the full ordered shape list.
        Implementations must not raise; failures are logged.
        """
        raise NotImplementedError

    @staticmethod
    def serialize(shapes: Sequence[Shape]) -> list[dict]:
        return [shape.to_dict() for shape in renumber(shapes)]


class MemoryShapeStore(ShapeStore):
    """Keeps every saved list in memory."""

    def __init__(self):
        self.saved: list[list[dict]] = []

    @property
    def last(self) -> list[dict] | None:
        return self.saved[-1] if self.saved else None

    def save(self, shapes: Sequence[Shape]) -> None:
        self.saved.append(self.serialize(shapes))


class JsonShapeStore(ShapeStore):
    """Writes the shape list to a JSON file, replacing it on every save."""

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)

    def save(self, shapes: Sequence[Shape]) -> None:
        records = self.serialize(shapes)
        try:
            payload = json.dumps(records, indent=2)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            temp_path = self.path.with_name(self.path.name + ".tmp")
            temp_path.write_text(payload, encoding="utf-8")
            os.replace(temp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Could not save shapes to %s: %s", self.path, e)
            return

        logger.debug("Shapes saved: %d record(s) to %s", len(records), self.path)
        for record in records:
            logger.debug("  %s", record)

    def load(self) -> list[Shape]:
        """Read back the last saved list. Missing or corrupt files give ``[]``."""
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as e:
            logger.warning("Could not read shapes from %s: %s", self.path, e)
            return []

        shapes = []
        for record in raw if isinstance(raw, list) else []:
            try:
                shapes.append(Shape.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed shape record %r: %s", record, e)
        return list(renumber(shapes))
