import configparser
import logging
import os

from PySide6.QtCore import QObject, QSize

from hotspot.core.renderer import HotspotStyle
from hotspot.core.shape import ShapeType

logger = logging.getLogger(__name__)


class SettingsController(QObject):
    """Manages application settings persistence."""

    DEFAULT_CANVAS_SETTINGS = {
        "width": 800,
        "height": 600,
    }

    DEFAULT_HOTSPOT_SETTINGS = {
        "shape": ShapeType.RECTANGLE,
        "opacity": 1.0,
        "line_spacing": 10,
        "handle_radius": 7,
    }

    DEFAULT_STORAGE_SETTINGS = {
        "path": "saved_shapes.json",
    }

    def __init__(self, path='settings.ini'):
        super().__init__()
        self.path = path
        self.config = configparser.ConfigParser()
        self.config.read(self.path)
        if not self.config.has_section('General'):
            self.config.add_section('General')
        self.last_directory = self.config.get('General', 'last_directory', fallback=os.path.expanduser("~"))

        if not self.config.has_section('Canvas'):
            self.config.add_section('Canvas')
        self.canvas_width = self._get_positive_int(
            'Canvas', 'width', self.DEFAULT_CANVAS_SETTINGS["width"]
        )
        self.canvas_height = self._get_positive_int(
            'Canvas', 'height', self.DEFAULT_CANVAS_SETTINGS["height"]
        )
        self._sync_canvas_settings_to_config()

        if not self.config.has_section('Hotspot'):
            self.config.add_section('Hotspot')
        raw_shape = self.config.get(
            'Hotspot',
            'shape',
            fallback=self.DEFAULT_HOTSPOT_SETTINGS["shape"].value,
        )
        try:
            self.shape_type = ShapeType(raw_shape)
        except ValueError:
            self.shape_type = self.DEFAULT_HOTSPOT_SETTINGS["shape"]

        try:
            opacity_value = self.config.getfloat('Hotspot', 'opacity')
        except (configparser.NoOptionError, ValueError):
            opacity_value = self.DEFAULT_HOTSPOT_SETTINGS["opacity"]
        self.opacity = max(0.0, min(1.0, float(opacity_value)))
        self.line_spacing = self._get_positive_int(
            'Hotspot', 'line_spacing', self.DEFAULT_HOTSPOT_SETTINGS["line_spacing"]
        )
        self.handle_radius = self._get_positive_int(
            'Hotspot', 'handle_radius', self.DEFAULT_HOTSPOT_SETTINGS["handle_radius"]
        )
        self._sync_hotspot_settings_to_config()

        if not self.config.has_section('Storage'):
            self.config.add_section('Storage')
        self.storage_path = self.config.get(
            'Storage', 'path', fallback=self.DEFAULT_STORAGE_SETTINGS["path"]
        ) or self.DEFAULT_STORAGE_SETTINGS["path"]
        self._sync_storage_settings_to_config()

    def save_settings(self):
        """Persist settings to disk."""
        try:
            self.config.set('General', 'last_directory', self.last_directory)
            self._sync_canvas_settings_to_config()
            self._sync_hotspot_settings_to_config()
            self._sync_storage_settings_to_config()

            with open(self.path, 'w') as configfile:
                self.config.write(configfile)
        except OSError as e:
            logger.warning("Could not write to %s: %s", self.path, e)
            return False
        return True

    def _get_positive_int(self, section, option, fallback):
        try:
            return max(1, self.config.getint(section, option))
        except (configparser.NoOptionError, ValueError):
            return fallback

    def _sync_canvas_settings_to_config(self):
        self.config.set('Canvas', 'width', str(int(self.canvas_width)))
        self.config.set('Canvas', 'height', str(int(self.canvas_height)))

    def _sync_hotspot_settings_to_config(self):
        self.config.set('Hotspot', 'shape', self.shape_type.value)
        self.config.set('Hotspot', 'opacity', f"{self.opacity:.3f}")
        self.config.set('Hotspot', 'line_spacing', str(int(self.line_spacing)))
        self.config.set('Hotspot', 'handle_radius', str(int(self.handle_radius)))

    def _sync_storage_settings_to_config(self):
        self.config.set('Storage', 'path', self.storage_path)

    def get_canvas_size(self):
        return QSize(int(self.canvas_width), int(self.canvas_height))

    def get_hotspot_style(self):
        return HotspotStyle(
            line_spacing=int(self.line_spacing),
            handle_radius=float(self.handle_radius),
        )

    def update_hotspot_settings(self, *, shape=None, opacity=None):
        if shape is not None:
            try:
                self.shape_type = ShapeType(shape)
            except ValueError:
                logger.debug("Ignoring unknown shape type %r", shape)
        if opacity is not None:
            try:
                opacity_value = float(opacity)
            except (TypeError, ValueError):
                opacity_value = self.opacity
            self.opacity = max(0.0, min(1.0, opacity_value))
        self._sync_hotspot_settings_to_config()
