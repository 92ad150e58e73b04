import json
import os
import sys

import skia

from lib import tlog
from spriteanim.image import ImageHandle


def resource_path(relative_path):
    """Get absolute path to resource, works for dev and for PyInstaller"""
    base_path = getattr(sys, "_MEIPASS", os.path.abspath("."))
    return os.path.join(base_path, relative_path)


class AssetManager:
    """Loads image handles and scene descriptions from disk.

    Handles are not cached, each call decodes the file again; a handle lives
    as long as the FrameSequencer that asked for it.
    """

    _instance = None

    @classmethod
    def get(cls):
        if cls._instance is None:
            cls._instance = AssetManager()
        return cls._instance

    def load_image(self, src: str) -> ImageHandle:
        handle = ImageHandle(src)
        full_path = resource_path(src)
        if not os.path.exists(full_path):
            tlog.err(f"AssetManager: Image not found {full_path}")
            return handle

        try:
            image = skia.Image.MakeFromEncoded(skia.Data.MakeFromFileName(full_path))
        except Exception as e:
            tlog.err(f"AssetManager: Failed to decode image {full_path}: {e}")
            return handle
        if image is None:
            tlog.err(f"AssetManager: Failed to decode image {full_path}")
            return handle

        handle.image = image
        tlog.info(f"AssetManager: Loaded image '{src}' ({image.width()}x{image.height()})")
        return handle

    def load_json(self, path: str) -> dict | None:
        full_path = resource_path(path)
        try:
            with open(full_path, "r") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            tlog.err(f"AssetManager: Failed to load JSON {full_path}: {e}")
            return None
