from dataclasses import dataclass
from typing import Any


@dataclass
class ImageHandle:
    """Image reference the surface can draw once ``image`` is set."""

    src: str
    image: Any = None

    @property
    def ready(self) -> bool:
        return self.image is not None
