import math
from typing import Callable

from spriteanim.image import ImageHandle
from spriteanim.timeline import FrameSpec


class FrameSequencer:
    """Picks which frame of a sprite to draw for a given elapsed time."""

    def __init__(self, spec: str | FrameSpec, loader: Callable[[str], ImageHandle] = ImageHandle):
        self.spec = FrameSpec.parse(spec)
        self.interval = self.spec.interval
        self.images = [loader(src) for src in self.spec.frames]

    def __len__(self):
        return len(self.images)

    def frame_index(self, elapsed: float) -> int:
        if self.interval == 0:
            return 0
        # floor toward -inf and Python's modulo keep negative times in range
        return math.floor(elapsed / self.interval) % len(self.images)

    def draw(self, surface, elapsed: float, x: float, y: float):
        surface.drawImage(self.images[self.frame_index(elapsed)], x, y)
