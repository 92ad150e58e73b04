import skia

from spriteanim.image import ImageHandle


class SkiaSurface:
    """Drawing surface over a skia canvas, top-left anchored."""

    def __init__(self, canvas: skia.Canvas):
        self.canvas = canvas
        self.paint = skia.Paint(AntiAlias=True)

    def drawImage(self, handle: ImageHandle, x: float, y: float):
        if not handle.ready:
            return
        self.canvas.drawImage(handle.image, x, y, skia.SamplingOptions(), self.paint)
