import pytest


class RecordingSurface:
    """Stands in for a drawing context, remembers every drawImage call."""

    def __init__(self):
        self.calls = []

    def drawImage(self, image, x, y):
        self.calls.append((image.src, x, y))

    def clear(self):
        self.calls.clear()


@pytest.fixture
def surface():
    return RecordingSurface()
