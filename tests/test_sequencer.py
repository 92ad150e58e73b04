import pytest

from spriteanim.errors import ConfigError
from spriteanim.image import ImageHandle
from spriteanim.sequencer import FrameSequencer
from spriteanim.timeline import FrameSpec


# ---------------------------------------------------------------------------
# FrameSpec parsing
# ---------------------------------------------------------------------------


class TestFrameSpecParse:
    def test_single_source_has_zero_interval(self):
        spec = FrameSpec.parse("hero.png")
        assert spec.frames == ("hero.png",)
        assert spec.interval == 0

    def test_multi_frame_list(self):
        spec = FrameSpec.parse("a.png,b.png,c.png,120")
        assert spec.frames == ("a.png", "b.png", "c.png")
        assert spec.interval == pytest.approx(120.0)

    def test_whitespace_is_stripped(self):
        spec = FrameSpec.parse(" a.png , b.png , 50 ")
        assert spec.frames == ("a.png", "b.png")
        assert spec.interval == pytest.approx(50.0)

    def test_one_frame_with_interval(self):
        spec = FrameSpec.parse("a.png,80")
        assert spec.frames == ("a.png",)

    @pytest.mark.parametrize("src", ["a.png,b.png", "a.png,b.png,fast", "a.png,,100", ",100", "a.png,-5", "", None, 7])
    def test_malformed_src_raises(self, src):
        with pytest.raises(ConfigError):
            FrameSpec.parse(src)

    def test_passes_through_typed_spec(self):
        spec = FrameSpec(("x.png",), 10.0)
        assert FrameSpec.parse(spec) is spec


# ---------------------------------------------------------------------------
# FrameSequencer frame selection
# ---------------------------------------------------------------------------


class TestFrameSequencer:
    def test_loader_called_once_per_frame(self):
        loaded = []

        def loader(src):
            loaded.append(src)
            return ImageHandle(src)

        seq = FrameSequencer("a.png,b.png,100", loader)
        assert loaded == ["a.png", "b.png"]
        assert len(seq) == 2

    @pytest.mark.parametrize("elapsed", [0, 1, 99, 1000, 123456.7, -50])
    def test_zero_interval_always_frame_zero(self, elapsed):
        seq = FrameSequencer("a.png")
        assert seq.frame_index(elapsed) == 0

    def test_cycles_through_frames(self):
        seq = FrameSequencer("a.png,b.png,c.png,100")
        indices = [seq.frame_index(t) for t in range(0, 700, 100)]
        assert indices == [0, 1, 2, 0, 1, 2, 0]

    def test_frame_held_for_whole_interval(self):
        seq = FrameSequencer("a.png,b.png,100")
        assert seq.frame_index(0) == 0
        assert seq.frame_index(99.9) == 0
        assert seq.frame_index(100) == 1

    def test_negative_elapsed_floors_toward_negative_infinity(self):
        seq = FrameSequencer("a.png,b.png,c.png,100")
        # floor(-50 / 100) = -1, -1 mod 3 = 2
        assert seq.frame_index(-50) == 2
        assert seq.frame_index(-150) == 1

    def test_draw_uses_selected_frame(self, surface):
        seq = FrameSequencer("a.png,b.png,100")
        seq.draw(surface, 150, 3, 4)
        assert surface.calls == [("b.png", 3, 4)]
