from lib import tlog
from lib.tlog import Level, Logger, format_line


class TestFormatLine:
    def test_layout(self):
        line = format_line(Level.WARN, "Stage: hello", 255, trace_id=1, span_id=2, tags="k:v;")
        assert line == "00000000000000ff 0000000000000001 0000000000000002 1 [k:v;] Stage: hello\n"

    def test_empty_tags_render_as_dash(self):
        assert " [-] " in format_line(Level.INFO, "x", 0)


class TestLevels:
    def test_debug_filtered_by_default_threshold(self):
        log = Logger.get()
        prev = log.min_level
        try:
            tlog.level(Level.INFO)
            assert not log.enabled(Level.DBUG)
            assert log.enabled(Level.INFO)
            assert log.enabled(Level.ERR)
            tlog.level(Level.DBUG)
            assert log.enabled(Level.DBUG)
        finally:
            log.min_level = prev

    def test_tags_are_sanitized(self):
        prev = tlog.ctx.tags
        try:
            tlog.ctx.tags = ""
            tlog.tag("timeline id", "hero:1")
            assert tlog.ctx.tags == "timeline_id:hero_1;"
        finally:
            tlog.ctx.tags = prev
