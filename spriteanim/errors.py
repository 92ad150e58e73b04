class ConfigError(ValueError):
    """A timeline, event or frame spec that cannot be played."""

    def __init__(self, msg: str, timeline_id: str | None = None, event_index: int | None = None):
        self.timeline_id = timeline_id
        self.event_index = event_index
        where = ""
        if timeline_id is not None:
            where = f"timeline '{timeline_id}'"
            if event_index is not None:
                where += f" event #{event_index}"
            where += ": "
        super().__init__(where + msg)
