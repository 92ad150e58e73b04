import queue
import random
import sys
import threading
import time
from enum import Enum


class Level(Enum):
    INFO = 0
    WARN = 1
    ERR = 2
    DBUG = 3


# DBUG keeps its wire value 3 but is the least severe
SEVERITY = {Level.DBUG: 0, Level.INFO: 1, Level.WARN: 2, Level.ERR: 3}


class Context(threading.local):
    def __init__(self):
        super().__init__()
        self.trace_id = 0
        self.span_id = 0
        self.tags = ""
        self.sample = True


ctx = Context()


def gen_id():
    return random.getrandbits(64)


def format_line(level: Level, msg: str, now_ns: int, trace_id=0, span_id=0, tags="") -> str:
    return f"{now_ns:016x} {trace_id:016x} {span_id:016x} {level.value} [{tags or '-'}] {msg}\n"


class Logger:
    _instance = None
    _lock = threading.Lock()

    @classmethod
    def get(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = Logger()
        return cls._instance

    def __init__(self):
        self.buffer = queue.Queue(maxsize=8192)
        self.running = True
        self.file = None
        self.echo = False
        self.min_level = Level.INFO
        self.sample_rate = 1.0
        self.worker = threading.Thread(target=self.process, daemon=True)
        self.worker.start()

    def _emit(self, line):
        if self.file:
            self.file.write(line)
        if self.echo:
            sys.stderr.write(line)

    def process(self):
        while self.running:
            try:
                line = self.buffer.get(timeout=0.1)
            except queue.Empty:
                continue
            self._emit(line)
            if self.file and self.buffer.empty():
                self.file.flush()
            self.buffer.task_done()

        while True:
            try:
                self._emit(self.buffer.get_nowait())
            except queue.Empty:
                break
        if self.file:
            self.file.flush()

    def open(self, path):
        self.file = open(path, "a")

    def set_sampling(self, rate):
        self.sample_rate = rate

    def should_sample(self):
        return random.random() <= self.sample_rate

    def enabled(self, level: Level) -> bool:
        return SEVERITY[level] >= SEVERITY[self.min_level]

    def write(self, level, msg):
        if not self.enabled(level):
            return
        if not getattr(ctx, "sample", True) and level != Level.ERR:
            return

        line = format_line(
            level,
            msg,
            time.time_ns(),
            getattr(ctx, "trace_id", 0),
            getattr(ctx, "span_id", 0),
            getattr(ctx, "tags", ""),
        )
        if not self.buffer.full():
            self.buffer.put(line)

    def close(self):
        self.running = False
        self.worker.join()
        if self.file:
            self.file.close()
            self.file = None


class Span:
    def __init__(self, name):
        self.name = name
        self.prev_trace_id = getattr(ctx, "trace_id", 0)
        self.prev_span_id = getattr(ctx, "span_id", 0)
        self.prev_tags = getattr(ctx, "tags", "")
        self.prev_sample = getattr(ctx, "sample", True)

    def __enter__(self):
        if getattr(ctx, "trace_id", 0) == 0:
            ctx.trace_id = gen_id()
            ctx.sample = Logger.get().should_sample()
        ctx.span_id = gen_id()
        Logger.get().write(Level.DBUG, f"> {self.name}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            Logger.get().write(Level.ERR, f"! {self.name}: {exc_type.__name__}: {exc_val}")
        Logger.get().write(Level.DBUG, f"< {self.name}")
        ctx.trace_id = self.prev_trace_id
        ctx.span_id = self.prev_span_id
        ctx.tags = self.prev_tags
        ctx.sample = self.prev_sample


def add_tag(key, value):
    k = str(key).replace(" ", "_").replace(":", "_")
    v = str(value).replace(" ", "_").replace(":", "_")
    ctx.tags = getattr(ctx, "tags", "") + f"{k}:{v};"


def init(path, echo=False):
    log = Logger.get()
    log.open(path)
    log.echo = echo


def level(lvl: Level):
    Logger.get().min_level = lvl


def sample(rate):
    Logger.get().set_sampling(rate)


def close():
    Logger.get().close()


def debug(msg):
    Logger.get().write(Level.DBUG, msg)


def info(msg):
    Logger.get().write(Level.INFO, msg)


def warn(msg):
    Logger.get().write(Level.WARN, msg)


def err(msg):
    Logger.get().write(Level.ERR, msg)


def tag(k, v):
    add_tag(k, v)
