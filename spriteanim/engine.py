import time

import glfw
import moderngl
import numpy as np
import skia

from lib import tlog
from spriteanim.component import Component, Event, EventType
from spriteanim.shaders import DEFAULT_FRAG, DEFAULT_VERT


class CoreEngine:
    """Window host: renders components with skia and blits the result through GL."""

    def __init__(self, width=1280, height=720, title="spriteanim"):
        self.width, self.height = width, height
        self.components: list[Component] = []
        self.last_heartbeat = time.perf_counter()
        self.fps = 0.0
        self.window = None
        self.ctx = None
        self.surface = None

        with tlog.Span("engine_startup"):
            tlog.info(f"Initializing engine | Target: {width}x{height}")

            if not glfw.init():
                tlog.err("Critical: GLFW initialization failed")
                raise RuntimeError("GLFW init failed")

            glfw.window_hint(glfw.CONTEXT_VERSION_MAJOR, 3)
            glfw.window_hint(glfw.CONTEXT_VERSION_MINOR, 3)
            glfw.window_hint(glfw.OPENGL_PROFILE, glfw.OPENGL_CORE_PROFILE)

            self.window = glfw.create_window(width, height, title, None, None)
            if not self.window:
                tlog.err("Critical: Window creation failed")
                glfw.terminate()
                raise RuntimeError("Window creation failed")

            glfw.make_context_current(self.window)
            glfw.swap_interval(1)
            glfw.set_key_callback(self.window, self._on_key)
            glfw.set_framebuffer_size_callback(self.window, self._on_resize)

            self.ctx = moderngl.create_context()
            tlog.info(f"GPU: {self.ctx.info['GL_RENDERER']} | OpenGL: {self.ctx.info['GL_VERSION']}")

            with tlog.Span("graphics_pipeline_setup"):
                self.surface = skia.Surface.MakeRasterN32Premul(width, height)
                self._init_blit_pipeline()

            tlog.info("Engine Startup Complete")

    def _init_blit_pipeline(self):
        # skia rows run top-down, GL textures bottom-up
        flip_verts = np.array([-1, -1, 0, 1, 1, -1, 1, 1, -1, 1, 0, 0, 1, 1, 1, 0], dtype="f4")
        self.vbo = self.ctx.buffer(flip_verts)
        self.program = self.ctx.program(vertex_shader=DEFAULT_VERT, fragment_shader=DEFAULT_FRAG)
        self.vao = self.ctx.vertex_array(self.program, [(self.vbo, "2f 2f", "in_pos", "in_uv")])
        self.texture = self.ctx.texture((self.width, self.height), 4)

    def _on_resize(self, window, width, height):
        if width == 0 or height == 0:
            return
        tlog.info(f"Event: Window Resize -> {width}x{height}")
        self.width, self.height = width, height
        self.ctx.viewport = (0, 0, width, height)
        self.surface = skia.Surface.MakeRasterN32Premul(width, height)
        self.texture.release()
        self.texture = self.ctx.texture((width, height), 4)
        self._dispatch_event(Event(EventType.RESIZE, width=width, height=height))

    def _on_key(self, w, k, s, a, m):
        if k == glfw.KEY_ESCAPE and a == glfw.PRESS:
            glfw.set_window_should_close(self.window, True)
            return
        if a == glfw.PRESS:
            self._dispatch_event(Event(EventType.KEY_PRESS, key=k, mods=m))
        elif a == glfw.RELEASE:
            self._dispatch_event(Event(EventType.KEY_RELEASE, key=k, mods=m))

    def _dispatch_event(self, event):
        for comp in reversed(self.components):
            if comp.enabled and comp.on_event(event):
                break

    def _upload_skia_to_texture(self):
        image = self.surface.makeImageSnapshot()
        self.texture.write(image.tobytes())

    def add_component(self, comp: Component):
        with tlog.Span(f"mounting_{comp.name}"):
            comp.on_init(self.surface.getCanvas())
            self.components.append(comp)

    def run_heartbeat(self):
        now = time.perf_counter()
        if now - self.last_heartbeat >= 5.0:
            tlog.info(f"Heartbeat: FPS: {int(self.fps)} | Components: {len(self.components)}")
            self.last_heartbeat = now

    def run(self):
        tlog.info("Entering main loop")
        last_time = time.perf_counter()
        while not glfw.window_should_close(self.window):
            now = time.perf_counter()
            dt = now - last_time
            last_time = now
            self.fps = 1.0 / dt if dt > 0 else 60

            for comp in self.components:
                if comp.enabled:
                    comp.on_update(dt)

            canvas = self.surface.getCanvas()
            canvas.clear(skia.ColorTRANSPARENT)
            for comp in self.components:
                if comp.enabled:
                    comp.on_render_ui(canvas)

            self._upload_skia_to_texture()
            self.ctx.screen.use()
            self.ctx.clear(0, 0, 0, 1)
            self.texture.use(0)
            self.vao.render(moderngl.TRIANGLE_STRIP)

            glfw.swap_buffers(self.window)
            glfw.poll_events()
            self.run_heartbeat()

        for comp in self.components:
            comp.on_destroy()
        glfw.terminate()
        tlog.info("Shutdown")
