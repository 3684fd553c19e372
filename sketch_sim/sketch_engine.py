"""
Sketch execution engine - loads sketch scripts and drives their hooks
"""

import os
import base64
import logging
import threading
import traceback
import importlib.util
from io import BytesIO

from .canvas import Canvas

logger = logging.getLogger(__name__)

DEFAULT_SIZE = (1024, 768)


class SketchContext:
    """Host metadata passed to every hook as 'etc'.

    Sketches read the window size and pointer state from here. A sketch may
    switch off auto_clear to keep drawing between frames.
    """
    def __init__(self, size=DEFAULT_SIZE, fps=30):
        self.xres, self.yres = size
        self.fps = fps
        self.frame_count = 0
        self.sketch = "unknown"

        # Whether the host clears to the background color before every draw
        self.auto_clear = True

        # Last mouse press delivered to the sketch
        self.mouse_x = 0
        self.mouse_y = 0
        self.mouse_button = None


class SketchEngine:
    def __init__(self, size=DEFAULT_SIZE, fps=30, frame_format='PNG'):
        self.size = tuple(size)
        self.frame_format = frame_format.upper()
        self.screen = Canvas(self.size)
        self.etc = SketchContext(self.size, fps)
        self.current_sketch = None
        self.setup_func = None
        self.draw_func = None
        self.mouse_pressed_func = None
        self.is_initialized = False

        # Hooks never overlap: render loop and socket handlers share this
        self._lock = threading.RLock()

    def load_sketch(self, sketch_path):
        """Load a sketch from a directory containing main.py"""
        with self._lock:
            try:
                main_py_path = os.path.join(sketch_path, 'main.py')
                if not os.path.exists(main_py_path):
                    raise FileNotFoundError(f"main.py not found in {sketch_path}")

                sketch_name = os.path.basename(os.path.normpath(sketch_path))

                # Fresh module object per load, so sketch state starts over
                spec = importlib.util.spec_from_file_location(f"sketch_{sketch_name}", main_py_path)
                module = importlib.util.module_from_spec(spec)
                screen = Canvas(self.size)
                etc = SketchContext(self.size, self.etc.fps)
                etc.sketch = sketch_name
                module.screen = screen
                module.etc = etc
                spec.loader.exec_module(module)

                if not callable(getattr(module, 'draw', None)):
                    raise AttributeError("Sketch must have a 'draw' function")

                self.draw_func = module.draw
                self.setup_func = getattr(module, 'setup', None)
                self.mouse_pressed_func = getattr(module, 'mouse_pressed', None)

                self.current_sketch = module
                self.screen = screen
                self.etc = etc
                self.is_initialized = False

                logger.info("Loaded sketch '%s' from %s", sketch_name, main_py_path)
                return True, f"Sketch '{sketch_name}' loaded successfully"

            except Exception as e:
                logger.exception("Failed to load sketch from %s", sketch_path)
                error_msg = f"Error loading sketch: {str(e)}\n{traceback.format_exc()}"
                return False, error_msg

    def _ensure_setup(self):
        """Run the sketch's setup hook once, before any draw or input"""
        if not self.is_initialized:
            if self.setup_func:
                self.setup_func(self.screen, self.etc)
                logger.debug("Ran setup for sketch '%s'", self.etc.sketch)
            self.is_initialized = True

    def render_frame(self):
        """Render one frame and return it as a base64 data URL"""
        with self._lock:
            try:
                if not self.draw_func:
                    return None, "No sketch loaded"

                self._ensure_setup()

                self.screen.begin_frame()
                if self.etc.auto_clear:
                    self.screen.clear()

                self.draw_func(self.screen, self.etc)
                self.etc.frame_count += 1

                return self.encode_frame(), None

            except Exception as e:
                logger.exception("Error rendering frame %d", self.etc.frame_count)
                error_msg = f"Error rendering frame: {str(e)}\n{traceback.format_exc()}"
                return None, error_msg

    def encode_frame(self):
        """Encode the current canvas as a data URL"""
        img = self.screen.get_image()
        buffer = BytesIO()
        if self.frame_format == 'JPEG':
            img.save(buffer, format='JPEG', quality=85)
        else:
            img.save(buffer, format=self.frame_format)
        img_base64 = base64.b64encode(buffer.getvalue()).decode('utf-8')
        return f"data:image/{self.frame_format.lower()};base64,{img_base64}"

    def mouse_press(self, x, y, button=0):
        """Deliver a mouse press in canvas pixel coordinates"""
        with self._lock:
            try:
                if not self.current_sketch:
                    return False, "No sketch loaded"

                self._ensure_setup()

                self.etc.mouse_x = x
                self.etc.mouse_y = y
                self.etc.mouse_button = button

                if self.mouse_pressed_func:
                    self.mouse_pressed_func(x, y, button, self.etc)
                    logger.debug("Mouse press (%s, %s) button %s", x, y, button)
                return True, None

            except Exception as e:
                logger.exception("Error handling mouse press at (%s, %s)", x, y)
                error_msg = f"Error handling mouse press: {str(e)}\n{traceback.format_exc()}"
                return False, error_msg

    def get_status(self):
        """Get current engine status"""
        with self._lock:
            return {
                'sketch_loaded': self.current_sketch is not None,
                'current_sketch': self.etc.sketch,
                'resolution': self.size,
                'frame_count': self.etc.frame_count,
                'auto_clear': self.etc.auto_clear,
            }


def list_sketches(sketches_dir):
    """Sketch directories under sketches_dir that contain a main.py"""
    if not os.path.isdir(sketches_dir):
        return []

    sketches = []
    for item in sorted(os.listdir(sketches_dir)):
        sketch_path = os.path.join(sketches_dir, item)
        if os.path.isdir(sketch_path) and os.path.exists(os.path.join(sketch_path, 'main.py')):
            sketches.append({
                'name': item,
                'path': item
            })
    return sketches
