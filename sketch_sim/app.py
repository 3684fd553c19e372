"""
Flask app for the Click Circle sketch simulator
"""

import os
import time
import logging
import threading
from flask import Flask, render_template, request
from flask_socketio import SocketIO, emit

from config import config
from .sketch_engine import SketchEngine, list_sketches

logger = logging.getLogger(__name__)

# Get project root directory (parent of sketch_sim/)
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
SKETCHES_DIR = os.path.join(PROJECT_ROOT, 'sketches')

app = Flask(__name__,
    template_folder='../frontend/templates',
    static_folder='../frontend/static'
)

# Configure app based on environment
config_name = os.environ.get('FLASK_ENV', 'development')
app.config.from_object(config[config_name]())

socketio = SocketIO(app, cors_allowed_origins="*", async_mode='threading')

# Render loop thread and the event that stops it
render_thread = None
stop_event = None


def resolve_sketch_path(sketch_path):
    """Relative sketch paths are looked up under sketches/"""
    if not os.path.isabs(sketch_path):
        sketch_path = os.path.join(SKETCHES_DIR, sketch_path)
    return sketch_path


def build_engine(app_config):
    """Create the engine from config and load the default sketch"""
    new_engine = SketchEngine(
        size=app_config['WINDOW_SIZE'],
        fps=app_config['TARGET_FPS'],
        frame_format=app_config['FRAME_FORMAT'],
    )
    default_sketch = app_config.get('DEFAULT_SKETCH')
    if default_sketch:
        success, message = new_engine.load_sketch(resolve_sketch_path(default_sketch))
        if not success:
            logger.warning("Default sketch '%s' not loaded: %s", default_sketch, message)
    return new_engine


# Global engine instance, rebuilt by create_app()
engine = build_engine(app.config)


@app.route('/')
def index():
    """Serve the viewer page"""
    width, height = engine.size
    return render_template('index.html', width=width, height=height)


@socketio.on('connect')
def handle_connect():
    """Handle client connection"""
    logger.info("Client connected: %s", request.sid)
    emit('status', {'message': 'Connected to sketch simulator', 'type': 'success'})


@socketio.on('disconnect')
def handle_disconnect():
    """Handle client disconnection"""
    logger.info("Client disconnected: %s", request.sid)


@socketio.on('mouse_press')
def handle_mouse_press(data):
    """Forward a mouse press from the viewer to the sketch"""
    if not isinstance(data, dict):
        emit('status', {'message': 'Invalid mouse event', 'type': 'error'})
        return

    x = data.get('x')
    y = data.get('y')
    button = data.get('button', 0)

    if not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in (x, y)):
        emit('status', {'message': 'Mouse event needs numeric x and y', 'type': 'error'})
        return

    success, error = engine.mouse_press(x, y, button)
    if not success:
        emit('status', {'message': error, 'type': 'error'})
        return

    # Show the result right away, even when the render loop is stopped
    image_data, error = engine.render_frame()
    if image_data:
        emit('frame', {'image': image_data})
    elif error:
        emit('status', {'message': error, 'type': 'error'})


@socketio.on('load_sketch')
def handle_load_sketch(data):
    """Load a sketch by directory name or absolute path"""
    try:
        sketch_path = (data or {}).get('path')
        if not sketch_path:
            emit('status', {'message': 'No sketch path provided', 'type': 'error'})
            return

        sketch_path = resolve_sketch_path(sketch_path)
        logger.info("Loading sketch: %s", sketch_path)
        success, message = engine.load_sketch(sketch_path)

        if success:
            emit('status', {'message': message, 'type': 'success'})
            # Send an initial frame so the user sees the window immediately
            image_data, error = engine.render_frame()
            if image_data:
                emit('frame', {'image': image_data})
        else:
            emit('status', {'message': message, 'type': 'error'})

    except Exception as e:
        logger.exception("Error loading sketch")
        emit('status', {'message': f'Error loading sketch: {str(e)}', 'type': 'error'})


@socketio.on('get_sketches')
def handle_get_sketches():
    """Get list of available sketches"""
    if not os.path.exists(SKETCHES_DIR):
        emit('sketches_list', {'sketches': [], 'message': 'Sketches directory not found'})
        return

    emit('sketches_list', {'sketches': list_sketches(SKETCHES_DIR)})


@socketio.on('get_status')
def handle_get_status():
    """Report engine state"""
    emit('engine_status', engine.get_status())


def is_rendering():
    """True while a render loop is running and has not been asked to stop"""
    return (render_thread is not None and render_thread.is_alive()
            and not stop_event.is_set())


def stop_render_loop(timeout=2.0):
    """Signal the current render loop and wait for its thread to exit"""
    global render_thread

    if stop_event is not None:
        stop_event.set()
    if render_thread is not None:
        render_thread.join(timeout)
        if render_thread.is_alive():
            logger.warning("Render loop did not stop within %.1fs", timeout)
    render_thread = None


@socketio.on('start_rendering')
def handle_start_rendering():
    """Start the rendering loop"""
    global render_thread, stop_event

    if is_rendering():
        emit('status', {'message': 'Already running', 'type': 'info'})
        return

    # A loop that was just told to stop may still be finishing its frame
    stop_render_loop()

    stop_event = threading.Event()
    render_thread = threading.Thread(target=render_loop, args=(stop_event,), name='render-loop')
    render_thread.daemon = True
    render_thread.start()

    emit('status', {'message': 'Rendering started', 'type': 'success'})


@socketio.on('stop_rendering')
def handle_stop_rendering():
    """Stop the rendering loop"""
    stop_render_loop()
    emit('status', {'message': 'Rendering stopped', 'type': 'info'})


def render_loop(stop):
    """Main rendering loop that runs in a separate thread until stop is set"""
    target_fps = app.config['TARGET_FPS']
    frame_time = 1.0 / target_fps
    frame_count = 0

    logger.info("Render loop started at %d fps", target_fps)

    while not stop.is_set():
        start_time = time.time()

        image_data, error = engine.render_frame()

        if image_data:
            socketio.emit('frame', {'image': image_data})
            frame_count += 1
            if frame_count % target_fps == 0:
                logger.debug("Rendered %d frames", frame_count)
        elif error:
            logger.error("Render error: %s", error)
            socketio.emit('status', {'message': error, 'type': 'error'})
            stop.set()

        # Maintain target FPS; wakes early when stopped
        elapsed = time.time() - start_time
        stop.wait(max(0, frame_time - elapsed))

    logger.info("Render loop stopped")


def create_app(config_name=None):
    """Application factory pattern"""
    global engine

    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    app.config.from_object(config[config_name]())
    stop_render_loop()
    engine = build_engine(app.config)
    return app


def main():
    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format="%(asctime)s [%(threadName)s] %(name)s - %(levelname)s - %(message)s",
    )
    logger.info("Starting sketch simulator...")

    port = int(os.environ.get('PORT', 5001))
    host = os.environ.get('HOST', '0.0.0.0')

    if app.config['DEBUG']:
        logger.info("Development mode: http://localhost:%d", port)
        socketio.run(app, host=host, port=port, debug=True, allow_unsafe_werkzeug=True)
    else:
        logger.info("Production mode: http://%s:%d", host, port)
        socketio.run(app, host=host, port=port, debug=False)


if __name__ == '__main__':
    main()
