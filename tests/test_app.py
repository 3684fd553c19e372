import base64
import threading
import time
from io import BytesIO

import pytest
from PIL import Image

from sketch_sim import app as server

RED = (255, 100, 100)


@pytest.fixture
def flask_app():
    return server.create_app('testing')


@pytest.fixture
def client(flask_app):
    client = server.socketio.test_client(flask_app)
    client.get_received()  # drop the connect status
    yield client
    client.emit('stop_rendering')
    client.disconnect()


def events(client, name):
    return [e['args'][0] for e in client.get_received() if e['name'] == name]


def render_threads():
    return [t for t in threading.enumerate() if t.name == 'render-loop' and t.is_alive()]


def frame_image(frame):
    payload = frame['image'].split(',', 1)[1]
    return Image.open(BytesIO(base64.b64decode(payload))).convert('RGB')


def test_index_page(flask_app):
    response = flask_app.test_client().get('/')

    assert response.status_code == 200
    assert b'id="frame"' in response.data
    assert b'width="320"' in response.data


def test_connect_sends_status(flask_app):
    client = server.socketio.test_client(flask_app)
    statuses = events(client, 'status')
    client.disconnect()

    assert statuses == [{'message': 'Connected to sketch simulator', 'type': 'success'}]


def test_default_sketch_is_loaded(flask_app):
    assert server.engine.etc.sketch == 'click_circle'
    assert server.engine.size == (320, 240)


def test_mouse_press_returns_frame_with_circle(client):
    client.emit('mouse_press', {'x': 50, 'y': 80, 'button': 0})
    frames = events(client, 'frame')

    assert len(frames) == 1
    image = frame_image(frames[0])
    assert image.getpixel((50, 80)) == RED
    assert image.getpixel((200, 200)) == (0, 0, 0)


def test_mouse_press_button_is_optional(client):
    client.emit('mouse_press', {'x': 10.5, 'y': 20.25})

    assert len(events(client, 'frame')) == 1
    assert server.engine.current_sketch.state.circle_x == 10.5


@pytest.mark.parametrize("payload", [
    {'x': 'a', 'y': 1},
    {'x': 1},
    {'x': True, 'y': 1},
    [1, 2],
])
def test_bad_mouse_press_is_rejected(client, payload):
    client.emit('mouse_press', payload)
    received = client.get_received()

    assert [e['name'] for e in received] == ['status']
    assert received[0]['args'][0]['type'] == 'error'
    assert server.engine.current_sketch.state.show_circle is False


def test_get_sketches(client):
    client.emit('get_sketches')
    listing = events(client, 'sketches_list')

    assert {'name': 'click_circle', 'path': 'click_circle'} in listing[0]['sketches']


def test_load_sketch_sends_status_and_frame(client):
    client.emit('mouse_press', {'x': 50, 'y': 80})
    client.get_received()

    client.emit('load_sketch', {'path': 'click_circle'})
    received = client.get_received()

    assert [e['name'] for e in received] == ['status', 'frame']
    assert received[0]['args'][0]['type'] == 'success'
    assert frame_image(received[1]['args'][0]).getpixel((50, 80)) == (0, 0, 0)


def test_load_sketch_errors(client):
    client.emit('load_sketch', {})
    client.emit('load_sketch', {'path': 'does_not_exist'})
    statuses = events(client, 'status')

    assert statuses[0] == {'message': 'No sketch path provided', 'type': 'error'}
    assert statuses[1]['type'] == 'error'
    assert 'main.py not found' in statuses[1]['message']


def test_get_status(client):
    client.emit('get_status')
    status = events(client, 'engine_status')[0]

    assert status['sketch_loaded'] is True
    assert status['current_sketch'] == 'click_circle'


def test_start_and_stop_rendering(client):
    client.emit('start_rendering')
    client.emit('start_rendering')
    client.emit('stop_rendering')
    messages = [s['message'] for s in events(client, 'status')]

    assert messages == ['Rendering started', 'Already running', 'Rendering stopped']
    assert server.is_rendering() is False
    assert render_threads() == []


def test_quick_restart_keeps_one_render_loop(client):
    client.emit('start_rendering')
    time.sleep(0.05)
    client.emit('stop_rendering')
    client.emit('start_rendering')

    assert len(render_threads()) == 1
    assert server.is_rendering() is True

    client.emit('stop_rendering')
    assert render_threads() == []
