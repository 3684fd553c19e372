import os

import pytest

from sketch_sim.sketch_engine import SketchEngine

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
CLICK_CIRCLE = os.path.join(PROJECT_ROOT, 'sketches', 'click_circle')


@pytest.fixture
def engine():
    """Engine with the click circle sketch loaded"""
    engine = SketchEngine(size=(320, 240))
    success, message = engine.load_sketch(CLICK_CIRCLE)
    assert success, message
    return engine


@pytest.fixture
def make_sketch(tmp_path):
    """Write a throwaway sketch directory and return its path"""
    def _make(source, name='scratch'):
        sketch_dir = tmp_path / name
        sketch_dir.mkdir()
        (sketch_dir / 'main.py').write_text(source, encoding='utf-8')
        return str(sketch_dir)
    return _make


@pytest.fixture
def click_circle_path():
    return CLICK_CIRCLE
