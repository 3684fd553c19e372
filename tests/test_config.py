import pytest

from config import config, ProductionConfig


def test_production_requires_secret_key(monkeypatch):
    monkeypatch.delenv('SECRET_KEY', raising=False)

    with pytest.raises(ValueError, match="SECRET_KEY"):
        ProductionConfig()


def test_production_reads_secret_key(monkeypatch):
    monkeypatch.setenv('SECRET_KEY', 's3cret')

    assert ProductionConfig().SECRET_KEY == 's3cret'


def test_config_names():
    assert config['default'] is config['development']
    assert config['testing'].TESTING is True
    assert config['testing'].WINDOW_SIZE == (320, 240)
