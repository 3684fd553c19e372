import os

class Config:
    """Base configuration"""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'sketch_simulator_secret_change_in_production'
    DEBUG = False
    TESTING = False

    # Sketch host settings
    WINDOW_SIZE = (1024, 768)
    TARGET_FPS = 30
    FRAME_FORMAT = 'PNG'
    DEFAULT_SKETCH = 'click_circle'
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG').upper()

class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    FRAME_FORMAT = 'JPEG'

    def __init__(self):
        if not os.environ.get('SECRET_KEY'):
            raise ValueError("SECRET_KEY environment variable must be set in production")
        self.SECRET_KEY = os.environ.get('SECRET_KEY')

class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    DEBUG = True
    WINDOW_SIZE = (320, 240)

config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
