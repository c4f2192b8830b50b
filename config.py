# config.py
# Flask application configuration

import os


class Config:
    BASE_DIR = os.path.abspath(os.path.dirname(__file__))
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'DATABASE_URL',
        f'sqlite:///{os.path.join(BASE_DIR, "instance", "judging.db")}'
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = os.environ.get('SECRET_KEY', 'change-me')  # must match the auth service key
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # --- Judging ---
    SCORE_MIN = 0.0
    SCORE_MAX = 10.0
    # Decimal places used for stored scores and for tie grouping
    SCORE_PRECISION = 2
    MAX_NOTES_LENGTH = 2000
    # (name, weight); display order follows list order
    DEFAULT_CRITERIA = (
        ('Innovation', 5),
        ('Technical', 4),
        ('Impact', 3),
        ('Design', 2),
        ('Presentation', 1),
    )


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SECRET_KEY = 'test'
    LOG_LEVEL = 'WARNING'
