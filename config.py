"""
Application Configuration

Centralizes all Flask and application configuration settings.
"""

import os

# Base directory of the application
BASE_DIR = os.path.dirname(os.path.abspath(__file__))


def env_bool(name, default):
    """Read a true/false environment variable."""
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Base configuration class."""

    # Flask settings
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-only-change-in-production')

    # SQLAlchemy settings
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///pantry.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Isolation level for confirmed recipe use (read-then-write)
    INVENTORY_ISOLATION_LEVEL = os.environ.get('INVENTORY_ISOLATION_LEVEL', 'SERIALIZABLE')

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Matching policy
    MATCH_INCOMPARABLE_PERCENTAGE = int(os.environ.get('MATCH_INCOMPARABLE_PERCENTAGE', '50'))
    MATCH_SCORE_CAP = env_bool('MATCH_SCORE_CAP', False)
    DEDUCT_UNCONVERTIBLE_RAW = env_bool('DEDUCT_UNCONVERTIBLE_RAW', True)


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'


# Configuration dictionary for easy access
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def get_config(env=None):
    """Get configuration based on environment."""
    if env is None:
        env = os.environ.get('FLASK_ENV', 'development')
    return config.get(env, config['default'])
