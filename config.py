"""
Application Configuration

Centralizes all Flask and ledger configuration settings.
"""

import os

import constants

# Base directory of the application
BASE_DIR = os.path.dirname(os.path.abspath(__file__))


class Config:
    """Base configuration class."""

    # Flask settings
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-only-change-in-production')

    # SQLAlchemy settings
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///restaurant.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Billing
    DEFAULT_TAX_RATE = float(os.environ.get('DEFAULT_TAX_RATE', constants.DEFAULT_TAX_RATE))  # percent
    DEFAULT_PAYMENT_TERMS = os.environ.get('DEFAULT_PAYMENT_TERMS', constants.DEFAULT_PAYMENT_TERMS)
    LATE_FEE_PERCENTAGE = float(os.environ.get('LATE_FEE_PERCENTAGE', constants.LATE_FEE_PERCENTAGE))  # percent per 30 days


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
    LOG_LEVEL = 'WARNING'


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
