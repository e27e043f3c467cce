"""Configuration module for Flask application."""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """Base configuration class."""

    # Flask
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('FLASK_DEBUG', '0') == '1'
    ENV = os.getenv('FLASK_ENV', 'development')

    # Session Configuration
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = os.getenv('SESSION_COOKIE_SAMESITE', 'Lax')
    PERMANENT_SESSION_LIFETIME = 86400  # 24 hours

    # Login gate (single local operator)
    APP_USERNAME = os.getenv('APP_USERNAME', 'sistema')
    APP_PASSWORD = os.getenv('APP_PASSWORD', 'sistema')
    SESSION_AUTH_KEY = os.getenv('SESSION_AUTH_KEY', 'authenticated')

    # Password confirmation for destructive admin actions (store reset)
    ADMIN_PASSWORD = os.getenv('ADMIN_PASSWORD', 'admin')

    # Database - local SQLite file unless DATABASE_URL says otherwise
    DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///comerciantes.db')

    # SQLAlchemy
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_ECHO = os.getenv('SQLALCHEMY_ECHO', '0') == '1'

    # Stock
    MIN_STOCK_QTY = int(os.getenv('MIN_STOCK_QTY', '3'))
    ALLOW_NEGATIVE_STOCK = os.getenv('ALLOW_NEGATIVE_STOCK', 'false').lower() == 'true'

    # Sales
    DEFAULT_CLIENT_NAME = os.getenv('DEFAULT_CLIENT_NAME', 'Cliente não identificado')

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')


class TestingConfig(Config):
    """In-memory store for the test suite."""

    TESTING = True
    SECRET_KEY = 'test-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ECHO = False
    ALLOW_NEGATIVE_STOCK = False
    LOG_LEVEL = 'WARNING'
