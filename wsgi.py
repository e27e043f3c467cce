"""WSGI entry point for Gunicorn."""
from comerciante import create_app

app = create_app()
