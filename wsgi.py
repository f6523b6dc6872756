"""
WSGI entry point for production deployment
Used by Gunicorn, uWSGI, and other WSGI servers:
    gunicorn wsgi:application

Defaults to the production config, which refuses to start without SECRET_KEY.
"""
import os

from registry import create_app

application = app = create_app(os.getenv('FLASK_ENV', 'production'))
