from celery import Celery
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_bcrypt import Bcrypt

from .guard import SessionGuard

# Shared extension instances
db = SQLAlchemy()
migrate = Migrate()
bcrypt = Bcrypt()
guard = SessionGuard()
celery = Celery(__name__)
