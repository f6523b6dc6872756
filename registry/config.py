import os
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv()

# Development-only fallback; its use is logged at startup and refused in production
INSECURE_DEFAULT_SECRET_KEY = 'dev-secret-key-change-in-production'


class Config:
    """Base configuration"""
    SECRET_KEY = os.getenv('SECRET_KEY') or INSECURE_DEFAULT_SECRET_KEY

    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///registry.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
    }

    # Sessions (server-side store, signed id in cookie)
    SESSION_COOKIE_NAME = 'registry_session'
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SECURE = os.getenv('SESSION_COOKIE_SECURE', 'false').lower() == 'true'  # set to true behind HTTPS
    SESSION_COOKIE_SAMESITE = 'Lax'
    PERMANENT_SESSION_LIFETIME = timedelta(hours=24)
    SESSION_CHECK_PERIOD = timedelta(hours=24)  # prune expired sessions once a day

    # Patient identifiers
    PATIENT_ID_PREFIX = os.getenv('PATIENT_ID_PREFIX', 'RH')

    # Celery Configuration
    CELERY_BROKER_URL = os.getenv('REDIS_URL', 'redis://localhost:6379/0')
    CELERY_RESULT_BACKEND = os.getenv('REDIS_URL', 'redis://localhost:6379/0')
    CELERY_ACCEPT_CONTENT = ['json']
    CELERY_TASK_SERIALIZER = 'json'
    CELERY_RESULT_SERIALIZER = 'json'
    CELERY_TIMEZONE = 'UTC'
    CELERY_ENABLE_UTC = True

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_FILE = os.getenv('LOG_FILE', 'logs/app.log')

    # Seed the vaccine catalog on startup when empty
    SEED_VACCINES = os.getenv('SEED_VACCINES', 'true').lower() == 'true'


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False

    # Ensure SECRET_KEY is set
    SECRET_KEY = os.getenv('SECRET_KEY')

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'WARNING')

    @classmethod
    def validate(cls):
        if not cls.SECRET_KEY or cls.SECRET_KEY == INSECURE_DEFAULT_SECRET_KEY:
            raise ValueError("SECRET_KEY environment variable must be set in production and must not be the default value")


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    DEBUG = True
    SECRET_KEY = 'testing-secret-key'
    SQLALCHEMY_DATABASE_URI = os.getenv('TEST_DATABASE_URL', 'sqlite:///:memory:')
    SQLALCHEMY_ENGINE_OPTIONS = {}
    SEED_VACCINES = False
    BCRYPT_LOG_ROUNDS = 4
    CELERY_BROKER_URL = 'memory://'
    CELERY_RESULT_BACKEND = 'cache+memory://'


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def get_config():
    """Get configuration based on FLASK_ENV"""
    env = os.getenv('FLASK_ENV', 'development')
    return config.get(env, config['default'])
