"""
Environment-aware configuration.
Values come from the process environment (.env is loaded if present).
Auth keys are validated once at startup by utils.settings.AuthSettings.
"""
import os
from dotenv import load_dotenv

load_dotenv()  # Read .env if present


def env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")  # Set a strong key in production
    DEBUG = False
    TESTING = False
    APP_ENV = os.getenv("APP_ENV", "dev")
    # CORS: in dev we usually allow '*', in prod supply a comma-separated list in env
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///blog.db")
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO")

    # JWT: no default secret, a missing one stops the app at startup
    JWT_SECRET = os.getenv("JWT_SECRET")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRY_MINUTES = os.getenv("ACCESS_TOKEN_EXPIRY_MINUTES", "15")
    REFRESH_TOKEN_EXPIRY_DAYS = os.getenv("REFRESH_TOKEN_EXPIRY_DAYS", "7")

    PASSWORD_MIN_LENGTH = os.getenv("PASSWORD_MIN_LENGTH", "8")
    USERNAME_MIN_LENGTH = os.getenv("USERNAME_MIN_LENGTH", "3")
    USERNAME_MAX_LENGTH = os.getenv("USERNAME_MAX_LENGTH", "30")

    # argon2-cffi defaults apply when unset
    ARGON2_TIME_COST = os.getenv("ARGON2_TIME_COST")
    ARGON2_MEMORY_COST = os.getenv("ARGON2_MEMORY_COST")
    ARGON2_PARALLELISM = os.getenv("ARGON2_PARALLELISM")


class DevelopmentConfig(BaseConfig):
    DEBUG = True


class TestingConfig(BaseConfig):
    TESTING = True
    DATABASE_URL = "sqlite://"
    SQLALCHEMY_ECHO = False
    JWT_SECRET = "test-secret-key-with-enough-length-for-hs256"
    JWT_ALGORITHM = "HS256"
    ACCESS_TOKEN_EXPIRY_MINUTES = "15"
    REFRESH_TOKEN_EXPIRY_DAYS = "7"
    LOG_LEVEL = "WARNING"
    # cheap hashing keeps the suite fast
    ARGON2_TIME_COST = "1"
    ARGON2_MEMORY_COST = "1024"
    ARGON2_PARALLELISM = "1"


class ProductionConfig(BaseConfig):
    DEBUG = False


CONFIG_MAP = {
    "dev": DevelopmentConfig,
    "development": DevelopmentConfig,
    "test": TestingConfig,
    "testing": TestingConfig,
    "prod": ProductionConfig,
    "production": ProductionConfig,
}


def get_config(name=None):
    """
    Select config class.
    - A config class is returned as-is.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/test/prod).
    """
    if isinstance(name, type):
        return name
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    return CONFIG_MAP.get(env, DevelopmentConfig)
