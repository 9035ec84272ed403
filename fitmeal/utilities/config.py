"""Configuration management for the FitMeal application."""
import logging
import os
from typing import Final
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).parent.parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'INFO').upper()

# Authentication
JWT_SECRET: Final[str] = os.getenv('JWT_SECRET', 'dev-secret-change-me')
JWT_ALGORITHM: Final[str] = os.getenv('JWT_ALGORITHM', 'HS256')
ACCESS_TOKEN_TTL_MINUTES: Final[int] = int(os.getenv('ACCESS_TOKEN_TTL_MINUTES', '15'))
REFRESH_TOKEN_TTL_DAYS: Final[int] = int(os.getenv('REFRESH_TOKEN_TTL_DAYS', '30'))
COOKIE_SECURE: Final[bool] = os.getenv('COOKIE_SECURE', 'False').lower() == 'true'
LOGIN_MAX_ATTEMPTS: Final[int] = int(os.getenv('LOGIN_MAX_ATTEMPTS', '5'))
LOGIN_LOCKOUT_MINUTES: Final[int] = int(os.getenv('LOGIN_LOCKOUT_MINUTES', '15'))

# AI protocol generation (optional)
OPENAI_API_KEY: Final[str] = os.getenv('OPENAI_API_KEY', '')
OPENAI_MODEL: Final[str] = os.getenv('OPENAI_MODEL', 'gpt-4o-mini')

# Client defaults
API_BASE_URL: Final[str] = os.getenv('API_BASE_URL', 'http://localhost:8000')

# File Paths
BASE_DIR: Final[Path] = Path(__file__).parent.parent
DATA_DIR: Final[Path] = Path(os.getenv('DATA_DIR', str(BASE_DIR / 'data')))
UPLOAD_DIR: Final[Path] = Path(os.getenv('UPLOAD_DIR', str(BASE_DIR / 'uploads')))


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Basic process-wide logging setup used by the server entry point."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
