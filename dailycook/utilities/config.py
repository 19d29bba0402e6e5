"""Configuration management for the DailyCook planning core."""
import os
from typing import Final
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# AI price estimation (secondary price source)
OPENAI_API_KEY: Final[str] = os.getenv('OPENAI_API_KEY', '')
OPENAI_MODEL: Final[str] = os.getenv('OPENAI_MODEL', 'gpt-4o-mini')

# Market scraping (primary price source)
PRICE_SCRAPER_ENABLED: Final[bool] = os.getenv('PRICE_SCRAPER_ENABLED', 'True').lower() == 'true'
PRICE_SCRAPER_BASE_URL: Final[str] = os.getenv('PRICE_SCRAPER_BASE_URL', 'https://www.bachhoaxanh.com')

# Price refresh behaviour
PRICE_LOOKUP_TIMEOUT: Final[float] = float(os.getenv('PRICE_LOOKUP_TIMEOUT', '30'))
PRICE_LOOKUP_DELAY: Final[float] = float(os.getenv('PRICE_LOOKUP_DELAY', '2'))
PRICE_REFRESH_HOUR: Final[int] = int(os.getenv('PRICE_REFRESH_HOUR', '6'))
PRICE_REFRESH_SCHEDULED: Final[bool] = os.getenv('PRICE_REFRESH_SCHEDULED', 'False').lower() == 'true'
APP_TIMEZONE: Final[str] = os.getenv('APP_TIMEZONE', 'Asia/Ho_Chi_Minh')
DEFAULT_CURRENCY: Final[str] = os.getenv('DEFAULT_CURRENCY', 'VND')

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'DEBUG' if DEBUG else 'INFO')

# File Paths
BASE_DIR: Final[Path] = Path(__file__).parent.parent
DATA_DIR: Final[Path] = Path(os.getenv('DAILYCOOK_DATA_DIR', str(BASE_DIR / 'data')))
