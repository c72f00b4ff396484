"""Configuration management for the MealPrep planner."""
import os
from typing import Final
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Recipe catalog backend (empty -> local recipes.json catalog)
RECIPE_API_BASE_URL: Final[str] = os.getenv('RECIPE_API_BASE_URL', '')
RECIPE_API_TOKEN: Final[str] = os.getenv('RECIPE_API_TOKEN', '')
CATALOG_TIMEOUT_SECONDS: Final[float] = float(os.getenv('CATALOG_TIMEOUT_SECONDS', '10'))

# Sharing
SHARE_BASE_URL: Final[str] = os.getenv('SHARE_BASE_URL', 'https://mymealprep.app/u/demo')

# Smart fill
SMART_FILL_BREAKFAST_COUNT: Final[int] = int(os.getenv('SMART_FILL_BREAKFAST_COUNT', '2'))
SMART_FILL_MAIN_COUNT: Final[int] = int(os.getenv('SMART_FILL_MAIN_COUNT', '6'))

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'DEBUG' if DEBUG else 'INFO').upper()
