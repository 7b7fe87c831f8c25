"""Configuration management."""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from tools.file_utils import resolve_path

BASE_DIR = Path(__file__).parent.parent

# Load .env file if it exists
env_file = BASE_DIR / '.env'
if env_file.exists():
    load_dotenv(env_file)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return bool(default)
    return value.strip().lower() in ('1', 'true', 'yes')


def load_config(config_file: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration from YAML file and environment variables."""
    config_file = config_file or BASE_DIR / 'config' / 'config.yaml'

    # Load from YAML
    if config_file.exists():
        with open(config_file, 'r') as f:
            config = yaml.safe_load(f) or {}
    else:
        config = {}

    # Override with environment variables
    config['SECRET_KEY'] = os.getenv('SECRET_KEY', config.get('secret_key', 'dev-secret-key-change-in-production'))
    config['USERS_FILE'] = resolve_path(os.getenv('USERS_FILE', config.get('users_file', 'config/users.json')), BASE_DIR)
    config['MESSAGES_FILE'] = resolve_path(os.getenv('MESSAGES_FILE', config.get('messages_file', 'config/messages.yaml')), BASE_DIR)
    config['LOCALE'] = os.getenv('LOCALE', config.get('locale', 'en'))
    config['ADMIN_PASSWORD'] = os.getenv('ADMIN_PASSWORD', config.get('admin_password', 'admin'))
    config['REMEMBER_TOKEN_DAYS'] = int(os.getenv('REMEMBER_TOKEN_DAYS', config.get('remember_token_days', 14)))
    config['AUTH_COOKIE_NAME'] = os.getenv('AUTH_COOKIE_NAME', config.get('auth_cookie_name', 'auth_token'))
    config['AUTH_COOKIE_SECURE'] = _env_bool('AUTH_COOKIE_SECURE', config.get('auth_cookie_secure', False))
    config['DEBUG'] = _env_bool('DEBUG', config.get('debug', False))

    return config
