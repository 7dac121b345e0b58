"""
Application and asset-combine configuration settings
"""
import os
import secrets
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

basedir = os.path.abspath(os.path.dirname(__file__))


def _env_flag(name, default):
    return os.environ.get(name, default).lower() in ['true', 'yes', '1']


def _env_max_age():
    value = os.environ.get('COMBINE_CLIENT_CACHE_MAX_AGE')
    return float(value) if value else None


class Config:
    """Base configuration"""
    # Flask
    SECRET_KEY = os.environ.get('SECRET_KEY') or secrets.token_hex(32)
    DEBUG = False
    TESTING = False

    # Logging
    LOG_TO_STDOUT = _env_flag('LOG_TO_STDOUT', 'false')
    LOG_FILE = os.environ.get('LOG_FILE', 'logs/assetcombine.log')

    # Sentry
    SENTRY_DSN = os.environ.get('SENTRY_DSN')
    SENTRY_TRACES_SAMPLE_RATE = float(os.environ.get('SENTRY_TRACES_SAMPLE_RATE', 0.1))

    # Asset combining
    COMBINE_WEB_DIR = os.environ.get('COMBINE_WEB_DIR')  # falls back to the static folder
    COMBINE_DATA_DIR = os.environ.get('COMBINE_DATA_DIR')
    COMBINE_CACHE_ROOT = os.environ.get('COMBINE_CACHE_ROOT')  # falls back to instance/cache
    COMBINE_CACHE_DIR = os.environ.get('COMBINE_CACHE_DIR', 'combine')
    COMBINE_ENABLED = _env_flag('COMBINE_ENABLED', 'false')
    COMBINE_GZIP = _env_flag('COMBINE_GZIP', 'true')
    COMBINE_PRAGMA_HEADER = os.environ.get('COMBINE_PRAGMA_HEADER', 'public')
    COMBINE_CLIENT_CACHE_MAX_AGE = _env_max_age()  # days
    COMBINE_AUTO_HEADERS = _env_flag('COMBINE_AUTO_HEADERS', 'false')
    COMBINE_JS = {'minifier': 'js', 'minify_method': 'jsmin'}
    COMBINE_CSS = {'minifier': 'css', 'minify_method': 'cssmin'}

    # Flask-Assets
    ASSETS_DEBUG = False


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    ASSETS_DEBUG = True  # Serve source files unbundled
    COMBINE_GZIP = False


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    DEBUG = True
    SECRET_KEY = 'testing'
    COMBINE_ENABLED = True
    COMBINE_CLIENT_CACHE_MAX_AGE = None


class ProductionConfig(Config):
    """Production configuration"""
    # Server name
    SERVER_NAME = os.environ.get('SERVER_NAME')
    PREFERRED_URL_SCHEME = 'https'

    # Combining on by default in production
    COMBINE_ENABLED = _env_flag('COMBINE_ENABLED', 'true')
    COMBINE_AUTO_HEADERS = _env_flag('COMBINE_AUTO_HEADERS', 'true')
    COMBINE_CLIENT_CACHE_MAX_AGE = _env_max_age() or 10


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}


@dataclass(frozen=True)
class CombineConfig:
    """
    Settings every combine operation receives explicitly

    Attributes:
        web_dir: Primary web root searched for absolute asset references
        data_dir: Data directory whose ``/web`` subpath is the fallback root
        cache_root: Directory holding the combine cache directory
        cache_dir_name: Name of the combine cache directory
        enabled: Whether inline minification is active
        gzip: Whether responses may be gzip compressed
        pragma_header: Value of the ``Pragma`` header
        client_cache_max_age: Client cache lifetime in days, None to disable
        js: Minifier configuration block for scripts
        css: Minifier configuration block for stylesheets
    """
    web_dir: Optional[str] = None
    data_dir: Optional[str] = None
    cache_root: Optional[str] = None
    cache_dir_name: str = 'combine'
    enabled: bool = False
    gzip: bool = True
    pragma_header: str = 'public'
    client_cache_max_age: Optional[float] = None
    js: Dict[str, Any] = field(default_factory=dict)
    css: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> 'CombineConfig':
        """
        Build settings from a Flask style config mapping of ``COMBINE_*`` keys

        Args:
            mapping: Usually ``app.config``

        Returns:
            CombineConfig instance, missing keys take the defaults
        """
        return cls(
            web_dir=mapping.get('COMBINE_WEB_DIR'),
            data_dir=mapping.get('COMBINE_DATA_DIR'),
            cache_root=mapping.get('COMBINE_CACHE_ROOT'),
            cache_dir_name=mapping.get('COMBINE_CACHE_DIR') or 'combine',
            enabled=bool(mapping.get('COMBINE_ENABLED', False)),
            gzip=bool(mapping.get('COMBINE_GZIP', True)),
            pragma_header=mapping.get('COMBINE_PRAGMA_HEADER') or 'public',
            client_cache_max_age=mapping.get('COMBINE_CLIENT_CACHE_MAX_AGE'),
            js=dict(mapping.get('COMBINE_JS') or {}),
            css=dict(mapping.get('COMBINE_CSS') or {}),
        )

    def minifier_names(self) -> List[str]:
        """Names of the minifiers the js and css blocks point at"""
        return [
            self.js.get('minifier', 'js'),
            self.css.get('minifier', 'css'),
        ]
