"""
Asset combining for Flask: application factory pattern
"""
import os
import logging

from assetcombine.config import CombineConfig
from assetcombine.minifiers import Minifier, MinifierNotFound, MinifierRegistry, default_registry
from assetcombine.utility import (
    combinable_file,
    get_cache_dir,
    get_file_path,
    get_modified_timestamp,
    minify_inline_css,
    minify_inline_js,
    normalize_path,
    set_cache_headers,
    set_gzip,
    skip_asset,
    skip_by_regexp,
)

LOG_FORMAT = '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'


def create_app(config_name='default', **overrides):
    """
    Create and configure the Flask application

    Args:
        config_name: Configuration name (default, development, testing, production)
        overrides: Config values applied after the configuration class

    Returns:
        Configured Flask application
    """
    from flask import Flask

    from assetcombine.config import config
    from assetcombine.extensions import assets, combine

    # Create app
    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config[config_name])
    app.config.update(overrides)

    configure_logging(app)

    # Initialize extensions
    assets.init_app(app)
    combine.init_app(app)

    register_commands(app)

    return app


def configure_logging(app):
    """Configure application logging"""
    from logging.handlers import RotatingFileHandler

    if app.config.get('LOG_TO_STDOUT'):
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        app.logger.addHandler(stream_handler)
        app.logger.setLevel(logging.INFO)
        logging.getLogger('assetcombine').addHandler(stream_handler)

    elif not app.debug and not app.testing:
        log_file = app.config.get('LOG_FILE', 'logs/assetcombine.log')

        # Create logs directory if it doesn't exist
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)

        # Configure file handler
        file_handler = RotatingFileHandler(
            log_file, maxBytes=10485760, backupCount=10
        )
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        file_handler.setLevel(logging.INFO)

        # Add handlers to Flask app and package logger
        app.logger.addHandler(file_handler)
        app.logger.setLevel(logging.INFO)
        logging.getLogger('assetcombine').addHandler(file_handler)

    if app.config.get('SENTRY_DSN') and not app.debug and not app.testing:
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration

        sentry_sdk.init(
            dsn=app.config['SENTRY_DSN'],
            integrations=[FlaskIntegration()],
            traces_sample_rate=app.config.get('SENTRY_TRACES_SAMPLE_RATE', 0.1),
            environment=app.config.get('ENVIRONMENT', 'production'),
        )

    app.logger.info('Asset combine startup')


def register_commands(app):
    """Register Flask CLI commands"""
    from assetcombine.commands import combine_cli

    app.cli.add_command(combine_cli)


__all__ = [
    'CombineConfig',
    'Minifier',
    'MinifierNotFound',
    'MinifierRegistry',
    'combinable_file',
    'configure_logging',
    'create_app',
    'default_registry',
    'get_cache_dir',
    'get_file_path',
    'get_modified_timestamp',
    'minify_inline_css',
    'minify_inline_js',
    'normalize_path',
    'register_commands',
    'set_cache_headers',
    'set_gzip',
    'skip_asset',
    'skip_by_regexp',
]
