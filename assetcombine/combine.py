"""
Flask extension exposing the asset combine helpers to an application
"""
import os

from flask import current_app, request
from markupsafe import Markup

from assetcombine import utility
from assetcombine.config import CombineConfig
from assetcombine.minifiers import default_registry

# Responses the automatic header hook applies to
COMBINED_MIMETYPES = ('application/javascript', 'text/javascript', 'text/css')


class AssetCombine:
    """
    Asset combine extension

    Usage::

        combine = AssetCombine()
        combine.init_app(app)

    Templates get the ``minify_js`` and ``minify_css`` filters and the
    ``asset_timestamp`` global.
    """

    def __init__(self, app=None, registry=None):
        self.registry = registry or default_registry
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        """
        Set config defaults, validate minifiers and register template helpers

        Raises:
            MinifierNotFound: if a configured minifier name is not registered
        """
        app.config.setdefault('COMBINE_DATA_DIR', None)
        app.config.setdefault('COMBINE_CACHE_DIR', 'combine')
        app.config.setdefault('COMBINE_ENABLED', False)
        app.config.setdefault('COMBINE_GZIP', True)
        app.config.setdefault('COMBINE_PRAGMA_HEADER', 'public')
        app.config.setdefault('COMBINE_CLIENT_CACHE_MAX_AGE', None)
        app.config.setdefault('COMBINE_AUTO_HEADERS', False)
        app.config.setdefault('COMBINE_JS', {})
        app.config.setdefault('COMBINE_CSS', {})

        # Unset roots fall back to the application's own paths
        if not app.config.get('COMBINE_WEB_DIR'):
            app.config['COMBINE_WEB_DIR'] = app.static_folder
        if not app.config.get('COMBINE_CACHE_ROOT'):
            app.config['COMBINE_CACHE_ROOT'] = os.path.join(app.instance_path, 'cache')

        self.registry.validate(CombineConfig.from_mapping(app.config).minifier_names())

        app.extensions['assetcombine'] = self

        app.add_template_filter(self.minify_js, 'minify_js')
        app.add_template_filter(self.minify_css, 'minify_css')
        app.add_template_global(self.asset_timestamp, 'asset_timestamp')
        app.after_request(self._apply_headers)

        app.logger.info("Asset combine initialized (enabled=%s)", app.config['COMBINE_ENABLED'])

    @property
    def config(self) -> CombineConfig:
        return CombineConfig.from_mapping(current_app.config)

    def combinable_file(self, reference, exclusions=()):
        return utility.combinable_file(reference, exclusions, self.config)

    def get_file_path(self, reference):
        return utility.get_file_path(reference, self.config)

    def asset_timestamp(self, reference, path_mapper=None):
        """Modification timestamp of an asset, for cache busting URLs"""
        return utility.get_modified_timestamp(reference, self.config, path_mapper)

    def cache_dir(self):
        return utility.get_cache_dir(self.config)

    def minify_js(self, source):
        """
        Template filter for inline scripts

        Output is only marked safe when the input already was, as with the
        body of a ``{% filter minify_js %}`` block under autoescaping.
        """
        return _keep_markup(source, utility.minify_inline_js(str(source), self.config, self.registry))

    def minify_css(self, source):
        """Template filter for inline stylesheets, see minify_js"""
        return _keep_markup(source, utility.minify_inline_css(str(source), self.config, self.registry))

    def set_gzip(self, response):
        utility.set_gzip(
            response,
            self.config,
            request.headers.get('User-Agent'),
            request.headers.get('Accept-Encoding'),
        )
        return response

    def set_cache_headers(self, response):
        utility.set_cache_headers(response, self.config)
        return response

    def _apply_headers(self, response):
        if not current_app.config.get('COMBINE_AUTO_HEADERS'):
            return response
        if response.mimetype not in COMBINED_MIMETYPES or response.status_code != 200:
            return response

        self.set_cache_headers(response)
        self.set_gzip(response)
        return response


def _keep_markup(source, result):
    return Markup(result) if isinstance(source, Markup) else result
