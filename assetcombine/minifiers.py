"""
Pluggable minifiers for inline scripts and stylesheets
"""
import importlib
import logging
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

# Configure module logger
logger = logging.getLogger(__name__)


class MinifierNotFound(KeyError):
    """Raised when a configured minifier name has no registered factory"""


class Minifier:
    """
    Base minifier, built from a configuration block

    Subclasses map method names to ``(module, function)`` pairs. The module is
    imported on first use, so only the engines that are actually configured
    need to be installed.
    """
    default_method = None
    methods: Dict[str, tuple] = {}

    def __init__(self, config: Optional[Mapping[str, Any]] = None):
        self.config = dict(config or {})

    def resolve_method(self, method=False) -> str:
        return method or self.config.get('minify_method') or self.default_method

    def minify(self, source: str, method=False, options: Optional[Mapping[str, Any]] = None) -> str:
        """
        Minify source with the given method

        Args:
            source: Script or stylesheet text
            method: Method name, falsy to use the configured or default one
            options: Keyword arguments handed to the minify function

        Returns:
            Minified text
        """
        method = self.resolve_method(method)
        if method == 'none':
            return source

        try:
            module_name, function_name = self.methods[method]
        except KeyError:
            raise ValueError(f"Unknown minify method '{method}' for {type(self).__name__}")

        module = importlib.import_module(module_name)
        logger.debug("Minifying %d characters with %s", len(source), method)
        return getattr(module, function_name)(source, **dict(options or {}))


class JsMinifier(Minifier):
    """Javascript minifier backed by jsmin or rjsmin"""
    default_method = 'jsmin'
    methods = {
        'jsmin': ('jsmin', 'jsmin'),
        'rjsmin': ('rjsmin', 'jsmin'),
    }


class CssMinifier(Minifier):
    """Stylesheet minifier backed by cssmin or rcssmin"""
    default_method = 'cssmin'
    methods = {
        'cssmin': ('cssmin', 'cssmin'),
        'rcssmin': ('rcssmin', 'cssmin'),
    }


class MinifierRegistry:
    """Maps configuration names to minifier factories"""

    def __init__(self):
        self._factories: Dict[str, Callable[[Mapping[str, Any]], Any]] = {}

    def register(self, name: str, factory: Callable[[Mapping[str, Any]], Any]):
        """
        Register a factory under a name

        Args:
            name: Name used by the ``minifier`` key of a configuration block
            factory: Callable taking the configuration block and returning an
                object with a ``minify(source, method, options)`` method
        """
        if not callable(factory):
            raise TypeError(f"Minifier factory for '{name}' is not callable")
        self._factories[name] = factory
        return factory

    def __contains__(self, name):
        return name in self._factories

    def names(self):
        return sorted(self._factories)

    def create(self, name: str, config: Optional[Mapping[str, Any]] = None):
        try:
            factory = self._factories[name]
        except KeyError:
            raise MinifierNotFound(name)
        return factory(dict(config or {}))

    def validate(self, names: Iterable[str]) -> None:
        """Raise MinifierNotFound for the first name without a factory"""
        for name in names:
            if name not in self._factories:
                raise MinifierNotFound(name)


def create_default_registry() -> MinifierRegistry:
    registry = MinifierRegistry()
    registry.register('js', JsMinifier)
    registry.register('css', CssMinifier)
    return registry


default_registry = create_default_registry()
