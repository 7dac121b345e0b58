"""
Asset eligibility, path resolution and response helpers for asset combining

Every function takes its settings as an explicit ``CombineConfig`` so it can be
used outside of an application context. The Flask bound versions live on
``AssetCombine``.
"""
import gzip
import logging
import os
import re
import time
from typing import Callable, Iterable, Optional

from werkzeug.http import http_date

from assetcombine.config import CombineConfig
from assetcombine.minifiers import MinifierRegistry, default_registry

# Configure module logger
logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400

# Old Internet Explorer user agents that break on gzipped content
LEGACY_MSIE_PREFIX = 'Mozilla/4.0 (compatible; MSIE '

# Delimited patterns such as "/\.min\.js$/i"
_BRACKET_DELIMITERS = {'(': ')', '{': '}', '[': ']', '<': '>'}
_PATTERN_FLAGS = {
    'i': re.IGNORECASE,
    'm': re.MULTILINE,
    's': re.DOTALL,
    'x': re.VERBOSE,
    'u': 0,
}
_VERSION_RE = re.compile(r'\s*(\d+(?:\.\d*)?|\.\d+)')


def strip_query(reference: str) -> str:
    """Remove everything from the first question mark on"""
    return reference.split('?', 1)[0]


def basename(reference: str) -> str:
    return reference.rstrip('/').rsplit('/', 1)[-1]


def combinable_file(reference: str, exclusions: Iterable[str] = (),
                    config: Optional[CombineConfig] = None) -> bool:
    """
    Check whether an asset can be combined

    An asset is not combinable when it is remote (has a protocol), when it or
    its path without query string is excluded, or when it is an absolute path
    that cannot be found under the web roots (likely a dynamic file).

    Args:
        reference: Asset reference, e.g. ``/js/app.js?v=3``
        exclusions: Literal paths, basenames or patterns never to combine
        config: Combine settings holding the web roots

    Returns:
        True if the asset can be combined
    """
    exclusions = list(exclusions)

    if '://' in reference or skip_asset(reference, exclusions):
        return False

    reference = strip_query(reference)

    if skip_asset(reference, exclusions):
        return False

    if reference.startswith('/') and get_file_path(reference, config) is None:
        logger.debug("Asset %s not found under the web roots", reference)
        return False

    return True


def skip_asset(reference: str, exclusions: Iterable[str] = ()) -> bool:
    """Whether the asset is excluded by path, basename or pattern"""
    exclusions = list(exclusions)
    return (
        reference in exclusions
        or basename(reference) in exclusions
        or skip_by_regexp(reference, exclusions)
    )


def compile_exclusion(pattern: str):
    """
    Compile an exclusion entry as a regular expression

    Only entries wrapped in delimiters (``/\\.min\\.js$/i``, ``#^/vendor/#``)
    are patterns: the delimiters are removed and the trailing flags applied.
    Literal paths and basenames such as ``app.js`` or ``/js/app.js`` are not.

    Returns:
        Compiled pattern, or None when the entry is not a valid expression
    """
    if not isinstance(pattern, str) or len(pattern) < 2:
        return None
    if pattern[0].isalnum() or pattern[0] in '\\ \t\r\n':
        return None

    closing = _BRACKET_DELIMITERS.get(pattern[0], pattern[0])
    end = pattern.rfind(closing)
    modifiers = pattern[end + 1:]
    if end < 1 or not all(flag in _PATTERN_FLAGS for flag in modifiers):
        return None

    source, flags = pattern[1:end], 0
    for flag in modifiers:
        flags |= _PATTERN_FLAGS[flag]

    try:
        return re.compile(source, flags)
    except (re.error, TypeError):
        return None


def skip_by_regexp(reference: str, exclusions: Iterable[str] = ()) -> bool:
    """
    Whether any exclusion entry, read as a regular expression, matches

    An entry that is not a valid expression counts as a non-match.
    """
    for pattern in exclusions:
        compiled = compile_exclusion(pattern)
        if compiled is None:
            logger.debug("Ignoring invalid exclusion pattern %r", pattern)
            continue
        if compiled.search(reference):
            return True

    return False


def candidate_paths(reference: str, config: Optional[CombineConfig]):
    """Filesystem paths a reference may live at, in priority order"""
    config = config or CombineConfig()
    paths = []
    if config.web_dir:
        paths.append(config.web_dir + reference)
    if config.data_dir:
        paths.append(config.data_dir + '/web' + reference)
    return paths


def get_file_path(reference: str, config: Optional[CombineConfig] = None) -> Optional[str]:
    """
    Get the path to an asset as long as the file exists

    Returns:
        Path under the web dir, else under the data dir's web subpath, else None
    """
    for path in candidate_paths(reference, config):
        if os.path.exists(path):
            return path

    return None


def normalize_path(path: str) -> str:
    """
    Normalize a path without touching the filesystem

    ``.`` segments are dropped and ``..`` removes the previous segment (or
    nothing, at the start). Both slash styles separate segments.
    """
    if path == '':
        return path

    absolutes = []
    for part in re.split(r'[/\\]', path):
        if part in ('', '.'):
            continue
        if part == '..':
            if absolutes:
                absolutes.pop()
        else:
            absolutes.append(part)

    normalized = os.sep.join(absolutes)

    return '/' + normalized if path.startswith('/') else normalized


def get_modified_timestamp(reference: str, config: Optional[CombineConfig] = None,
                           path_mapper: Optional[Callable[[str], str]] = None) -> int:
    """
    Get the last modified timestamp of an asset

    Args:
        reference: Asset reference
        config: Combine settings holding the web roots
        path_mapper: Optional callable prefixing the asset path first

    Returns:
        Epoch seconds, 0 when the asset is not combinable or cannot be read
    """
    if path_mapper and callable(path_mapper):
        reference = path_mapper(reference)

    if not combinable_file(reference, [], config):
        return 0

    path = get_file_path(strip_query(reference), config)
    if path is None:
        return 0

    try:
        return int(os.path.getmtime(path))
    except OSError:
        logger.debug("Could not read modification time of %s", path)
        return 0


def get_cache_dir(config: CombineConfig) -> str:
    """Directory combined files are cached in"""
    return os.path.join(config.cache_root or '', config.cache_dir_name)


def check_gzip_fail(user_agent: Optional[str]) -> bool:
    """
    Whether the user agent is an old Internet Explorer that mishandles gzip

    Matches MSIE below 6, and MSIE 6.0 without the SV1 marker. Opera
    identifying as MSIE is not affected.
    """
    if not user_agent or not user_agent.startswith(LEGACY_MSIE_PREFIX) or 'Opera' in user_agent:
        return False

    match = _VERSION_RE.match(user_agent[len(LEGACY_MSIE_PREFIX):])
    version = float(match.group(1)) if match else 0.0

    return version < 6 or (version == 6.0 and 'SV1' not in user_agent)


def check_gzip_already_started(response) -> bool:
    """
    Whether the response is already encoded or is a generator stream

    File-backed responses (static files, ``send_file``) are streamed in
    direct passthrough mode but can still be buffered and compressed.
    """
    return (
        'Content-Encoding' in response.headers
        or (response.is_streamed and not response.direct_passthrough)
    )


def accepts_gzip(accept_encoding: Optional[str]) -> bool:
    if not accept_encoding:
        return False
    codings = [part.split(';', 1)[0].strip().lower() for part in accept_encoding.split(',')]
    return 'gzip' in codings or '*' in codings


def set_gzip(response, config: CombineConfig, user_agent: Optional[str] = None,
             accept_encoding: Optional[str] = None) -> None:
    """
    Gzip the response body when the client and settings allow it

    Args:
        response: werkzeug response, modified in place
        config: Combine settings
        user_agent: Request User-Agent header
        accept_encoding: Request Accept-Encoding header
    """
    if (
        config.gzip
        and not check_gzip_fail(user_agent)
        and not check_gzip_already_started(response)
        and accepts_gzip(accept_encoding)
    ):
        # Let werkzeug read the file body into memory
        response.direct_passthrough = False
        response.set_data(gzip.compress(response.get_data()))
        response.headers['Content-Encoding'] = 'gzip'
        response.vary.add('Accept-Encoding')


def set_cache_headers(response, config: CombineConfig, now: Optional[float] = None) -> None:
    """
    Send client cache headers if a max age is configured

    Sets ``Cache-Control: max-age``, ``Pragma`` and ``Expires``.
    """
    if config.client_cache_max_age is None:
        return

    lifetime = int(config.client_cache_max_age * SECONDS_PER_DAY)
    now = time.time() if now is None else now

    response.cache_control.max_age = lifetime
    response.headers['Pragma'] = config.pragma_header
    response.headers['Expires'] = http_date(now + lifetime)


def _minify_inline(source, config, block, default_name, registry):
    if not config.enabled:
        return source

    registry = registry or default_registry
    minifier = registry.create(block.get('minifier', default_name), block)

    return minifier.minify(
        source,
        block.get('inline_minify_method', False),
        block.get('inline_minify_method_options', {}),
    )


def minify_inline_js(source: str, config: CombineConfig,
                     registry: Optional[MinifierRegistry] = None) -> str:
    """Minify an inline script, unchanged unless combining is enabled"""
    return _minify_inline(source, config, config.js, 'js', registry)


def minify_inline_css(source: str, config: CombineConfig,
                      registry: Optional[MinifierRegistry] = None) -> str:
    """Minify an inline stylesheet, unchanged unless combining is enabled"""
    return _minify_inline(source, config, config.css, 'css', registry)
