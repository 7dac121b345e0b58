"""
Bundle building for Flask-Assets from combinable asset references
"""
import hashlib
import logging

from flask_assets import Bundle

from assetcombine.utility import combinable_file, get_file_path, strip_query

logger = logging.getLogger(__name__)

# Filters applied to each kind of bundle
BUNDLE_FILTERS = {
    'js': 'jsmin',
    'css': 'cssmin',
}


def partition_assets(references, exclusions=(), config=None):
    """
    Split asset references into combinable ones and ones served separately

    Args:
        references: Asset references in page order
        exclusions: Literal paths, basenames or patterns never to combine
        config: CombineConfig holding the web roots

    Returns:
        Tuple of (combinable, skipped) lists, both keeping the input order
    """
    exclusions = list(exclusions)
    combinable, skipped = [], []

    for reference in references:
        if combinable_file(reference, exclusions, config):
            combinable.append(reference)
        else:
            skipped.append(reference)

    return combinable, skipped


def bundle_output(references, kind, config):
    digest = hashlib.md5('|'.join(references).encode('utf-8')).hexdigest()
    return f"{config.cache_dir_name}/{kind}/{digest}.{kind}"


def build_bundle(references, kind, config, exclusions=(), output=None):
    """
    Build a Flask-Assets bundle out of the combinable references

    Args:
        references: Asset references in page order
        kind: 'js' or 'css'
        config: CombineConfig holding the web roots
        exclusions: Literal paths, basenames or patterns never to combine
        output: Output path relative to the assets directory

    Returns:
        Tuple of (bundle, skipped). bundle is None when nothing is combinable
    """
    if kind not in BUNDLE_FILTERS:
        raise ValueError(f"Unknown bundle kind '{kind}', expected one of {sorted(BUNDLE_FILTERS)}")

    combinable, skipped = partition_assets(references, exclusions, config)

    # Relative references are combinable but only absolute ones resolve on disk
    contents = []
    for reference in combinable:
        path = get_file_path(strip_query(reference), config) if reference.startswith('/') else None
        if path is None:
            skipped.append(reference)
        else:
            contents.append(path)

    if not contents:
        return None, skipped

    bundle = Bundle(
        *contents,
        filters=BUNDLE_FILTERS[kind],
        output=output or bundle_output(combinable, kind, config)
    )
    logger.debug("Built %s bundle of %d files, %d served separately", kind, len(contents), len(skipped))

    return bundle, skipped


def register_bundle(assets, name, bundle):
    """
    Register a bundle with Flask-Assets

    Args:
        assets: Flask-Assets Environment instance
        name: Bundle name used from templates
        bundle: Bundle built by build_bundle
    """
    assets.register(name, bundle)
    return bundle
