"""
Custom Flask CLI commands for asset combining
"""
import os
import shutil

import click
from flask import current_app
from flask.cli import AppGroup

from assetcombine import utility
from assetcombine.config import CombineConfig

combine_cli = AppGroup('combine', help='Inspect combinable assets and the combine cache.')


def _combine_config():
    return CombineConfig.from_mapping(current_app.config)


@combine_cli.command('check')
@click.argument('references', nargs=-1, required=True)
@click.option('--exclude', '-e', multiple=True, help='Path, basename or pattern never to combine')
def check_command(references, exclude):
    """Report whether assets can be combined, where they live and their timestamp."""
    config = _combine_config()

    for reference in references:
        if utility.combinable_file(reference, exclude, config):
            path = utility.get_file_path(utility.strip_query(reference), config)
            timestamp = utility.get_modified_timestamp(reference, config)
            click.secho(f'{reference}: combinable', fg='green')
            click.echo(f'  path: {path or "-"}')
            click.echo(f'  timestamp: {timestamp}')
        else:
            click.secho(f'{reference}: not combinable', fg='yellow')


@combine_cli.command('clear-cache')
@click.option('--yes', is_flag=True, help='Do not ask for confirmation')
def clear_cache_command(yes):
    """Remove the combine cache directory."""
    cache_dir = utility.get_cache_dir(_combine_config())

    if not os.path.isdir(cache_dir):
        click.echo(f'Nothing to clear, {cache_dir} does not exist.')
        return

    if not yes and not click.confirm(f'Remove {cache_dir}?'):
        click.echo('Operation cancelled.')
        return

    try:
        shutil.rmtree(cache_dir)
        click.secho(f'Removed {cache_dir}', fg='green')
    except OSError as e:
        click.secho(f'Error clearing combine cache: {str(e)}', fg='red')
        raise
