"""Command for listing the supported digest algorithms."""

import json

import click

from ..cli import output_json
from ..engine import digest_size, supported_algorithms


@click.command()
@output_json
def algorithms(output_json: bool):
    """
    List the supported digest algorithms and their digest sizes in bytes.
    """
    sizes = {name: digest_size(name) for name in supported_algorithms()}
    if output_json:
        click.echo(json.dumps(sizes, indent=2))
    else:
        for name, size in sizes.items():
            click.echo(f"{name:<10} {size:>3}")
