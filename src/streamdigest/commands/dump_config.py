"""Command for showing the configuration the other commands would use."""

import json
import logging
from pathlib import Path

import click
import yaml
from pydantic import ValidationError

from ..cli import config_file, config_files_from_ctx, output_json
from ..models.config import DigestConfig
from ..utils.config import read_and_merge_config_files

log = logging.getLogger(__name__)


@click.command()
@config_file
@output_json
@click.option(
    "--validate/--no-validate",
    default=False,
    help="Validate the merged configuration and include default values.",
)
@click.pass_context
def dump_config(ctx: click.Context, config_file: list[Path], output_json: bool, validate: bool):
    """
    Print the configuration merged from all config files as YAML.
    """
    config_files = config_files_from_ctx(ctx)
    log.info(f"Configuration files to load: {[str(p.absolute()) for p in config_files]}")

    try:
        config = read_and_merge_config_files(config_files)
    except RuntimeError as e:
        raise click.UsageError(f"{e}: {e.__cause__}") from e

    if validate:
        try:
            config = DigestConfig.model_validate(config).model_dump(mode="json")
        except ValidationError as e:
            raise click.UsageError(f"Invalid configuration: {e}") from e
    else:
        log.info("Showing the configuration as read, use --validate to check it and fill in defaults.")

    if output_json:
        click.echo(json.dumps(config, indent=2))
    else:
        click.echo(yaml.safe_dump(config, sort_keys=False), nl=False)
