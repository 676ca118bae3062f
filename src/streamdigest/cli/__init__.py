"""
Common click options for the CLI commands.
"""

from pathlib import Path

import click
import platformdirs
from pydantic import ValidationError

from ..constants import DEFAULT_ALGORITHM, DEFAULT_CHUNK_SIZE
from ..encoding import DigestEncoding
from ..models.config import DigestConfig
from ..utils.config import read_and_merge_config_files

DEFAULT_CONFIG_PATH = Path(platformdirs.user_config_dir("streamdigest")) / "config.yaml"

# Aliases for path types for click options
# Naming convention: {DIR,FILE}_{Read,Write}_{Exists,Create}
FILE_R_E = click.Path(exists=True, file_okay=True, dir_okay=False, readable=True, resolve_path=True)
FILE_W_C = click.Path(exists=False, file_okay=True, dir_okay=False, writable=True, resolve_path=True)

config_file = click.option(
    "--config-file",
    "config_file",
    metavar="PATH",
    type=FILE_R_E,
    multiple=True,
    help=f"Path to a YAML config file, may be repeated (default: {DEFAULT_CONFIG_PATH} if it exists)",
)

algorithm = click.option(
    "--algorithm",
    "-a",
    metavar="NAME",
    type=str,
    default=None,
    help=f"Digest algorithm (default: {DEFAULT_ALGORITHM})",
)

encoding = click.option(
    "--encoding",
    "-e",
    type=click.Choice([DigestEncoding.HEX.value, DigestEncoding.BASE64.value], case_sensitive=False),
    default=None,
    help="Output encoding of the digest (default: hex)",
)

chunk_size = click.option(
    "--chunk-size",
    metavar="BYTES",
    type=click.IntRange(min=1),
    default=None,
    help=f"Read buffer size in bytes (default: {DEFAULT_CHUNK_SIZE})",
)

threads = click.option(
    "--threads",
    default=None,
    type=click.IntRange(min=1),
    help="Number of files to hash in parallel (default: from config or 1)",
)

output_json = click.option("--json", "output_json", is_flag=True, help="Output JSON for machine-readability.")

progress = click.option("--progress/--no-progress", default=False, help="Show a progress bar on stderr.")


def config_files_from_ctx(ctx: click.Context) -> list[Path]:
    """
    Collect config files given on the command line.

    Falls back to the default config path if no file was given and it exists.
    """
    files = [Path(p) for p in ctx.params.get("config_file") or ()]
    if not files and DEFAULT_CONFIG_PATH.is_file():
        files = [DEFAULT_CONFIG_PATH]
    return files


def load_config(
    ctx: click.Context,
    algorithm: str | None = None,
    encoding: str | None = None,
    chunk_size: int | None = None,
    threads: int | None = None,
) -> DigestConfig:
    """
    Read the config files and apply command line overrides.

    Output defaults to hex, since raw digests cannot be printed.
    """
    try:
        configuration = read_and_merge_config_files(config_files_from_ctx(ctx))
    except RuntimeError as e:
        raise click.UsageError(f"{e}: {e.__cause__}") from e

    digest = configuration.get("digest") or {}
    if not isinstance(digest, dict):
        raise click.UsageError(f"Invalid configuration: 'digest' must be a mapping, got {digest!r}")
    digest = dict(digest)
    overrides = {"algorithm": algorithm, "encoding": encoding, "chunk_size": chunk_size}
    digest.update({key: value for key, value in overrides.items() if value is not None})
    digest.setdefault("encoding", DigestEncoding.HEX.value)
    configuration["digest"] = digest
    if threads is not None:
        configuration["threads"] = threads

    try:
        config = DigestConfig.model_validate(configuration)
    except ValidationError as e:
        raise click.UsageError(f"Invalid configuration: {e}") from e

    if config.digest.encoding == DigestEncoding.RAW:
        raise click.UsageError("Raw digests cannot be printed, use hex or base64 encoding.")
    return config
