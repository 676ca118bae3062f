"""Command for copying a file while hashing it."""

import logging
import sys
from pathlib import Path

import click
from tqdm.auto import tqdm

from ..cli import FILE_R_E, FILE_W_C, algorithm, chunk_size, config_file, encoding, load_config, progress
from ..constants import TQDM_DEFAULTS
from ..exceptions import PipelineError
from ..pipeline import DigestStream, FileSink, FileSource

log = logging.getLogger(__name__)


@click.command()
@click.argument("source_path", metavar="SOURCE", type=FILE_R_E)
@click.argument("target_path", metavar="TARGET", type=FILE_W_C)
@algorithm
@encoding
@chunk_size
@config_file
@progress
@click.pass_context
def copy(ctx: click.Context, source_path, target_path, algorithm, encoding, chunk_size, config_file, progress):
    """
    Copy SOURCE to TARGET and print the digest of the copied bytes.

    The file is read once; TARGET only appears if the copy completed.
    """
    config = load_config(ctx, algorithm=algorithm, encoding=encoding, chunk_size=chunk_size)
    source_path, target_path = Path(source_path), Path(target_path)
    if source_path == target_path:
        raise click.UsageError("SOURCE and TARGET must be different files.")

    try:
        stream = DigestStream.from_options(config.digest, sink=FileSink(target_path))
    except PipelineError as e:
        log.error(f"Copy of {source_path} failed: {e}")
        sys.exit(1)

    with tqdm(
        total=source_path.stat().st_size,
        desc="COPY      ",
        postfix={"file": source_path.name},
        disable=not progress,
        **TQDM_DEFAULTS,
    ) as pbar:  # type: ignore[call-overload]
        stream.consume(FileSource(source_path), progress_callback=pbar.update)

    try:
        digest = stream.result()
    except PipelineError as e:
        log.error(f"Copy of {source_path} failed: {e}")
        sys.exit(1)

    log.info(f"Copied {stream.context.bytes_written} bytes to {target_path}")
    click.echo(f"{digest}  {target_path}")
