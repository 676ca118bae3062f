"""Command for hashing files."""

import json
import logging
import sys

import click

from ..cli import FILE_R_E, algorithm, chunk_size, config_file, encoding, load_config, output_json, progress, threads
from ..utils.checksums import digest_files

log = logging.getLogger(__name__)


@click.command()
@click.argument("files", metavar="FILE...", nargs=-1, required=True, type=FILE_R_E)
@algorithm
@encoding
@chunk_size
@threads
@config_file
@output_json
@progress
@click.pass_context
def digest(ctx: click.Context, files, algorithm, encoding, chunk_size, threads, config_file, output_json, progress):
    """
    Compute the digest of one or more files.

    Files are streamed in chunks and hashed in parallel. Prints one
    '<digest>  <path>' line per file.
    """
    config = load_config(ctx, algorithm=algorithm, encoding=encoding, chunk_size=chunk_size, threads=threads)
    log.debug(f"Digest options: {config.digest.model_dump()}")

    results = digest_files(files, options=config.digest, threads=config.threads, progress=progress)

    if output_json:
        click.echo(
            json.dumps(
                [
                    {
                        "file_path": r.file_path,
                        "algorithm": config.digest.algorithm,
                        "encoding": config.digest.encoding,
                        "digest": r.digest,
                        "bytes_read": r.bytes_read,
                        "errors": r.errors,
                    }
                    for r in results
                ],
                indent=2,
            )
        )
    else:
        for r in results:
            if r.success:
                click.echo(f"{r.digest}  {r.file_path}")

    if not all(r.success for r in results):
        sys.exit(1)
