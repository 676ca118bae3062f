"""Digest calculation helpers for local files."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path

from tqdm.auto import tqdm

from ..constants import DEFAULT_ALGORITHM, DEFAULT_CHUNK_SIZE, TQDM_DEFAULTS
from ..encoding import DigestEncoding
from ..exceptions import PipelineError
from ..models.config import DigestOptions
from ..pipeline import DigestStream, FileSource

log = logging.getLogger(__name__)


@dataclass
class FileDigestResult:
    """Result of hashing a single file."""

    file_path: str
    success: bool
    digest: bytes | str | None = None
    errors: list[str] = field(default_factory=list)
    bytes_read: int = 0


def calculate_digest(
    file_path: str | PathLike,
    algorithm: str = DEFAULT_ALGORITHM,
    encoding: str | DigestEncoding | None = DigestEncoding.HEX,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    progress: bool = False,
) -> bytes | str:
    """
    Calculate the digest of a file in chunks.

    :param file_path: path to the file
    :param algorithm: digest algorithm name
    :param encoding: output encoding, hex by default
    :param chunk_size: chunk size in bytes
    :param progress: show a progress bar
    :return: encoded digest of file_path
    :raises PipelineError: if the file cannot be read
    """
    file_path = Path(file_path)
    stream = DigestStream(algorithm=algorithm, encoding=encoding, chunk_size=chunk_size)
    source = FileSource(file_path)

    if progress:
        with tqdm(
            total=file_path.stat().st_size,
            desc=f"{stream.algorithm.upper():<10}",
            postfix={"file": file_path.name},
            **TQDM_DEFAULTS,
        ) as pbar:  # type: ignore[call-overload]
            stream.consume(source, progress_callback=pbar.update)
    else:
        stream.consume(source)

    return stream.result()


def digest_file(
    file_path: str | PathLike,
    options: DigestOptions,
    progress_callback: Callable[[int], None] | None = None,
) -> FileDigestResult:
    """Hash one file, reporting failures in the result instead of raising."""
    log.debug(f"Hashing {file_path}")
    stream = DigestStream.from_options(options)
    stream.consume(FileSource(file_path), progress_callback=progress_callback)

    try:
        digest = stream.result()
    except PipelineError as e:
        return FileDigestResult(
            file_path=str(file_path),
            success=False,
            errors=[str(e)],
            bytes_read=stream.context.bytes_read,
        )

    return FileDigestResult(
        file_path=str(file_path),
        success=True,
        digest=digest,
        bytes_read=stream.context.bytes_read,
    )


def digest_files(
    file_paths: Sequence[str | PathLike],
    options: DigestOptions | None = None,
    threads: int = 1,
    progress: bool = False,
) -> list[FileDigestResult]:
    """
    Hash several files concurrently, one stream per file.

    :param file_paths: files to hash
    :param options: digest options shared by all streams
    :param threads: number of files hashed in parallel
    :param progress: show a total progress bar
    :return: one result per path, in input order
    """
    options = options or DigestOptions()
    total_bytes = sum(Path(p).stat().st_size for p in file_paths if Path(p).is_file())
    log.debug(f"Hashing {len(file_paths)} files ({total_bytes} bytes) with {threads} threads")

    with (
        tqdm(total=total_bytes, desc="Total     ", disable=not progress, **TQDM_DEFAULTS) as pbar,  # type: ignore[call-overload]
        ThreadPoolExecutor(max_workers=threads) as pool,
    ):
        pbar_lock = threading.Lock()

        def update_progress(n: int) -> None:
            with pbar_lock:
                pbar.update(n)

        futures = [pool.submit(digest_file, file_path, options, update_progress) for file_path in file_paths]
        results = [f.result() for f in futures]

    for result in results:
        if not result.success:
            log.error(f"Failed {result.file_path}: {'; '.join(result.errors)}")

    return results
