import logging

import pytest
import streamdigest.cli
from streamdigest.logging import TqdmLoggingHandler


@pytest.fixture(autouse=True)
def isolated_cli(tmp_path, monkeypatch):
    """Keep the user's config file out of CLI runs and undo the logging setup afterwards."""
    monkeypatch.setattr(streamdigest.cli, "DEFAULT_CONFIG_PATH", tmp_path / "no-such-config.yaml")

    root_logger = logging.getLogger()
    level = root_logger.level
    yield
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        if isinstance(handler, TqdmLoggingHandler):
            root_logger.removeHandler(handler)


@pytest.fixture
def data_files(tmp_path):
    files = []
    for name, content in [("a.txt", b"alpha\n"), ("b.bin", bytes(range(256)) * 40), ("empty", b"")]:
        path = tmp_path / name
        path.write_bytes(content)
        files.append(path)
    return files
