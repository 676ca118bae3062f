"""Constants for progress bars, streaming chunk sizes and queue bounds."""

PACKAGE_ROOT = "streamdigest"

TQDM_BAR_FORMAT = "{desc} ▕{bar:50}▏ {n_fmt:>10}/{total_fmt:<10} ({rate_fmt:>12}, ETA: {remaining:>6}) {postfix}"
TQDM_DEFAULTS = {
    "bar_format": TQDM_BAR_FORMAT,
    "unit": "iB",
    "unit_scale": True,
    "miniters": 1,
    "smoothing": 0.00001,
    "colour": "cyan",
    "ascii": "░▒█",
}

# Default read buffer hint for streaming sources
DEFAULT_CHUNK_SIZE = 1024

# Number of chunks that may wait for a slow pass-through sink before the producer blocks
DEFAULT_QUEUE_SIZE = 32

# Seconds to wait for the sink worker to stop after a failed or cancelled stream
SINK_JOIN_TIMEOUT = 30.0

DEFAULT_ALGORITHM = "sha256"
