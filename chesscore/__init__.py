"""Engine-side building blocks for a UCI chess engine: options, protocol helpers,
time management, transposition table, tuning, threads and tablebase files."""

__version__ = "0.1.0"

__all__ = [
    "options",
    "uci",
    "tt",
    "tune",
    "threads",
    "timeman",
    "tbfiles",
]