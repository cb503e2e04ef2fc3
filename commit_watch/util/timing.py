from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator


@dataclass
class Timing:
    label: str
    elapsed: float = 0.0


@contextmanager
def log_timing(logger, label: str, subject: str | None = None) -> Iterator[Timing]:
    timing = Timing(label if subject is None else f"{label} [{subject}]")
    start = time.perf_counter()
    try:
        yield timing
    finally:
        timing.elapsed = time.perf_counter() - start
        logger.info("%s took %.2fs", timing.label, timing.elapsed)
