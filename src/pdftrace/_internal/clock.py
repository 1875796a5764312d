# Copyright 2026 pdftrace Contributors
# SPDX-License-Identifier: Apache-2.0

"""Clock sources for span timing and causal ordering.

- wall_clock_ns(): absolute timestamps stored on records
- monotonic_ns(): duration measurement, immune to NTP adjustments
- next_sequence(): process-wide, strictly increasing counter used to order
  span creation against identifier export. Wall-clock readings can tie on
  coarse clocks; the sequence never does.
"""

import itertools
import time

_sequence = itertools.count(1)


def wall_clock_ns() -> int:
    return time.time_ns()


def monotonic_ns() -> int:
    return time.monotonic_ns()


def duration_ms(start_mono_ns: int, end_mono_ns: int) -> int:
    """Duration in whole milliseconds between two monotonic readings."""
    return (end_mono_ns - start_mono_ns) // 1_000_000


def next_sequence() -> int:
    return next(_sequence)
