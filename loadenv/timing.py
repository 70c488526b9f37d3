# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""Time helpers shared by sessions, actions and the environment."""

import time
from enum import Enum
from typing import Optional, Union

from .errors import ConfigError


class Timeout(Enum):
    """Sentinel values for scenario timeouts."""

    INFINITY = "infinity"


# Wait for a scenario without any bound.
NO_TIMEOUT = Timeout.INFINITY

TimeoutValue = Union[int, float, Timeout, None]


def timestamp() -> float:
    """Return the current wall-clock time in seconds."""
    return time.time()


def milliseconds(n: float) -> float:
    return n / 1000.0


def seconds(n: float) -> float:
    return float(n)


def minutes(n: float) -> float:
    return n * 60.0


def resolve_timeout(value: TimeoutValue) -> Optional[float]:
    """
    Convert a configured scenario timeout into seconds for asyncio.

    Args:
        value: Seconds, ``None`` or ``NO_TIMEOUT``

    Returns:
        Timeout in seconds, or None for an unbounded wait
    """
    if value is None or value is NO_TIMEOUT:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"Invalid scenario_timeout: {value!r}")
    if value < 0:
        raise ConfigError(f"scenario_timeout must be >= 0, got {value}")
    return float(value)
