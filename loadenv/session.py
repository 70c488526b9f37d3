# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Session store.

A session accumulates everything one scenario run produces: timing metrics,
action results and free-form assigns. Keys are local while the scenario
runs and only get prefixed with the session name when sessions are merged.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .actions import http as http_actions
from .actions.base import Action
from .actions.delay import Delay
from . import timing

MetricKey = Tuple[Any, ...]
MetricValues = List[Tuple[float, Any]]


def _metric_key(key: Any) -> MetricKey:
    if isinstance(key, tuple):
        return key
    if isinstance(key, list):
        return tuple(key)
    return (key,)


@dataclass
class Session:
    """
    Per-scenario accumulator of config, metrics, results and assigns.

    Example:
        >>> session = Session(name="checkout", config={"base_url": "http://x.com"})
        >>> session.add_metric(("duration", "GET", "http://x.com/"), 0.12, timestamp=1.0).namespaced_metrics()
        {('checkout', 'duration', 'GET', 'http://x.com/'): [(1.0, 0.12)]}
    """

    name: str
    config: Mapping[str, Any] = field(default_factory=dict)
    metrics: Dict[MetricKey, MetricValues] = field(default_factory=dict)
    results: Dict[Any, Any] = field(default_factory=dict)
    assigns: Dict[str, Any] = field(default_factory=dict)

    # Runtime collaborators, not part of the recorded data
    client: Any = field(default=None, repr=False, compare=False)
    logger: logging.Logger = field(
        default_factory=lambda: logging.getLogger("loadenv.session"),
        repr=False,
        compare=False,
    )

    def __post_init__(self):
        # Read-only snapshot; scenarios must not change config while running.
        if not isinstance(self.config, MappingProxyType):
            self.config = MappingProxyType(dict(self.config))

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def add_metric(self, key: Any, value: Any, timestamp: Optional[float] = None) -> "Session":
        """Append ``(timestamp, value)`` under ``key``; ``timestamp`` defaults to now."""
        if timestamp is None:
            timestamp = timing.timestamp()
        self.metrics.setdefault(_metric_key(key), []).append((timestamp, value))
        return self

    def add_result(self, action: Any, value: Any) -> "Session":
        """Record ``value`` as the outcome of ``action`` (keyed by its string form)."""
        self.results[str(action)] = value
        return self

    def assign(self, values: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> "Session":
        """Merge the given values into assigns, overwriting existing keys."""
        if values:
            self.assigns.update(values)
        self.assigns.update(kwargs)
        return self

    # ------------------------------------------------------------------
    # Merging
    # ------------------------------------------------------------------

    def namespaced_metrics(self) -> Dict[MetricKey, MetricValues]:
        return {(self.name,) + key: list(values) for key, values in self.metrics.items()}

    def namespaced_results(self) -> Dict[Any, Any]:
        return {(self.name, key): value for key, value in self.results.items()}

    def merge(self, other: "Session") -> "Session":
        """
        Fold ``other``'s namespaced metrics and results into this session.

        Metric sequences under an existing key are concatenated; results
        under an existing key are overwritten.
        """
        for key, values in other.namespaced_metrics().items():
            self.metrics.setdefault(key, []).extend(values)
        self.results.update(other.namespaced_results())
        return self

    # ------------------------------------------------------------------
    # Scenario helpers
    # ------------------------------------------------------------------

    async def run_action(self, action: Action) -> "Session":
        return await action.run(self)

    async def get(self, path: str, params: Optional[Mapping[str, Any]] = None, **opts: Any) -> "Session":
        return await self.run_action(http_actions.get(path, params=params, **opts))

    async def head(self, path: str, params: Optional[Mapping[str, Any]] = None, **opts: Any) -> "Session":
        return await self.run_action(http_actions.head(path, params=params, **opts))

    async def post(self, path: str, **opts: Any) -> "Session":
        return await self.run_action(http_actions.post(path, **opts))

    async def put(self, path: str, **opts: Any) -> "Session":
        return await self.run_action(http_actions.put(path, **opts))

    async def patch(self, path: str, **opts: Any) -> "Session":
        return await self.run_action(http_actions.patch(path, **opts))

    async def delete(self, path: str, **opts: Any) -> "Session":
        return await self.run_action(http_actions.delete(path, **opts))

    async def delay(self, duration: float) -> "Session":
        return await self.run_action(Delay(duration))
