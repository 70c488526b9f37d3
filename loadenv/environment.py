# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Environment orchestrator.

An environment holds a list of scenarios and the config to run each of them
with. Running it launches every scenario concurrently, waits for all of them
(each bounded by its own ``scenario_timeout``) and merges the resulting
sessions into one report whose keys are prefixed with the session names.
"""

import asyncio
import logging
from collections import Counter
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .errors import EmptyMergeError, ScenarioTimeoutError
from .http_client import HTTPClient, HTTPXClient
from .scenario import ScenarioLike, execute
from .session import Session
from .timing import NO_TIMEOUT, resolve_timeout

LOGGER = logging.getLogger("loadenv.environment")


@dataclass
class ScenarioRun:
    """A scenario together with the config to run it with."""

    scenario: ScenarioLike
    config: Dict[str, Any] = field(default_factory=dict)

    @property
    def session_name(self) -> Optional[str]:
        return self.config.get("session_name")


@dataclass
class Environment:
    """
    A set of scenarios run concurrently as one load test.

    Example:
        >>> env = (
        ...     EnvironmentBuilder("staging")
        ...     .default_config({"base_url": "http://staging.example.com", "scenario_timeout": 15})
        ...     .run(Browse, {"delay": 2}, name="browse-1")
        ...     .run(Checkout)
        ...     .build()
        ... )
        >>> report = env.run_sync()
        >>> sorted(report.metrics)[0]
        ('browse-1', 'duration', 'GET', 'http://staging.example.com')
    """

    name: str
    scenarios: List[ScenarioRun] = field(default_factory=list)
    config: Dict[str, Any] = field(default_factory=dict)

    async def run(
        self,
        client: Optional[HTTPClient] = None,
        logger: Optional[logging.Logger] = None,
    ) -> Session:
        """
        Run all scenarios and merge their sessions.

        Args:
            client: HTTP client shared by all scenarios; an HTTPXClient is
                opened for the duration of the run when omitted
            logger: Parent logger handed to each scenario's session

        Returns:
            The merged session

        Raises:
            ScenarioTimeoutError: A scenario exceeded its scenario_timeout
            EmptyMergeError: The environment has no scenarios
        """
        logger = logger or LOGGER
        if client is not None:
            sessions = await self._run_scenarios(client, logger)
        else:
            async with HTTPXClient() as http_client:
                sessions = await self._run_scenarios(http_client, logger)
        return merge_sessions(sessions)

    def run_sync(self, **kwargs: Any) -> Session:
        return asyncio.run(self.run(**kwargs))

    async def _run_scenarios(self, client: HTTPClient, logger: logging.Logger) -> List[Session]:
        timeouts = [resolve_timeout(run.config.get("scenario_timeout", NO_TIMEOUT)) for run in self.scenarios]
        if not self.scenarios:
            return []

        logger.info("Environment %s: starting %d scenarios", self.name, len(self.scenarios))

        # Launch all scenarios concurrently, each bounded by its own timeout
        tasks = [
            asyncio.ensure_future(self._run_scenario(run, timeout, client, logger))
            for run, timeout in zip(self.scenarios, timeouts)
        ]

        try:
            # The first failing or timed-out scenario ends the whole run
            await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
            for task in tasks:
                if task.done() and task.exception() is not None:
                    raise task.exception()
            return [task.result() for task in tasks]
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _run_scenario(
        self,
        run: ScenarioRun,
        timeout: Optional[float],
        client: HTTPClient,
        logger: logging.Logger,
    ) -> Session:
        try:
            session = await asyncio.wait_for(
                execute(run.scenario, run.config, client=client, logger=logger),
                timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error(
                "Environment %s: scenario %s timed out after %ss",
                self.name,
                run.session_name or run.scenario,
                timeout,
            )
            raise ScenarioTimeoutError(run.session_name, run.scenario, timeout) from e
        logger.info("Environment %s: session %s finished", self.name, session.name)
        return session


class EnvironmentBuilder:
    """
    Collects scenarios and their config for an Environment.

    Each scenario's config is the default config, then ``session_name`` when
    a name is given, then the scenario's own config.
    """

    def __init__(self, name: str):
        self._name = name
        self._default_config: Dict[str, Any] = {}
        self._runs: List[Tuple[ScenarioLike, Optional[str], Dict[str, Any]]] = []

    def default_config(self, config: Mapping[str, Any]) -> "EnvironmentBuilder":
        self._default_config = dict(config)
        return self

    def run(
        self,
        scenario: ScenarioLike,
        config: Optional[Mapping[str, Any]] = None,
        name: Optional[str] = None,
    ) -> "EnvironmentBuilder":
        self._runs.append((scenario, name, dict(config or {})))
        return self

    def build(self) -> Environment:
        runs = []
        for scenario, name, config in self._runs:
            merged = dict(self._default_config)
            if name is not None:
                merged["session_name"] = name
            merged.update(config)
            runs.append(ScenarioRun(scenario=scenario, config=merged))
        return Environment(name=self._name, scenarios=runs, config=dict(self._default_config))


def merge_sessions(sessions: Iterable[Session]) -> Session:
    """
    Merge metrics and results of all sessions into one session.

    Every key is prefixed with the name of the session it was recorded in.
    Config and assigns are taken from the first session. The input sessions
    are not modified.

    Raises:
        EmptyMergeError: No sessions were given. This is a caller bug.
    """
    sessions = list(sessions)
    if not sessions:
        raise EmptyMergeError()

    duplicates = [name for name, count in Counter(s.name for s in sessions).items() if count > 1]
    if duplicates:
        LOGGER.warning("Merging sessions with duplicate names, results may collide: %s", duplicates)

    first, rest = sessions[0], sessions[1:]
    merged = replace(
        first,
        metrics=first.namespaced_metrics(),
        results=first.namespaced_results(),
        assigns=dict(first.assigns),
    )
    for session in rest:
        merged.merge(session)
    return merged
