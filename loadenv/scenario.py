# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Scenarios and the unit that executes them.

A scenario drives a sequence of actions against its own session. Action
failures are raised as ``ActionError`` into the scenario, which decides
whether to retry, skip or give up.

Example:
    >>> class Browse(Scenario):
    ...     async def run(self, session):
    ...         session = await session.get("/")
    ...         await session.delay(self.config(session, "delay", 0.5))
    ...         return await session.get("/products", params={"page": 1})
"""

import logging
import uuid
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, Type, Union

from .session import Session

ScenarioLike = Union["Scenario", Type["Scenario"]]


class Scenario(ABC):
    """Base class for load-generation scenarios."""

    # Used in generated session names; defaults to the class name
    name: Optional[str] = None

    async def init(self, session: Session) -> Session:
        """Prepare the session before ``run``. Does nothing by default."""
        return session

    @abstractmethod
    async def run(self, session: Session) -> Session:
        """Run the scenario's actions and return the final session."""

    @staticmethod
    def config(session: Session, key: str, default: Any = None) -> Any:
        return session.config.get(key, default)


def scenario_name(scenario: ScenarioLike) -> str:
    cls = scenario if isinstance(scenario, type) else type(scenario)
    return getattr(scenario, "name", None) or cls.__name__


async def execute(
    scenario: ScenarioLike,
    config: Mapping[str, Any],
    client: Any = None,
    logger: Optional[logging.Logger] = None,
) -> Session:
    """
    Run one scenario against a fresh session.

    Args:
        scenario: Scenario class or instance
        config: Session config; ``session_name`` overrides the generated name
        client: HTTP client attached to the session
        logger: Parent logger; the session gets a child logger of it

    Returns:
        The completed session
    """
    instance = scenario() if isinstance(scenario, type) else scenario
    name = config.get("session_name") or f"{scenario_name(instance)} {uuid.uuid4()}"
    parent = logger or logging.getLogger("loadenv")

    session = Session(
        name=name,
        config=config,
        client=client,
        logger=parent.getChild(f"session.{name}"),
    )

    session = await instance.init(session)
    result = await instance.run(session)
    if not isinstance(result, Session):
        raise TypeError(f"{scenario_name(instance)}.run() must return a Session, got {type(result).__name__}")
    return result
