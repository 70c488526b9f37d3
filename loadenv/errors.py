# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""Exceptions raised by loadenv."""

from typing import Any, Optional


class LoadEnvError(Exception):
    """Base class for all loadenv errors."""


class ConfigError(LoadEnvError, ValueError):
    """Invalid environment, scenario or action configuration."""


class EmptyMergeError(LoadEnvError, ValueError):
    """merge_sessions() was called without any session."""

    def __init__(self):
        super().__init__("merge_sessions() requires at least one session")


class HTTPClientError(LoadEnvError):
    """Transport-level failure reported by an HTTP client."""

    def __init__(self, reason: Any, method: str = "", url: str = ""):
        self.reason = reason
        self.method = method
        self.url = url
        super().__init__(f"{method.upper()} {url} failed: {reason!r}")


class ActionError(LoadEnvError):
    """
    A single action failed.

    The session is the state at the time of failure; it is left untouched by
    the failing action so scenario logic can retry or continue with it.
    """

    def __init__(self, reason: Any, action: Any, session: Any):
        self.reason = reason
        self.action = action
        self.session = session
        super().__init__(f"Action {action} failed: {reason!r}")


class ScenarioTimeoutError(LoadEnvError):
    """A scenario did not finish within its configured scenario_timeout."""

    def __init__(self, session_name: Optional[str], scenario: Any, timeout: float):
        self.session_name = session_name
        self.scenario = scenario
        self.timeout = timeout
        label = session_name or getattr(scenario, "__name__", repr(scenario))
        super().__init__(f"Scenario {label} timed out after {timeout}s")
