# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""loadenv - run load-generation scenarios concurrently and merge their sessions."""

from .actions import Action, Delay, HTTPAction
from .environment import Environment, EnvironmentBuilder, ScenarioRun, merge_sessions
from .errors import (
    ActionError,
    ConfigError,
    EmptyMergeError,
    HTTPClientError,
    LoadEnvError,
    ScenarioTimeoutError,
)
from .http_client import HTTPClient, HTTPXClient
from .models import HTTPResponse
from .scenario import Scenario, execute
from .session import Session
from .timing import NO_TIMEOUT

__all__ = [
    "Action",
    "ActionError",
    "ConfigError",
    "Delay",
    "EmptyMergeError",
    "Environment",
    "EnvironmentBuilder",
    "HTTPAction",
    "HTTPClient",
    "HTTPClientError",
    "HTTPResponse",
    "HTTPXClient",
    "LoadEnvError",
    "NO_TIMEOUT",
    "Scenario",
    "ScenarioRun",
    "ScenarioTimeoutError",
    "Session",
    "execute",
    "merge_sessions",
]
