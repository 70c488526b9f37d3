# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""Pause a scenario for a fixed duration."""

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .base import Action

if TYPE_CHECKING:
    from ..session import Session


@dataclass
class Delay(Action):
    """Action that sleeps for ``duration`` seconds without recording anything."""

    duration: float = 0.0

    async def run(self, session: "Session") -> "Session":
        if self.duration > 0:
            await asyncio.sleep(self.duration)
        return session

    def __str__(self) -> str:
        return f"DELAY {self.duration}s"
