# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Action protocol.

An action is one discrete unit of work a scenario runs against its session.
Any type implementing ``run`` and ``abort`` can be used; the environment
never inspects actions itself.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Tuple

if TYPE_CHECKING:
    from ..session import Session


class Action(ABC):
    """Base class for actions run inside a scenario."""

    @abstractmethod
    async def run(self, session: "Session") -> "Session":
        """
        Run the action.

        Args:
            session: Session owned by the calling scenario

        Returns:
            The session with the action's metrics and results recorded

        Raises:
            ActionError: The action failed; the session is left untouched
        """

    async def abort(self, session: "Session") -> Tuple["Action", "Session"]:
        """Abort the action. Nothing to undo by default."""
        return self, session
