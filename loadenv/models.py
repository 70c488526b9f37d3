# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Data models exchanged with the HTTP client.

Responses are recorded as session results, so they are plain immutable
values that do not hold on to any connection.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(frozen=True)
class HTTPResponse:
    """Response returned by an HTTP client - status, headers and raw body."""

    status: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Decode the body as JSON."""
        return json.loads(self.body)
