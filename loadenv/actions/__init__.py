# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""Actions that scenarios run against their session."""

from .base import Action
from .delay import Delay
from .http import HTTPAction

__all__ = ["Action", "Delay", "HTTPAction"]
