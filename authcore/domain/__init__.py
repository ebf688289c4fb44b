# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .exceptions import InvariantViolation
from .users.entities import Claims, IssuedToken, User

__all__ = [
    "Claims",
    "InvariantViolation",
    "IssuedToken",
    "User",
]
