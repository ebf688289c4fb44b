# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations


class InvariantViolation(ValueError):
    """A domain value was constructed in a state it must never be in."""

    def __init__(self, entity: str, field: str, problem: str) -> None:
        super().__init__(f"{entity}.{field}: {problem}")
        self.entity = entity
        self.field = field
