# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from .base import ValidationError


def _field_path(loc: tuple[int | str, ...]) -> str:
    return ".".join(str(part) for part in loc) or "body"


def format_pydantic_errors(exc: PydanticValidationError) -> dict[str, Any]:
    """Field names and error types only; submitted values (passwords) are dropped."""
    errors = [
        {"field": _field_path(err["loc"]), "type": err["type"]}
        for err in exc.errors(include_input=False, include_url=False, include_context=False)
    ]
    return {"fields": sorted({e["field"] for e in errors}), "errors": errors}


def validation_error_from(exc: PydanticValidationError) -> ValidationError:
    return ValidationError(context=format_pydantic_errors(exc))


__all__ = ["format_pydantic_errors", "validation_error_from"]
