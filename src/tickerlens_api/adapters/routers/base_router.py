# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Versioned resource router.

Every ``/v1/<resource>`` router is a :class:`BaseRouter`: the prefix is derived
from the version and resource name, and the error envelope is documented
for each status a symbol-keyed lookup can produce, so individual routes only
declare their success model.

Layer:
    adapters/routers
"""

from __future__ import annotations

from typing import Any, Final

from fastapi import APIRouter

from tickerlens_api.adapters.schemas.http.envelopes import ErrorEnvelope

API_VERSION: Final[str] = "v1"

ERROR_STATUSES: Final[dict[int, str]] = {
    400: "Missing or malformed query parameter (INVALID_INPUT).",
    404: "Symbol has no filer identity (NOT_FOUND).",
    422: "Query parameter has the wrong type (VALIDATION_ERROR).",
    500: "Result could not be assembled (AGGREGATION_FAILURE / INTERNAL_ERROR).",
    503: "An upstream provider failed or is not configured (UPSTREAM_*).",
}


class BaseRouter(APIRouter):
    """APIRouter mounted at ``/{version}/{resource}`` with documented errors."""

    def __init__(self, *, resource: str, version: str = API_VERSION, **kwargs: Any) -> None:
        responses = {**self.std_error_responses(), **kwargs.pop("responses", {})}
        kwargs.setdefault("tags", [resource.capitalize()])
        super().__init__(prefix=f"/{version}/{resource}", responses=responses, **kwargs)

    @staticmethod
    def std_error_responses() -> dict[int | str, dict[str, Any]]:
        """Return the OpenAPI ``responses`` mapping for the error envelope."""
        return {
            status: {"model": ErrorEnvelope, "description": description}
            for status, description in ERROR_STATUSES.items()
        }
