# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Wire conventions shared by every TickerLens response body.

Field names go out in camelCase (``week52High``, ``filerId``), unknown input
keys are rejected, and a non-finite float (a ratio over a zero divisor that
slipped through) is written as ``null`` rather than breaking the JSON.

Layer: adapters/schemas/http
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseHTTPSchema(BaseModel):
    """Base class for HTTP response schemas."""

    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        str_strip_whitespace=True,
        alias_generator=to_camel,
        ser_json_inf_nan="null",
        use_enum_values=True,
    )

    def model_dump_http(self, **kwargs: Any) -> dict[str, Any]:
        """Dump with wire (camelCase) names in JSON mode."""
        return self.model_dump(mode="json", by_alias=True, **kwargs)
