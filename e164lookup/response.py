# file: e164lookup/response.py
"""
Normalized lookup result.

Every lookup produces exactly one `LookupResult`, whatever happened on the
wire. Known payload fields are flattened onto the result; the payload record
itself is kept unmodified in `data`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

LOOKUP_FIELDS: tuple[str, ...] = (
    "prefix",
    "calling_code",
    "iso3",
    "tadig",
    "mccmnc",
    "type",
    "location",
    "operator_brand",
    "operator_company",
    "total_length_min",
    "total_length_max",
    "weight",
    "source",
)

INVALID_INPUT_ERROR = "Invalid phone number format provided."
NOT_FOUND_ERROR = "Phone number not found or invalid."
UNEXPECTED_FORMAT_ERROR = "Received unexpected data format from API."
GENERIC_LOOKUP_ERROR = "An unexpected error occurred during lookup."


def flatten_payload(data: Mapping[str, Any] | None) -> dict[str, Any]:
    """
    Project a loosely-typed payload onto the known lookup fields.

    Missing (or falsy) values become None.
    """

    if not isinstance(data, Mapping):
        return {name: None for name in LOOKUP_FIELDS}
    return {name: data.get(name) or None for name in LOOKUP_FIELDS}


def _derive_category(result: LookupResult) -> str:
    if 200 <= result.status_code < 300:
        return "ok"
    if result.status_code == 400 and result.raw_response is None:
        return "input"
    if result.status_code == 404:
        return "not_found"
    if result.error == UNEXPECTED_FORMAT_ERROR:
        return "format"
    if result.raw_response is None:
        return "transport"
    return "upstream"


@dataclass(frozen=True, slots=True)
class LookupResult:
    """
    Outcome of a single lookup.

    Fields:
        status_code: Effective HTTP status (may be synthesized: 400, 404, 500).
        data: Payload record on success, else None.
        error: Human-readable failure reason, None on success.
        raw_response: Transport response kept for diagnostics (may be None).
        category: ok, input, not_found, upstream, format or transport. Derived
            from the status when not given.
    """

    status_code: int
    data: dict[str, Any] | None = None
    error: str | None = None
    raw_response: Any = field(default=None, repr=False, compare=False)
    category: str | None = field(default=None, compare=False)

    prefix: str | None = field(init=False, default=None)
    calling_code: str | None = field(init=False, default=None)
    iso3: str | None = field(init=False, default=None)
    tadig: str | None = field(init=False, default=None)
    mccmnc: str | None = field(init=False, default=None)
    type: str | None = field(init=False, default=None)
    location: str | None = field(init=False, default=None)
    operator_brand: str | None = field(init=False, default=None)
    operator_company: str | None = field(init=False, default=None)
    total_length_min: str | None = field(init=False, default=None)
    total_length_max: str | None = field(init=False, default=None)
    weight: str | None = field(init=False, default=None)
    source: str | None = field(init=False, default=None)

    def __post_init__(self) -> None:
        # Frozen dataclass: flattened fields are filled in once, here.
        for name, value in flatten_payload(self.data).items():
            object.__setattr__(self, name, value)
        if self.category is None:
            object.__setattr__(self, "category", _derive_category(self))

    @classmethod
    def success(cls, status_code: int, data: dict[str, Any], raw_response: Any) -> LookupResult:
        return cls(status_code, data, None, raw_response, "ok")

    @classmethod
    def failure(
        cls,
        status_code: int,
        error: str,
        raw_response: Any = None,
        category: str | None = None,
    ) -> LookupResult:
        return cls(status_code, None, error, raw_response, category)

    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def fields(self) -> dict[str, str | None]:
        return {name: getattr(self, name) for name in LOOKUP_FIELDS}

    def to_dict(self) -> dict[str, Any]:
        return {
            "status_code": self.status_code,
            "success": self.is_success(),
            "error": self.error,
            "category": self.category,
            "fields": self.fields(),
            "data": self.data,
        }
