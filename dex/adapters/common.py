"""
dex/adapters/common.py - Response handling shared by HTTP quote venues.
"""

from decimal import Decimal
from typing import Any

import httpx

from core.constants import ErrorCode
from core.exceptions import QuoteFetchError, ValidationError
from core.math import parse_base_units, safe_decimal


def error_payload(resp: httpx.Response) -> Any:
    """Venue error body: parsed JSON when possible, else text."""
    try:
        return resp.json()
    except ValueError:
        return resp.text or None


def raise_for_quote_status(resp: httpx.Response, venue: str, chain: str) -> None:
    """
    Raise QuoteFetchError for a non-2xx venue response.

    The venue's error payload travels with the exception.
    """
    if resp.is_success:
        return
    payload = error_payload(resp)
    reason = ""
    if isinstance(payload, dict):
        reason = payload.get("reason") or payload.get("error") or payload.get("message") or ""
    raise QuoteFetchError(
        f"{venue} quote failed on {chain}: HTTP {resp.status_code} {reason}".rstrip(),
        venue=venue,
        code=ErrorCode.QUOTE_HTTP_ERROR,
        payload=payload,
        details={"chain": chain, "status_code": resp.status_code},
    )


def json_body(resp: httpx.Response, venue: str, chain: str) -> dict:
    """Parse a 2xx venue body into a dict or raise QuoteFetchError."""
    try:
        data = resp.json()
    except ValueError:
        raise QuoteFetchError(
            f"{venue} returned a non-JSON body on {chain}",
            venue=venue,
            code=ErrorCode.QUOTE_MALFORMED_RESPONSE,
            payload=resp.text[:500] or None,
            details={"chain": chain},
        )
    if not isinstance(data, dict):
        raise QuoteFetchError(
            f"{venue} returned a non-object body on {chain}",
            venue=venue,
            code=ErrorCode.QUOTE_MALFORMED_RESPONSE,
            payload=data,
            details={"chain": chain},
        )
    return data


def required_amount(data: dict, key: str, venue: str, chain: str) -> str:
    """Base-unit amount field that must be present and well-formed."""
    value = data.get(key)
    if value is None:
        raise QuoteFetchError(
            f"{venue} response on {chain} has no {key}",
            venue=venue,
            code=ErrorCode.QUOTE_MALFORMED_RESPONSE,
            payload=data,
            details={"chain": chain, "missing": key},
        )
    try:
        return parse_base_units(value, key)
    except ValidationError as e:
        raise QuoteFetchError(
            f"{venue} response on {chain} has invalid {key}: {value!r}",
            venue=venue,
            code=ErrorCode.QUOTE_MALFORMED_RESPONSE,
            payload=data,
            details={"chain": chain, "field": key, "error": e.message},
        )


def optional_int(data: dict, *keys: str) -> int | None:
    """First present key parsed as a base-unit int, or None."""
    for key in keys:
        value = data.get(key)
        if value is None or value == "":
            continue
        try:
            return int(parse_base_units(value, key))
        except ValidationError:
            return None
    return None


def optional_decimal(data: dict, key: str) -> Decimal | None:
    """Numeric field parsed as Decimal, or None when absent/unparseable."""
    value = data.get(key)
    if value is None or value == "":
        return None
    try:
        # JSON numbers arrive as float; go through str to keep the digits sent
        return safe_decimal(str(value))
    except ValidationError:
        return None
