"""Response error extraction for load test observability.

Parses shipment API error responses into human-readable messages.
Handles three response shapes:

- Pydantic validation (422): {"detail": [{"loc": [...], "msg": "...", "type": "..."}]}
- Role checks (403): {"detail": "Forbidden: insufficient role"}
- Domain errors (400/404/409/500): {"error": {"code": "...", "message": "...", "details": {...}}}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response.

    Returns a compact string suitable for Locust failure messages and log lines.
    """
    try:
        body = response.json()
    except ValueError:
        # Not JSON: return raw text, truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if "detail" in body:
        detail = body["detail"]
        if isinstance(detail, list):
            parts = []
            for err in detail:
                loc = ".".join(str(p) for p in err.get("loc", []))
                msg = err.get("msg", str(err))
                parts.append(f"{loc}: {msg}" if loc else msg)
            return " | ".join(parts)
        return str(detail)

    error = body.get("error")
    if isinstance(error, dict):
        return f"{error.get('code', 'ERROR')}: {error.get('message', '')}"
    if error is not None:
        return str(error)

    # Unknown shape: stringify and truncate
    return str(body)[:300]
