"""
HTTP/GraphQL request layer and security helpers for linear-cli.
"""

import hashlib
import json
import re
import sys
import time
import urllib.error
import urllib.request
import uuid

from linear_cli import config
from linear_cli.exceptions import API_ERROR, INVALID_INPUT, CliError, GraphQLError, HTTPError

# ---------------------------------------------------------------------------
# Security helpers
# ---------------------------------------------------------------------------


def _mask_token(token):
    """Show only first 8 chars of a key for safe display."""
    return token[:8] + "..." if len(token) > 8 else token


def _safe_json_parse(text, context="input"):
    """Parse JSON with friendly error message on failure."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise CliError(
            f"Invalid JSON in {context}: {e.msg} at position {e.pos}", INVALID_INPUT
        ) from None


def _sanitize_error(body, max_len=500):
    """Truncate and clean error body for safe display."""
    if not body:
        return ""
    cleaned = re.sub(r"<[^>]+>", "", body)
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    if len(cleaned) > max_len:
        return cleaned[:max_len] + "... [truncated]"
    return cleaned


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


def _log_http_event(**fields):
    """Emit structured HTTP logs to stderr when enabled."""
    if not config.HTTP_LOG_ENABLED:
        return
    print("[HTTP] " + json.dumps(fields, ensure_ascii=False, sort_keys=True), file=sys.stderr)


def _is_sampled_request(request_id):
    """Decide if a request should be logged based on sample rate."""
    rate = config.HTTP_LOG_SAMPLE_RATE
    if rate <= 0:
        return False
    if rate >= 1:
        return True
    if not request_id:
        return False
    digest = hashlib.sha256(request_id.encode("utf-8")).digest()
    bucket = int.from_bytes(digest[:4], "big") / 4294967295.0
    return bucket < rate


def warn(message):
    """Print an advisory line to stderr unless --quiet."""
    if config.RUNTIME_QUIET:
        return
    print(f"[WARN] {message}", file=sys.stderr)


# ---------------------------------------------------------------------------
# HTTP request layer
# ---------------------------------------------------------------------------


def _http_request(url, data=None, headers=None, method="POST", timeout=None):
    """Make one HTTP request. No retries.

    Returns parsed JSON on success.
    Raises HTTPError for non-2xx responses (body kept for the caller).
    Raises CliError(API_ERROR) for timeouts, connection and parse failures.
    """
    body = json.dumps(data).encode("utf-8") if data is not None else None
    request_id = (headers or {}).get("X-Request-Id")
    sampled = _is_sampled_request(request_id)
    timeout = max(1, timeout or config.HTTP_TIMEOUT_SECONDS)
    start = time.perf_counter()
    req = urllib.request.Request(url, data=body, headers=headers or {}, method=method)
    if sampled:
        _log_http_event(
            phase="request",
            method=method,
            url=url,
            request_id=request_id,
            timeout_seconds=timeout,
        )
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            content_type = resp.headers.get("Content-Type", "")
            raw = resp.read(config.HTTP_MAX_RESPONSE_BYTES + 1)
            if len(raw) > config.HTTP_MAX_RESPONSE_BYTES:
                raise CliError(
                    "Response too large from Linear API "
                    f"(>{config.HTTP_MAX_RESPONSE_BYTES} bytes).",
                    API_ERROR,
                )
            if sampled:
                _log_http_event(
                    phase="response",
                    method=method,
                    url=url,
                    status=getattr(resp, "status", 200),
                    content_type=content_type,
                    bytes=len(raw),
                    latency_ms=round((time.perf_counter() - start) * 1000, 2),
                    request_id=request_id,
                )
            try:
                return json.loads(raw.decode("utf-8"))
            except (json.JSONDecodeError, UnicodeDecodeError):
                raise CliError(
                    "Failed to parse Linear API response: not valid JSON "
                    f"(Content-Type: {content_type or 'unknown'}).",
                    API_ERROR,
                ) from None
    except urllib.error.HTTPError as e:
        error_body = (
            e.read(config.HTTP_MAX_RESPONSE_BYTES).decode("utf-8", errors="replace")
            if e.fp
            else ""
        )
        if sampled:
            _log_http_event(
                phase="response",
                method=method,
                url=url,
                status=e.code,
                latency_ms=round((time.perf_counter() - start) * 1000, 2),
                request_id=request_id,
            )
        raise HTTPError(e.code, e.reason, error_body, headers=e.headers) from e
    except TimeoutError as e:
        if sampled:
            _log_http_event(
                phase="network_error",
                method=method,
                url=url,
                error="timeout",
                request_id=request_id,
            )
        raise CliError(f"Request timed out after {timeout} seconds", API_ERROR) from e
    except urllib.error.URLError as e:
        if sampled:
            _log_http_event(
                phase="network_error",
                method=method,
                url=url,
                error=f"url_error: {e.reason}",
                request_id=request_id,
            )
        if isinstance(e.reason, TimeoutError):
            raise CliError(f"Request timed out after {timeout} seconds", API_ERROR) from e
        raise CliError(f"Connection failed: {e.reason}", API_ERROR) from e


def _graphql_errors_from_body(body):
    """Return the GraphQL ``errors`` list inside an error body, if any."""
    try:
        parsed = json.loads(body)
    except (TypeError, ValueError):
        return None
    if isinstance(parsed, dict) and parsed.get("errors"):
        return parsed["errors"]
    return None


def graphql_request(query, variables=None, *, api_key, timeout=None):
    """POST a GraphQL document and return its ``data`` object.

    HTTP failures raise HTTPError / GraphQLError whose message carries the
    status, so the error classifier can tell auth, not-found and rate-limit
    failures apart. A non-GraphQL error body is cleaned and kept on the
    HTTPError as ``details``.
    """
    headers = {
        "Authorization": api_key,
        "Content-Type": "application/json",
        "Accept": "application/json",
        "X-Request-Id": str(uuid.uuid4()),
    }
    payload = {"query": query}
    if variables:
        payload["variables"] = variables
    try:
        result = _http_request(config.API_URL, payload, headers, timeout=timeout)
    except HTTPError as e:
        errors = _graphql_errors_from_body(e.body)
        if errors:
            raise GraphQLError(
                f"Request failed with status {e.code}: {errors[0].get('message', e.reason)}",
                errors=errors,
                status=e.code,
            ) from e
        detail = _sanitize_error(e.body)
        if detail:
            e.details = {"status": e.code, "body": detail}
        raise

    if not isinstance(result, dict):
        raise CliError(
            "Unexpected GraphQL response shape: "
            f"expected JSON object, got {type(result).__name__}.",
            API_ERROR,
        )
    errors = result.get("errors")
    if errors:
        raise GraphQLError(errors[0].get("message", "GraphQL error"), errors=errors)
    return result.get("data") or {}
