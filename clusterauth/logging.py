"""
clusterauth logging utilities.

Provides configurable logging for HTTP requests/responses and session
credential changes. Ensures no bearer tokens, proofs or one-time codes are
logged.
"""

import logging
import re
from typing import Any

# Create package-specific loggers
_sdk_logger = logging.getLogger("clusterauth")
_http_logger = logging.getLogger("clusterauth.http")
_session_logger = logging.getLogger("clusterauth.session")

# Patterns for sensitive data that should be masked
_SENSITIVE_PATTERNS = [
    # Bearer tokens in headers
    (re.compile(r"(Bearer\s+)[A-Za-z0-9._~+/=-]+", re.IGNORECASE), r"\1[REDACTED]"),
    # JSON fields carrying credentials
    (
        re.compile(
            r'"(token|sessionToken|session_token|externalProof|oneTimeCode)"\s*:\s*"[^"]*"'
        ),
        r'"\1": "[REDACTED]"',
    ),
    # Secret/token patterns
    (re.compile(r"(secret|token|password|code)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE), r"\1: [REDACTED]"),
]

# Keys whose values are always masked by safe_log_dict
_SENSITIVE_KEYS = {
    "authorization",
    "token",
    "session_token",
    "sessiontoken",
    "externalproof",
    "external_proof",
    "onetimecode",
    "one_time_code",
    "password",
    "secret",
}

# Number of characters shown at each end of a truncated token
_TOKEN_PREVIEW_LENGTH = 4


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    session_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Configure clusterauth logging.

    Args:
        level: Default log level for all clusterauth loggers (default: INFO)
        http_level: Log level for HTTP request/response logging (default: same as level)
        session_level: Log level for credential events (default: same as level)
        handler: Custom handler to use (default: StreamHandler to stderr)
        format_string: Custom format string (default: includes timestamp, level, logger name)

    Example:
        ```python
        import logging
        from clusterauth.logging import configure_logging

        # Enable debug logging for HTTP requests
        configure_logging(level=logging.INFO, http_level=logging.DEBUG)
        ```
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    formatter = logging.Formatter(format_string)

    if handler is None:
        handler = logging.StreamHandler()

    handler.setFormatter(formatter)

    _sdk_logger.setLevel(level)
    _sdk_logger.addHandler(handler)

    _http_logger.setLevel(http_level if http_level is not None else level)
    _session_logger.setLevel(session_level if session_level is not None else level)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a clusterauth logger.

    Args:
        name: Logger name suffix (e.g., "http", "session"). If None, returns main logger.

    Returns:
        Logger instance
    """
    if name is None:
        return _sdk_logger
    return logging.getLogger(f"clusterauth.{name}")


def mask_sensitive_data(text: str) -> str:
    """
    Mask sensitive data in a string.

    Args:
        text: Text that may contain tokens or proofs

    Returns:
        Text with sensitive data masked
    """
    result = text
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def truncate_token(token: str) -> str:
    """
    Truncate a token for safe display.

    Short tokens are fully redacted; longer ones keep a few characters at
    each end, like "abcd...wxyz".
    """
    if len(token) <= _TOKEN_PREVIEW_LENGTH * 4:
        return "[REDACTED]"

    return f"{token[:_TOKEN_PREVIEW_LENGTH]}...{token[-_TOKEN_PREVIEW_LENGTH:]}"


def safe_log_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """
    Create a copy of a dictionary with sensitive values masked.

    Args:
        data: Dictionary that may contain sensitive values
        sensitive_keys: Lowercased keys to mask (default: tokens, proofs, codes, secrets)

    Returns:
        Dictionary with sensitive values replaced with "[REDACTED]"
    """
    if sensitive_keys is None:
        sensitive_keys = _SENSITIVE_KEYS

    result: dict[str, Any] = {}
    for key, value in data.items():
        key_lower = key.lower()
        if key_lower in sensitive_keys:
            result[key] = "[REDACTED]"
        elif isinstance(value, dict):
            result[key] = safe_log_dict(value, sensitive_keys)
        elif isinstance(value, list):
            result[key] = [
                safe_log_dict(item, sensitive_keys) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            result[key] = value

    return result


def log_http_request(
    method: str,
    url: str,
    headers: dict[str, str] | None = None,
    body: dict[str, Any] | None = None,
) -> None:
    """Log an HTTP request at DEBUG level with sensitive data masked."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"{method} {url}"]

    if headers:
        log_parts.append(f"headers={safe_log_dict(headers)}")

    if body:
        log_parts.append(f"body={safe_log_dict(body)}")

    _http_logger.debug(mask_sensitive_data(" | ".join(log_parts)))


def log_http_response(
    status_code: int,
    url: str,
    body: dict[str, Any] | None = None,
    elapsed_ms: float | None = None,
) -> None:
    """Log an HTTP response at DEBUG level with sensitive data masked."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"Response {status_code} from {url}"]

    if elapsed_ms is not None:
        log_parts.append(f"elapsed={elapsed_ms:.2f}ms")

    if body:
        log_parts.append(f"body={safe_log_dict(body)}")

    _http_logger.debug(mask_sensitive_data(" | ".join(log_parts)))


def log_credential_event(
    operation: str, subject: str | None, token: str | None = None
) -> None:
    """
    Log a change to the stored credential at DEBUG level.

    The token, if given, is logged only in truncated form.

    Args:
        operation: Operation type (e.g., "write", "clear")
        subject: Subject the credential belongs to, if known
        token: The credential's token
    """
    if not _session_logger.isEnabledFor(logging.DEBUG):
        return

    message = f"credential {operation}: subject={subject or '<unknown>'}"
    if token:
        message += f" token={truncate_token(token)}"
    _session_logger.debug(message)


__all__ = [
    "configure_logging",
    "get_logger",
    "mask_sensitive_data",
    "truncate_token",
    "safe_log_dict",
    "log_http_request",
    "log_http_response",
    "log_credential_event",
]
