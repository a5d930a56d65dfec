"""Redaction of sensitive data in error messages and log payloads.

Node credentials reach error messages in many shapes: certificate and
macaroon paths, environment assignments, LNC connection strings. Every
message that leaves the core (log line or response payload) goes through
``sanitize_error_message`` first.
"""

import re
from collections.abc import Mapping
from typing import Any

from lnquery.exceptions import LNQueryError

REDACTED = "[REDACTED]"

# Substrings that mark a field name as sensitive (case-insensitive).
SENSITIVE_FIELD_PATTERNS = (
    # Authentication/credential patterns
    "password",
    "secret",
    "token",
    "key",
    "credential",
    "auth",
    # gRPC connection patterns
    "cert",
    "macaroon",
    "tls",
    # LNC connection patterns
    "connectionstring",
    "connection_string",
    "pairingphrase",
    "pairing_phrase",
    # Generic
    "private",
    "apikey",
)

# Field names that contain a sensitive fragment but are public identifiers.
PUBLIC_FIELD_NAMES = frozenset({"pubkey", "remote_pubkey", "public_key", "remotepubkey"})

_URL_PATTERN = re.compile(r"\b[a-zA-Z][a-zA-Z0-9+.\-]*://\S+")
_ENV_ASSIGNMENT_PATTERN = re.compile(
    r"\b([A-Za-z0-9_]*(?:CERT|MACAROON|KEY|SECRET|TOKEN|PASSWORD|CREDENTIAL|CONNECTION_STRING|PAIRING)"
    r"[A-Za-z0-9_]*)\s*=\s*\S+",
    re.IGNORECASE,
)
_LNC_PATTERN = re.compile(
    r"\b(pairing[ _]?phrase|connection[ _]?string)(\s*[:=]\s*)(\"[^\"]*\"|'[^']*'|\S+)",
    re.IGNORECASE,
)
_LONG_HEX_PATTERN = re.compile(r"\b[0-9a-fA-F]{100,}\b")
_UNIX_PATH_PATTERN = re.compile(r"(?<![\w./:\-])(?:/[^\s/:;,'\"()\[\]]+)+/?")
_WINDOWS_PATH_PATTERN = re.compile(r"\b[a-zA-Z]:\\[^\s'\"]+")
_FILE_EXTENSION_PATTERN = re.compile(r"\.[a-zA-Z0-9]+$")


def is_sensitive_field(field_name: str) -> bool:
    """Return True if a field name looks like it holds a secret."""
    lowered = field_name.lower()
    if lowered in PUBLIC_FIELD_NAMES:
        return False
    return any(pattern in lowered for pattern in SENSITIVE_FIELD_PATTERNS)


def _path_placeholder(path: str) -> str | None:
    lowered = path.lower()
    if "macaroon" in lowered:
        return "[REDACTED_MACAROON_PATH]"
    if "cert" in lowered or "tls" in lowered:
        return "[REDACTED_CERT_PATH]"
    if "key" in lowered:
        return "[REDACTED_KEY_PATH]"
    if any(word in lowered for word in ("secret", "token", "password", "credential")):
        return "[REDACTED_CREDENTIAL]"
    segments = [segment for segment in re.split(r"[\\/]", path) if segment]
    if len(segments) >= 2 or _FILE_EXTENSION_PATTERN.search(path.rstrip("\\/")):
        return "[REDACTED_PATH]"
    return None


def _env_placeholder(name: str) -> str:
    upper = name.upper()
    if "MACAROON" in upper:
        return "[REDACTED_MACAROON_PATH]"
    if "CERT" in upper:
        return "[REDACTED_CERT_PATH]"
    if "KEY" in upper:
        return "[REDACTED_KEY_PATH]"
    return "[REDACTED_CREDENTIAL]"


def _redact_path(match: re.Match[str]) -> str:
    placeholder = _path_placeholder(match.group(0))
    return placeholder if placeholder else match.group(0)


def sanitize_error_message(message: str) -> str:
    """Redact credentials, connection strings and file paths from a message.

    Args:
        message: Raw error message

    Returns:
        Message safe for logs and user-facing payloads

    Example:
        >>> sanitize_error_message("TLS certificate file not found at: /home/u/.lnd/tls.cert")
        'TLS certificate file not found at: [REDACTED_CERT_PATH]'
    """
    if not message:
        return message

    sanitized = _URL_PATTERN.sub("[REDACTED_URL]", message)
    sanitized = _LNC_PATTERN.sub(lambda m: f"{m.group(1)}{m.group(2)}{REDACTED}", sanitized)
    sanitized = _ENV_ASSIGNMENT_PATTERN.sub(lambda m: _env_placeholder(m.group(1)), sanitized)
    sanitized = _LONG_HEX_PATTERN.sub("[REDACTED_MACAROON]", sanitized)
    sanitized = _WINDOWS_PATH_PATTERN.sub(_redact_path, sanitized)
    sanitized = _UNIX_PATH_PATTERN.sub(_redact_path, sanitized)
    return sanitized


class SanitizedError(LNQueryError):
    """Error whose message has been through ``sanitize_error_message``.

    Keeps the original exception class name for diagnostics, never the
    original exception object itself.
    """

    def __init__(self, message: str, *, error_type: str) -> None:
        super().__init__(message)
        self.error_type = error_type

    def __str__(self) -> str:
        return self.message


def error_message(error: BaseException) -> str:
    """Extract the bare message of an exception (without context decoration)."""
    if isinstance(error, LNQueryError):
        return error.message
    text = str(error)
    return text if text else type(error).__name__


def sanitize_error(error: BaseException) -> SanitizedError:
    """Build a sanitized copy of an exception."""
    if isinstance(error, SanitizedError):
        return error
    return SanitizedError(
        sanitize_error_message(error_message(error)),
        error_type=type(error).__name__,
    )


def sanitize_for_logging(data: Any) -> Any:
    """Redact every sensitive field (any value type) in a nested mapping."""
    if not isinstance(data, Mapping):
        return data

    sanitized: dict[str, Any] = {}
    for key, value in data.items():
        if is_sensitive_field(str(key)):
            sanitized[key] = REDACTED
        elif isinstance(value, Mapping):
            sanitized[key] = sanitize_for_logging(value)
        else:
            sanitized[key] = value
    return sanitized
