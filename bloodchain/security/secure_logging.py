"""
Secure Logging Utilities for BloodChain

Wallet addresses, token ids, locations and other request values are user
controlled. This module sanitizes them before they reach the logs and provides
a structured JSON logger for audit records of state-changing operations.
"""

import logging
import json
from collections.abc import Mapping
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any


MAX_LOGGED_LENGTH = 200

# C0 control characters and DEL
_CONTROL_ESCAPES = {code: f"\\x{code:02x}" for code in (*range(0x20), 0x7f)}
_CONTROL_ESCAPES.update({ord("\n"): "\\n", ord("\r"): "\\r", ord("\t"): "\\t"})


def _escape_text(text: str) -> str:
    text = text.translate(_CONTROL_ESCAPES)
    if len(text) > MAX_LOGGED_LENGTH:
        return f"{text[:MAX_LOGGED_LENGTH]}...[truncated]"
    return text


def sanitize_for_log(value: Any) -> str:
    """
    Render a client-supplied value as a single bounded line for the logs.

    Strings are escaped and truncated. Mappings and sequences become JSON with
    every member sanitized the same way.
    """
    if value is None:
        return "null"

    if isinstance(value, (bool, int, float, Decimal)):
        return str(value)

    if isinstance(value, Mapping):
        return json.dumps(
            {str(key): sanitize_for_log(item) for key, item in value.items()},
            ensure_ascii=True,
        )

    if isinstance(value, (list, tuple, set, frozenset)):
        return json.dumps([sanitize_for_log(item) for item in value], ensure_ascii=True)

    return _escape_text(str(value))


def configure_logging(level: str = "INFO", log_format: str | None = None):
    """Configure root logging for the server process"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=log_format or "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


class SecureLogger:
    """
    Logger wrapper that writes sanitized, JSON-structured audit records.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)
        self.name = name

    def audit(self, action: str, resource: str, success: bool = True, **kwargs: Any):
        """
        Log an audit record for a state-changing operation.

        Args:
            action: Action performed (e.g., "create", "update")
            resource: Resource affected (e.g., "donor", "nft_certificate")
            success: Whether the action was successful
            **kwargs: Additional context
        """
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "type": "audit",
            "action": sanitize_for_log(action),
            "resource": sanitize_for_log(resource),
            "success": success,
            "logger": self.name,
        }

        if kwargs:
            log_entry["details"] = {
                k: sanitize_for_log(v) for k, v in kwargs.items()
            }

        structured = json.dumps(log_entry, ensure_ascii=True)
        if success:
            self.logger.info(structured)
        else:
            self.logger.warning(structured)
