"""
Helper functions for common infrastructure operations.

This module provides domain-agnostic utility functions for:
- Object id generation and validation (24-character hex identifiers)
- HTTP request helpers (client IP extraction)

Object ids:
    Every public identifier in the system is a 12-byte value encoded as 24
    lowercase hex characters:

        4 bytes  big-endian unix timestamp (seconds)
        5 bytes  random value chosen once per process
        3 bytes  incrementing counter, starting at a random value

    Ids generated by one process therefore sort by creation time.

Usage:
    from core.helpers import generate_object_id, is_object_id

    chat_id = generate_object_id()  # "65f1c0de9a1b2c3d4e5f6a7b"
    is_object_id("A1A1A1A1A1A1A1A1A1A1A1A1")  # True
"""

from __future__ import annotations

import itertools
import os
import re
import secrets
import threading
import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from django.http import HttpRequest

OBJECT_ID_PATTERN = re.compile(r"\A[0-9a-fA-F]{24}\Z")

_process_unique = secrets.token_bytes(5)
_process_pid = os.getpid()
_counter = itertools.count(secrets.randbelow(0xFFFFFF))
_counter_lock = threading.Lock()


def generate_object_id() -> str:
    """
    Generate a new 24-character lowercase hex object id.

    Returns:
        Hex string built from timestamp, process value and counter
    """
    global _process_unique, _process_pid

    # Forked workers must not share the parent's process value
    if os.getpid() != _process_pid:
        _process_pid = os.getpid()
        _process_unique = secrets.token_bytes(5)

    with _counter_lock:
        count = next(_counter) & 0xFFFFFF

    timestamp = int(time.time()) & 0xFFFFFFFF
    raw = timestamp.to_bytes(4, "big") + _process_unique + count.to_bytes(3, "big")
    return raw.hex()


def is_object_id(value: object) -> bool:
    """
    Check if value is a well-formed object id.

    Accepts upper- and lowercase hex.

    Args:
        value: Value to check

    Returns:
        True if value is a 24-character hex string
    """
    return isinstance(value, str) and bool(OBJECT_ID_PATTERN.match(value))


def normalize_object_id(value: str) -> str:
    """Return the canonical (lowercase) form of an object id."""
    return value.lower()


def get_client_ip(request: HttpRequest) -> str:
    """
    Extract client IP address from request.

    Handles X-Forwarded-For header for requests behind proxies/load balancers.

    Args:
        request: Django HTTP request

    Returns:
        Client IP address string
    """
    x_forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR")
    if x_forwarded_for:
        # Take the first IP in the chain (original client)
        return x_forwarded_for.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR", "")
