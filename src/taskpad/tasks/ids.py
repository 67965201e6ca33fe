# src/taskpad/tasks/ids.py

"""
Task id generation.

The strategy is chosen once at startup (select_id_factory) and then injected
into TaskStore, rather than checked on every call.
"""

from __future__ import annotations

import logging
import os
import random
import secrets
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(n: int) -> str:
    if n <= 0:
        return "0"
    out: list[str] = []
    while n:
        n, rem = divmod(n, 36)
        out.append(_BASE36[rem])
    return "".join(reversed(out))


def secure_hex_id() -> str:
    """16 random bytes from the OS CSPRNG as 32 lowercase hex chars."""
    return secrets.token_hex(16)


def fallback_id() -> str:
    """Pseudo-random part + epoch milliseconds, both in base 36."""
    return _to_base36(random.getrandbits(52)) + _to_base36(int(time.time() * 1000))


def secure_random_available() -> bool:
    try:
        os.urandom(1)
    except NotImplementedError:
        return False
    return True


def select_id_factory(strategy: str = "auto") -> IdFactory:
    """
    Pick the id generator for this process.

    auto     -> secure when the OS provides a random source, else fallback
    secure   -> always secure_hex_id
    fallback -> always fallback_id
    """
    strategy = (strategy or "auto").strip().lower()

    if strategy == "secure":
        return secure_hex_id
    if strategy == "fallback":
        logger.info("Using fallback task id generator (forced).")
        return fallback_id
    if strategy == "auto":
        if secure_random_available():
            return secure_hex_id
        logger.warning("No secure random source available; using fallback task ids.")
        return fallback_id

    raise ValueError(f"Unknown id strategy: {strategy!r}")
