"""
Bookshelf Backend — Password Primitive
========================================

What:  One-way hash for new passwords and the matching verify function.
How:   bcrypt with a per-hash random salt; the work factor comes from
       settings.bcrypt_rounds.
Who:   Called by the users controller (registration, login, password change).

Event loop note:
    bcrypt is deliberately slow (hundreds of ms at 12 rounds) and CPU-bound.
    Both functions run it in a worker thread via asyncio.to_thread so other
    requests keep being served while a hash is computed.

bcrypt only looks at the first 72 bytes of its input and current releases
reject longer input outright. Controllers refuse such passwords at
registration; verification simply reports them as not matching.
"""

import asyncio
import logging

import bcrypt

from bookshelf.config import settings

logger = logging.getLogger(__name__)

MAX_PASSWORD_BYTES = 72


def password_byte_length(password: str) -> int:
    return len(password.encode("utf-8"))


async def hash_password(password: str) -> str:
    """Returns the bcrypt hash of `password` as a str (e.g. '$2b$12$...')."""
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    hashed = await asyncio.to_thread(bcrypt.hashpw, password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


async def password_matched(password: str, hashed_password: str) -> bool:
    """
    Checks a plaintext password against a stored bcrypt hash.

    Returns False (never raises) for empty input, over-long input, or a
    stored value that is not a bcrypt hash.
    """
    if not password or not hashed_password:
        return False

    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        return False

    try:
        return await asyncio.to_thread(
            bcrypt.checkpw, encoded, hashed_password.encode("utf-8")
        )
    except ValueError:
        # Stored value is not a bcrypt hash (corrupt row or legacy import)
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False
