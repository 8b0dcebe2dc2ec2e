"""
Bookshelf Backend — Ordered Validation Chains
===============================================

What:  Runs a list of rules in order and raises the first one that fails.
Why:   Every handler validates the same way: presence checks, then lookups,
       then cross-field comparisons, stopping at the first problem. Writing
       the rules as data keeps the order visible in one place per handler.
How:   A Rule pairs a zero-argument predicate with the error category and
       message to report. Predicates may be plain functions or coroutines;
       they are only called once every earlier rule has passed, so a rule
       that hits the database never runs after a cheap check has failed.

Example:
    await validate([
        Rule(lambda: bool(email), ErrorType.VALIDATION_ERROR, "Email is required"),
        Rule(lambda: email_is_free(email), ErrorType.EMAIL_ALREADY_TAKEN, "Email already exists"),
    ])
"""

import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Optional, Union

from bookshelf.config import settings
from bookshelf.exceptions import ErrorType, error_responder
from bookshelf.services.password import MAX_PASSWORD_BYTES, password_byte_length

Predicate = Callable[[], Union[bool, Awaitable[bool]]]


@dataclass(frozen=True)
class Rule:
    check: Predicate
    error_type: ErrorType
    message: str
    field: Optional[str] = None


async def validate(rules: Iterable[Rule]) -> None:
    """
    Evaluate `rules` in order; raise the typed error of the first failure.

    Raises:
        BookshelfError subclass matching the failing rule's error_type.
    """
    for rule in rules:
        passed = rule.check()
        if inspect.isawaitable(passed):
            passed = await passed
        if not passed:
            context = {"field": rule.field} if rule.field else None
            raise error_responder(rule.error_type, rule.message, context=context)


# ── Common predicates ─────────────────────────────────────────────────────


def is_present(value: Any) -> bool:
    """True for anything but None and empty strings/collections."""
    return bool(value)


def is_long_enough(password: Optional[str]) -> bool:
    # A missing password counts as zero characters long
    return len(password or "") >= settings.password_min_length


def fits_bcrypt(password: Optional[str]) -> bool:
    return password_byte_length(password or "") <= MAX_PASSWORD_BYTES


def min_length_message(subject: str = "Password") -> str:
    return f"{subject} must be at least {settings.password_min_length} characters long"


def max_bytes_message(subject: str = "Password") -> str:
    return f"{subject} must be at most {MAX_PASSWORD_BYTES} bytes long"
