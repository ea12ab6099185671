"""Outcome types for checking a loaded value before it is displayed.

A loader task can finish without raising and still produce something the
caller does not want to show (an empty response, an error payload wrapped
in a success status). A verifier inspects the raw result and returns
exactly one of:

- Verified(value): show `value` (usually the raw result itself)
- Rejected(message): treat the load as failed with `message`

Verifiers run synchronously on the presentation thread.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Verified(Generic[T]):
    value: T


@dataclass(frozen=True)
class Rejected:
    message: str


VerificationOutcome = Union[Verified[T], Rejected]
ResultVerifier = Callable[[T], VerificationOutcome[T]]


def accept_all(result: T) -> Verified[T]:
    """Default verifier: every result is usable as-is."""
    return Verified(result)


def simple_verifier(test: Callable[[T], bool], error_msg: str = "failed") -> ResultVerifier[T]:
    """Build a verifier from a boolean predicate.

    Results passing `test` are Verified unchanged; the rest are Rejected
    with `error_msg`.
    """
    if not error_msg:
        raise ValueError("error_msg must be a non-empty string")

    def verifier(result: T) -> VerificationOutcome[T]:
        if test(result):
            return Verified(result)
        return Rejected(error_msg)

    return verifier


def verify(verifier: ResultVerifier[T] | None, result: Any) -> VerificationOutcome[T]:
    """Apply verifier (or accept_all when None) to result."""
    outcome = (verifier or accept_all)(result)
    if not isinstance(outcome, (Verified, Rejected)):
        raise TypeError(f"Verifier must return Verified or Rejected, got {type(outcome).__name__}")
    return outcome
