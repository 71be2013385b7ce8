"""Result type for explicit success/failure handling.

Operations whose failure is an expected outcome (selling a fish that is not
in the backpack, buying back with too little gold, asking the state machine
for an edge it does not have) return a Result instead of raising.

Usage:
------
    result = session.sell_fish(0)
    if result.is_ok():
        gold_earned = result.unwrap()
    else:
        logger.info("Sale refused: %s", result.error)

    # Safe unwrap with default
    earned = session.sell_fish(3).unwrap_or(0)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union

T = TypeVar("T")  # Success value type
E = TypeVar("E")  # Error type
U = TypeVar("U")  # Transformed value type


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A successful outcome carrying a value.

    Example:
        def price_of(fish) -> Result[int, str]:
            if fish.value <= 0:
                return Err("Worthless fish")
            return Ok(fish.value)
    """

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the success value."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    @property
    def error(self) -> None:
        """Ok has no error, returns None."""
        return None

    def map(self, f: Callable[[T], U]) -> "Ok[U]":
        """Transform the success value.

        Example:
            Ok(12).map(lambda gold: gold * 2)  # Ok(24)
        """
        return Ok(f(self.value))

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True)
class Err(Generic[E]):
    """A failed outcome carrying an error description."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self):
        """Raises ValueError since Err has no success value.

        Check is_ok() first, or use unwrap_or().
        """
        raise ValueError(f"Called unwrap on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        return default

    @property
    def value(self) -> None:
        """Err has no value, returns None."""
        return None

    def map(self, f: Callable[[T], U]) -> "Err[E]":
        """No-op for Err, returns self."""
        return self

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


# Result is a union of Ok and Err
Result = Union[Ok[T], Err[E]]
