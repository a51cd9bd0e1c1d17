"""Success/failure values for fetches the caller is expected to handle."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Ok[T]:
    value: T


@dataclass(frozen=True, slots=True)
class Err[E]:
    error: E


type Result[T, E] = Ok[T] | Err[E]


def unwrap_or[T, E](result: Result[T, E], default: T) -> T:
    match result:
        case Ok(value):
            return value
        case Err():
            return default
