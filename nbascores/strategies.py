from typing import Callable, Iterable, Optional, TypeVar

S = TypeVar('S')
R = TypeVar('R')


def first_result(strategies: Iterable[Callable[[S], Optional[R]]], subject: S) -> Optional[R]:
    """Run strategies in priority order and return the first non-None result."""
    for strategy in strategies:
        result = strategy(subject)
        if result is not None:
            return result
    return None
