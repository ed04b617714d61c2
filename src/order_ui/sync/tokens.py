"""Monotonic fetch tokens used to discard superseded responses."""

import itertools


class TokenSource:
    """
    Mints increasing integer tokens, one per issued fetch.

    A response is applied only if the token it was issued with is still the
    latest one minted; anything older has been superseded.
    """

    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._latest = 0

    def mint(self) -> int:
        self._latest = next(self._counter)
        return self._latest

    def is_current(self, token: int) -> bool:
        return token == self._latest
