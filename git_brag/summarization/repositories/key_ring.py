"""Rotating set of API keys for one provider."""

from collections.abc import Iterable


class KeyRing:
    """
    Ordered, deduplicated API keys with a cursor on the active one.

    The cursor only moves through ``rotate``, which wraps around, so after
    ``len(ring)`` rotations the ring is back on the key it started with.
    """

    def __init__(self, keys: Iterable[str]) -> None:
        """
        Initialize the ring.

        Args:
            keys: Candidate keys; blanks are dropped and duplicates keep their
                first position

        Raises:
            ValueError: If no usable key remains
        """
        cleaned = (key.strip() for key in keys if key)
        self._keys: tuple[str, ...] = tuple(dict.fromkeys(key for key in cleaned if key))
        if not self._keys:
            raise ValueError("No API keys available for provider.")
        self._index = 0

    def __len__(self) -> int:
        return len(self._keys)

    @property
    def index(self) -> int:
        return self._index

    def current(self) -> str:
        return self._keys[self._index]

    def rotate(self) -> str:
        """Advance to the next key and return it."""
        self._index = (self._index + 1) % len(self._keys)
        return self.current()
