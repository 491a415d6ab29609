"""Key/value storage for flags that outlive a single session lookup."""

from typing import Any


class InMemoryStorage:
    """Default storage; hosts with durable storage pass their own implementation."""

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    async def store(self, key: str, value: Any) -> None:
        self._values[key] = value

    async def delete(self, key: str) -> None:
        self._values.pop(key, None)
