"""Immutable JSON value model."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional, Tuple

from .types import ErrorType, JsonType, PathStep, ProcessingError


_CONTAINERS = (dict, list, tuple)


def _entries(container: Any, path: Tuple[PathStep, ...]) -> Iterator[Tuple[PathStep, Any]]:
    """Yield ``(key, item)`` for objects and ``(1-based index, item)`` for arrays."""
    if isinstance(container, dict):
        for key, item in container.items():
            if not isinstance(key, str):
                raise ProcessingError(
                    f"Object keys must be strings, got {type(key).__name__}",
                    ErrorType.SOURCE,
                    context={"path": list(path)}
                )
            yield key, item
    else:
        yield from enumerate(container, start=1)


@dataclass(frozen=True)
class JsonValue:
    """
    A parsed JSON node.

    ``value`` holds the payload for the node kind: a tuple of ``(key, JsonValue)``
    pairs for objects (parse order), a tuple of ``JsonValue`` for arrays, and the
    plain Python scalar otherwise (``None`` for null).

    ``path`` records where the node sits inside its document. It is metadata
    only: equality and hashing look at structural content alone.
    """
    type: JsonType
    value: Any = None
    path: Tuple[PathStep, ...] = field(default=(), compare=False)
    _lookup: Optional[Dict[str, "JsonValue"]] = field(
        default=None, init=False, repr=False, compare=False
    )

    def __post_init__(self):
        if self.type is JsonType.OBJECT:
            object.__setattr__(self, "_lookup", dict(self.value))

    @classmethod
    def from_python(cls, data: Any, path: Tuple[PathStep, ...] = ()) -> "JsonValue":
        """
        Build a JsonValue tree from decoded JSON data.

        Args:
            data: Output of ``json.loads`` (dict, list, str, int, float, bool, None)
            path: Path of ``data`` inside its document

        Returns:
            JsonValue for ``data``

        Raises:
            ProcessingError: If ``data`` contains a non-JSON Python object
        """
        if not isinstance(data, _CONTAINERS):
            return cls._from_scalar(data, path)

        # Explicit stack of open containers: (data, path, pending entries, built
        # children). Nesting depth is bounded by memory, not the recursion limit.
        stack = [(data, path, _entries(data, path), [])]
        while True:
            container, container_path, entries, built = stack[-1]
            entry = next(entries, None)
            if entry is not None:
                key, item = entry
                item_path = container_path + (key,)
                if isinstance(item, _CONTAINERS):
                    stack.append((item, item_path, _entries(item, item_path), []))
                else:
                    built.append((key, cls._from_scalar(item, item_path)))
                continue

            stack.pop()
            if isinstance(container, dict):
                node = cls(JsonType.OBJECT, tuple(built), container_path)
            else:
                node = cls(JsonType.ARRAY, tuple(child for _, child in built), container_path)
            if not stack:
                return node
            stack[-1][3].append((container_path[-1], node))

    @classmethod
    def _from_scalar(cls, data: Any, path: Tuple[PathStep, ...]) -> "JsonValue":
        if data is None:
            return cls(JsonType.NULL, None, path)
        if isinstance(data, bool):
            return cls(JsonType.LOGICAL, data, path)
        if isinstance(data, (int, float)):
            return cls(JsonType.NUMBER, data, path)
        if isinstance(data, str):
            return cls(JsonType.STRING, data, path)
        raise ProcessingError(
            f"Unsupported JSON value type: {type(data).__name__}",
            ErrorType.SOURCE,
            context={"path": list(path)}
        )

    @classmethod
    def null(cls) -> "JsonValue":
        return cls(JsonType.NULL)

    def to_python(self) -> Any:
        """Convert back to plain Python data."""
        if self.type is JsonType.OBJECT:
            return {key: item.to_python() for key, item in self.value}
        if self.type is JsonType.ARRAY:
            return [item.to_python() for item in self.value]
        return self.value

    @property
    def is_object(self) -> bool:
        return self.type is JsonType.OBJECT

    @property
    def is_array(self) -> bool:
        return self.type is JsonType.ARRAY

    @property
    def is_null(self) -> bool:
        return self.type is JsonType.NULL

    @property
    def is_scalar(self) -> bool:
        return self.type.is_scalar

    def keys(self) -> Tuple[str, ...]:
        if self.type is not JsonType.OBJECT:
            return ()
        return tuple(key for key, _ in self.value)

    def items(self) -> Tuple[Tuple[str, "JsonValue"], ...]:
        if self.type is not JsonType.OBJECT:
            return ()
        return self.value

    def get(self, key: str) -> Optional["JsonValue"]:
        """Value stored at ``key``, or None when absent or not an object."""
        if self._lookup is None:
            return None
        return self._lookup.get(key)

    def element(self, index: int) -> Optional["JsonValue"]:
        """Array element at 1-based ``index``, or None when out of range or not an array."""
        if self.type is not JsonType.ARRAY or isinstance(index, bool):
            return None
        if 1 <= index <= len(self.value):
            return self.value[index - 1]
        return None

    def children(self) -> Iterator["JsonValue"]:
        if self.type is JsonType.OBJECT:
            for _, item in self.value:
                yield item
        elif self.type is JsonType.ARRAY:
            yield from self.value

    def length(self) -> int:
        """Entry count for containers; a scalar (null included) has length one."""
        if self.type in (JsonType.OBJECT, JsonType.ARRAY):
            return len(self.value)
        return 1

    def leaf_count(self) -> int:
        """Number of non-null scalars reachable from this node."""
        count = 0
        stack = [self]
        while stack:
            node = stack.pop()
            if node.type.is_scalar:
                count += 1
            else:
                stack.extend(node.children())
        return count
