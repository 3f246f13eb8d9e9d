from __future__ import annotations

import copy
from typing import Any, Protocol


class NotFoundError(LookupError):
    """Raised by cluster clients when the requested object does not exist."""

    def __init__(self, kind: str, namespace: str, name: str) -> None:
        self.kind = kind
        self.namespace = namespace
        self.name = name
        super().__init__(f"{kind} {namespace}/{name} not found")


class ClusterClient(Protocol):
    def get(self, kind: str, namespace: str, name: str) -> Any: ...

    def create(self, obj: Any) -> None: ...

    def update(self, obj: Any) -> None: ...


def object_key(obj: Any) -> tuple[str, str, str]:
    kind = getattr(obj, "kind", None)
    if not isinstance(kind, str) or not kind:
        raise TypeError(f"Object has no kind (type={type(obj).__name__})")
    metadata = getattr(obj, "metadata", None)
    if metadata is not None:
        return kind, metadata.namespace, metadata.name
    return kind, getattr(obj, "namespace", "default"), obj.name


class InMemoryClusterClient:
    """Dictionary-backed client; returns copies so callers never share stored state."""

    def __init__(self, objects: list[Any] | None = None) -> None:
        self._objects: dict[tuple[str, str, str], Any] = {}
        for obj in objects or []:
            self.create(obj)

    def get(self, kind: str, namespace: str, name: str) -> Any:
        obj = self._objects.get((kind, namespace, name))
        if obj is None:
            raise NotFoundError(kind, namespace, name)
        return copy.deepcopy(obj)

    def create(self, obj: Any) -> None:
        key = object_key(obj)
        if key in self._objects:
            raise ValueError(f"{key[0]} {key[1]}/{key[2]} already exists")
        self._objects[key] = copy.deepcopy(obj)

    def update(self, obj: Any) -> None:
        key = object_key(obj)
        if key not in self._objects:
            raise NotFoundError(*key)
        self._objects[key] = copy.deepcopy(obj)

    def list(self, kind: str) -> list[Any]:
        return [copy.deepcopy(obj) for key, obj in sorted(self._objects.items()) if key[0] == kind]
