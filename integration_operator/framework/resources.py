from __future__ import annotations

from typing import Any, Callable, Iterator, Protocol, TypeVar

from integration_operator.framework.kube import (
    ConfigMap,
    Deployment,
    KnativeService,
    ObjectMeta,
    Route,
    Service,
)
from integration_operator.framework.models import INTEGRATION_LABEL, Integration


class ClusterObject(Protocol):
    kind: str
    metadata: ObjectMeta

    @property
    def name(self) -> str: ...

    def to_dict(self) -> dict[str, Any]: ...


T = TypeVar("T")


class ResourceCollection:
    """Insertion-ordered store of cluster objects being assembled during one pass.

    Objects are identified by (kind, name). The collection does not enforce
    uniqueness; traits look an object up before adding one. Visitors receive the
    live stored object, so in-place edits are visible to later visitors and to
    `as_dicts`.
    """

    def __init__(self, items: list[ClusterObject] | None = None) -> None:
        self._items: list[ClusterObject] = list(items or [])

    def add(self, obj: ClusterObject) -> None:
        if not isinstance(getattr(obj, "kind", None), str) or not hasattr(obj, "metadata"):
            raise TypeError(f"Cannot add non cluster object to collection (type={type(obj).__name__})")
        self._items.append(obj)

    def add_all(self, objs: list[ClusterObject]) -> None:
        for obj in objs:
            self.add(obj)

    def items(self) -> list[ClusterObject]:
        return list(self._items)

    def __iter__(self) -> Iterator[ClusterObject]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def find(self, predicate: Callable[[ClusterObject], bool]) -> ClusterObject | None:
        for obj in self._items:
            if predicate(obj):
                return obj
        return None

    def find_by_key(self, kind: str, name: str) -> ClusterObject | None:
        return self.find(lambda obj: obj.kind == kind and obj.name == name)

    def visit_by_kind(self, kind: str, visitor: Callable[[Any], None]) -> None:
        for obj in list(self._items):
            if obj.kind == kind:
                visitor(obj)

    def _get_typed(self, cls: type[T], predicate: Callable[[T], bool] | None) -> T | None:
        for obj in self._items:
            if isinstance(obj, cls) and (predicate is None or predicate(obj)):
                return obj
        return None

    def visit_deployments(self, visitor: Callable[[Deployment], None]) -> None:
        self.visit_by_kind(Deployment.kind, visitor)

    def visit_knative_services(self, visitor: Callable[[KnativeService], None]) -> None:
        self.visit_by_kind(KnativeService.kind, visitor)

    def visit_config_maps(self, visitor: Callable[[ConfigMap], None]) -> None:
        self.visit_by_kind(ConfigMap.kind, visitor)

    def get_deployment(self, predicate: Callable[[Deployment], bool] | None = None) -> Deployment | None:
        return self._get_typed(Deployment, predicate)

    def get_service(self, predicate: Callable[[Service], bool] | None = None) -> Service | None:
        return self._get_typed(Service, predicate)

    def get_config_map(self, predicate: Callable[[ConfigMap], bool] | None = None) -> ConfigMap | None:
        return self._get_typed(ConfigMap, predicate)

    def get_route(self, predicate: Callable[[Route], bool] | None = None) -> Route | None:
        return self._get_typed(Route, predicate)

    def get_knative_service(
        self, predicate: Callable[[KnativeService], bool] | None = None
    ) -> KnativeService | None:
        return self._get_typed(KnativeService, predicate)

    def get_service_for_integration(self, integration: Integration) -> Service | None:
        return self.get_service(
            lambda svc: svc.name == integration.name
            and svc.metadata.labels.get(INTEGRATION_LABEL) == integration.name
        )

    def get_deployment_for_integration(self, integration: Integration) -> Deployment | None:
        return self.get_deployment(lambda d: d.name == integration.name)

    def as_dicts(self) -> list[dict[str, Any]]:
        return [obj.to_dict() for obj in self._items]
