"""Shared informers for the resources that import policies and lifecycles depend on."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Protocol

from clusterpedia.schema import GroupVersionResource

__all__ = [
    "DependentResource",
    "ListerNotFoundError",
    "DependentResourceManager",
    "Informer",
    "InformerFactory",
    "WorkQueue",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class DependentResource:
    """One concrete object that a policy or lifecycle depends on."""

    group: str = ""
    version: str = ""
    resource: str = ""
    namespace: str = ""
    name: str = ""

    def group_version_resource(self) -> GroupVersionResource:
        return GroupVersionResource(self.group, self.version, self.resource)


class ListerNotFoundError(LookupError):
    """No informer is running for the requested resource type."""


class Informer(Protocol):
    """A watch-backed cache of the objects of one resource type."""

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def has_synced(self) -> bool: ...

    def get(self, namespace: str, name: str) -> Mapping[str, Any]: ...

    def list(self) -> list[Mapping[str, Any]]: ...


InformerFactory = Callable[
    [GroupVersionResource, Callable[[Mapping[str, Any]], None]], Informer
]


class WorkQueue(Protocol):
    def add(self, item: str) -> None: ...


def _object_key(obj: Mapping[str, Any]) -> tuple[str, str]:
    metadata = obj.get("metadata")
    if not isinstance(metadata, Mapping):
        raise ValueError("object has no metadata")
    name = metadata.get("name")
    if not name:
        raise ValueError("object has no name")
    return metadata.get("namespace") or "", name


class DependentResourceManager:
    """Tracks which policies and lifecycles depend on which resources.

    One informer runs per resource type for as long as some policy needs it.
    Events on a policy's source resource put the policy on the policy queue,
    and events on an object referenced by a lifecycle put the lifecycle on
    the lifecycle queue.
    """

    def __init__(
        self,
        policy_queue: WorkQueue,
        lifecycle_queue: WorkQueue,
        informer_factory: InformerFactory,
    ) -> None:
        self._lock = threading.RLock()
        self._policy_queue = policy_queue
        self._lifecycle_queue = lifecycle_queue
        self._informer_factory = informer_factory

        self._informers: dict[GroupVersionResource, Informer] = {}

        self._source_to_policy: dict[GroupVersionResource, str] = {}
        self._policy_to_source: dict[str, GroupVersionResource] = {}
        self._policy_could_enqueue: dict[str, bool] = {}
        self._policy_to_gvrs: dict[str, frozenset[GroupVersionResource]] = {}
        self._gvr_to_policies: dict[GroupVersionResource, set[str]] = {}

        self._references_to_lifecycle: dict[DependentResource, set[str]] = {}
        self._lifecycle_to_references: dict[str, frozenset[DependentResource]] = {}

    def _informer(self, gvr: GroupVersionResource) -> Informer | None:
        with self._lock:
            return self._informers.get(gvr)

    def get(self, resource: DependentResource) -> Mapping[str, Any]:
        """Return the cached object, raising if its type is not watched."""
        gvr = resource.group_version_resource()
        informer = self._informer(gvr)
        if informer is None:
            raise ListerNotFoundError(f"resource<{gvr}> lister is not found")
        return informer.get(resource.namespace, resource.name)

    def list(self, gvr: GroupVersionResource) -> list[Mapping[str, Any]]:
        """Return every cached object of the resource type."""
        informer = self._informer(gvr)
        if informer is None:
            raise ListerNotFoundError(f"resource<{gvr}> lister is not found")
        return informer.list()

    def _handler(self, gvr: GroupVersionResource) -> Callable[[Mapping[str, Any]], None]:
        def handle(obj: Mapping[str, Any]) -> None:
            try:
                namespace, name = _object_key(obj)
            except ValueError:
                logger.exception("handle dependent resource failed")
                return

            with self._lock:
                policy = self._source_to_policy.get(gvr)
                if policy is not None and self._policy_could_enqueue.get(policy, False):
                    logger.debug("add source %s %s/%s to policy queue: %s", gvr, namespace, name, policy)
                    self._policy_queue.add(policy)

                dependence = DependentResource(
                    gvr.group, gvr.version, gvr.resource, namespace, name
                )
                lifecycles = self._references_to_lifecycle.get(dependence)
                if not lifecycles:
                    return
                logger.debug("add dependent resource %s %s/%s to lifecycle queue", gvr, namespace, name)
                for lifecycle in sorted(lifecycles):
                    self._lifecycle_queue.add(lifecycle)

        return handle

    def _ensure_informer(self, gvr: GroupVersionResource) -> None:
        if gvr in self._informers:
            return
        logger.info("create and start dependent resource informer: %s", gvr)
        informer = self._informer_factory(gvr, self._handler(gvr))
        self._informers[gvr] = informer
        informer.start()

    def _unbind_policy_gvr(self, name: str, gvr: GroupVersionResource) -> None:
        policies = self._gvr_to_policies.get(gvr, set())
        policies.discard(name)
        if policies:
            return
        logger.info("stop and remove dependent resource informer: %s", gvr)
        self._gvr_to_policies.pop(gvr, None)
        informer = self._informers.pop(gvr, None)
        if informer is not None:
            informer.stop()

    def _set_policy_gvrs(
        self, name: str, gvrs: frozenset[GroupVersionResource] | None
    ) -> None:
        current = self._policy_to_gvrs.get(name, frozenset())
        if gvrs is None:
            for gvr in current:
                self._unbind_policy_gvr(name, gvr)
            self._policy_to_gvrs.pop(name, None)
            return

        for gvr in current - gvrs:
            self._unbind_policy_gvr(name, gvr)
        for gvr in gvrs - current:
            self._ensure_informer(gvr)
            self._gvr_to_policies.setdefault(gvr, set()).add(name)
        self._policy_to_gvrs[name] = gvrs

    def set_policy_dependent_gvrs(
        self,
        name: str,
        source: GroupVersionResource,
        references: Iterable[GroupVersionResource],
    ) -> None:
        """Bind a policy to its source and reference resource types."""
        with self._lock:
            bound = self._source_to_policy.get(source)
            if bound is not None and bound != name:
                raise ValueError(f"source<{source}> is already bound to {bound}")

            previous = self._policy_to_source.get(name)
            if previous is not None and previous != source:
                self._source_to_policy.pop(previous, None)

            self._policy_to_source[name] = source
            self._source_to_policy[source] = name
            self._policy_could_enqueue[name] = False

            self._set_policy_gvrs(name, frozenset(references) | {source})

    def remove_policy(self, name: str) -> None:
        """Forget a policy and stop informers no other policy needs."""
        with self._lock:
            self._set_policy_gvrs(name, None)
            self._policy_could_enqueue.pop(name, None)
            source = self._policy_to_source.pop(name, None)
            if source is not None:
                self._source_to_policy.pop(source, None)

    def has_synced_policy_dependent_resources(self, name: str) -> bool:
        """Report whether every informer of the policy has synced.

        Once they have, events on the source start enqueueing the policy.
        """
        with self._lock:
            gvrs = self._policy_to_gvrs.get(name)
            if gvrs is None:
                return False
            for gvr in gvrs:
                informer = self._informers.get(gvr)
                if informer is None:
                    raise LookupError(f"resource<{gvr}> controller not found")
                if not informer.has_synced():
                    return False
            if name in self._policy_could_enqueue:
                self._policy_could_enqueue[name] = True
            return True

    def _set_lifecycle_references(
        self, name: str, references: frozenset[DependentResource] | None
    ) -> None:
        current = self._lifecycle_to_references.get(name, frozenset())
        stale = current if references is None else current - references
        for ref in stale:
            lifecycles = self._references_to_lifecycle.get(ref)
            if lifecycles is None:
                continue
            lifecycles.discard(name)
            if not lifecycles:
                del self._references_to_lifecycle[ref]

        if references is None:
            self._lifecycle_to_references.pop(name, None)
            return

        for ref in references - current:
            self._references_to_lifecycle.setdefault(ref, set()).add(name)
        self._lifecycle_to_references[name] = references

    def set_lifecycle_dependent_resources(
        self, name: str, references: Iterable[DependentResource]
    ) -> None:
        """Replace the set of objects a lifecycle depends on."""
        with self._lock:
            self._set_lifecycle_references(name, frozenset(references))

    def remove_lifecycle(self, name: str) -> None:
        with self._lock:
            self._set_lifecycle_references(name, None)