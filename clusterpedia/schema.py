"""Group, version and resource identifiers of API types."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "GroupVersion",
    "GroupResource",
    "GroupVersionResource",
    "parse_group_version",
]


@dataclass(frozen=True, order=True)
class GroupVersion:
    """An API group together with one of its versions."""

    group: str = ""
    version: str = ""

    def with_resource(self, resource: str) -> GroupVersionResource:
        return GroupVersionResource(self.group, self.version, resource)

    def __str__(self) -> str:
        if self.group:
            return f"{self.group}/{self.version}"
        return self.version


@dataclass(frozen=True, order=True)
class GroupResource:
    """A resource within an API group, without a version."""

    group: str = ""
    resource: str = ""

    def with_version(self, version: str) -> GroupVersionResource:
        return GroupVersionResource(self.group, version, self.resource)

    def is_empty(self) -> bool:
        return not self.group and not self.resource

    def __str__(self) -> str:
        if not self.group:
            return self.resource
        return f"{self.resource}.{self.group}"


@dataclass(frozen=True, order=True)
class GroupVersionResource:
    """A fully qualified resource: group, version and plural name."""

    group: str = ""
    version: str = ""
    resource: str = ""

    def group_resource(self) -> GroupResource:
        return GroupResource(self.group, self.resource)

    def group_version(self) -> GroupVersion:
        return GroupVersion(self.group, self.version)

    def __str__(self) -> str:
        return f"{self.group}/{self.version}, Resource={self.resource}"


def parse_group_version(text: str) -> GroupVersion:
    """Parse ``group/version`` or a bare ``version``; ``""`` and ``"/"`` give an empty value."""
    if not text or text == "/":
        return GroupVersion()
    parts = text.split("/")
    if len(parts) == 1:
        return GroupVersion("", parts[0])
    if len(parts) == 2:
        return GroupVersion(parts[0], parts[1])
    raise ValueError(f"unexpected GroupVersion string: {text}")