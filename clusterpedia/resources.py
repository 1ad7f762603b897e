"""The ``resources`` endpoint that forwards requests to the resource server."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field, replace
from typing import Callable, Iterable
from urllib.parse import urlsplit

__all__ = [
    "RequestInfo",
    "Request",
    "Response",
    "NotFoundError",
    "ResourcesREST",
    "parse_request_info",
]

_SPECIAL_VERBS = frozenset({"proxy", "watch"})
_SPECIAL_VERBS_NO_SUBRESOURCES = frozenset({"proxy"})
_NAMESPACE_SUBRESOURCES = frozenset({"status", "finalize"})


@dataclass(frozen=True)
class RequestInfo:
    """What an API request addresses, as read from its URL path."""

    path: str = ""
    is_resource_request: bool = False
    verb: str = ""
    api_prefix: str = ""
    api_group: str = ""
    api_version: str = ""
    namespace: str = ""
    resource: str = ""
    subresource: str = ""
    name: str = ""
    parts: tuple[str, ...] = ()


@dataclass(frozen=True)
class Request:
    method: str = "GET"
    path: str = "/"
    query: str = ""
    cluster_name: str = ""


@dataclass(frozen=True)
class Response:
    status: int = 200
    body: str = ""
    headers: dict[str, str] = field(default_factory=dict)


class NotFoundError(LookupError):
    """The requested resource does not exist."""

    code = 404

    def __init__(self, message: str = "the server could not find the requested resource") -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


Handler = Callable[[Request], Response]
Responder = Callable[[Exception], Response]


def parse_request_info(
    url: str, api_prefixes: Iterable[str], groupless_prefixes: Iterable[str]
) -> RequestInfo:
    """Read the API prefix, group, version, namespace and resource from a GET URL."""
    api_prefixes = frozenset(api_prefixes)
    groupless_prefixes = frozenset(groupless_prefixes)

    path = urlsplit(url).path
    non_resource = RequestInfo(path=path, verb="get")
    trimmed = path.strip("/")
    current = trimmed.split("/") if trimmed else []

    if len(current) < 3 or current[0] not in api_prefixes:
        return non_resource
    api_prefix, current = current[0], current[1:]

    api_group = ""
    if api_prefix not in groupless_prefixes:
        if len(current) < 3:
            return non_resource
        api_group, current = current[0], current[1:]

    api_version, current = current[0], current[1:]

    if current[0] in _SPECIAL_VERBS:
        if len(current) < 2:
            raise ValueError(f"unable to determine kind and namespace from url, {url}")
        verb, current = current[0], current[1:]
    else:
        verb = "get"

    namespace = ""
    if current[0] == "namespaces":
        if len(current) > 1:
            namespace = current[1]
            if len(current) > 2 and current[2] not in _NAMESPACE_SUBRESOURCES:
                current = current[2:]

    resource = subresource = name = ""
    if len(current) >= 3 and verb not in _SPECIAL_VERBS_NO_SUBRESOURCES:
        subresource = current[2]
    if len(current) >= 2:
        name = current[1]
    if current:
        resource = current[0]

    if not name and verb == "get":
        verb = "list"

    return RequestInfo(
        path=path,
        is_resource_request=True,
        verb=verb,
        api_prefix=api_prefix,
        api_group=api_group,
        api_version=api_version,
        namespace=namespace,
        resource=resource,
        subresource=subresource,
        name=name,
        parts=tuple(current),
    )


def _strip_prefix(prefix: str, handler: Handler, request: Request) -> Response:
    if not request.path.startswith(prefix) or len(prefix) == 0:
        return Response(404, "404 page not found\n")
    return handler(replace(request, path=request.path[len(prefix):]))


class ResourcesREST:
    """Hands ``resources`` requests to the resource server, optionally for one cluster."""

    def __init__(self, server: Handler) -> None:
        self._server = server

    def connect_methods(self) -> list[str]:
        return ["GET"]

    def connect(
        self, info: RequestInfo | None, prefix_path: str, responder: Responder
    ) -> Handler:
        """Return a handler serving the request that ``info`` describes."""
        if info is None:
            raise ValueError("missing RequestInfo")

        def handle(request: Request) -> Response:
            paths = [info.api_prefix, info.api_group, info.api_version, info.resource]
            if prefix_path == "clusters":
                # /resources/clusters/<cluster name>/*
                if len(info.parts) < 4:
                    return responder(NotFoundError())
                cluster = info.parts[2]
                paths += ["clusters", cluster]
                request = replace(request, cluster_name=cluster)

            joined = "/".join(p for p in paths if p)
            prefix = "/" + (posixpath.normpath(joined) if joined else "")
            return _strip_prefix(prefix, self._server, request)

        return handle