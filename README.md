# clusterpedia

A small library of building blocks for tracking Kubernetes-style resources
across many clusters. It covers API identifiers, ordering of API versions,
tracking of the resources that import policies and lifecycles depend on,
routing for the `resources` endpoint, and helpers for policy ownership and
template output.

It has no runtime dependencies and needs Python 3.10 or later.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

### `clusterpedia.schema`

These are frozen, orderable dataclasses for API identifiers:

- `GroupVersion(group, version)`, with `with_resource(resource)`.
- `GroupResource(group, resource)`, with `with_version(version)` and `is_empty()`.
- `GroupVersionResource(group, version, resource)`, with `group_resource()`
  and `group_version()`.

`parse_group_version(text)` reads `"apps/v1"` or a bare `"v1"`. Both `""` and
`"/"` give an empty value. Text with more than one `/` raises `ValueError`.

### `clusterpedia.kubeversion`

`compare_kube_aware_versions(left, right)` returns a positive number when
`left` ranks higher, a negative number when it ranks lower, and `0` when the
two are equal. GA ranks above beta, and beta above alpha. Within a stability
level, the higher major and minor numbers rank first. Strings that are not
Kubernetes versions rank below all that are.

`sort_versions_by_kube_awareness(versions)` returns a new list ordered from
most to least preferred.

### `clusterpedia.dependents`

`DependentResourceManager(policy_queue, lifecycle_queue, informer_factory)`
runs one informer per resource type for as long as some policy needs that
type.

- `informer_factory(gvr, handler)` must return an object that has `start()`,
  `stop()`, `has_synced()`, `get(namespace, name)` and `list()`. The informer
  calls `handler(obj)` for every event.
- The two queues need an `add(item)` method.

The manager's methods:

- `set_policy_dependent_gvrs(name, source, references)` binds a policy to its
  source type and reference types. It raises `ValueError` if another policy
  already owns the source type.
- `remove_policy(name)` unbinds the policy. Informers that no other policy
  needs are stopped.
- `has_synced_policy_dependent_resources(name)` reports whether all the
  policy's informers have synced. Once they have, events on the source type
  put the policy on the policy queue.
- `set_lifecycle_dependent_resources(name, references)` and
  `remove_lifecycle(name)` control which objects, given as
  `DependentResource`, put a lifecycle on the lifecycle queue when they
  change.
- `get(resource)` and `list(gvr)` read from the informer caches. If no
  informer watches that type, they raise `ListerNotFoundError`.

### `clusterpedia.resources`

`parse_request_info(url, api_prefixes, groupless_prefixes)` builds a
`RequestInfo` from a GET URL.

`ResourcesREST(server)` forwards requests to `server`, a callable that takes
a `Request` and returns a `Response`. `connect(info, prefix_path, responder)`
returns a handler with these rules:

- The handler strips the `.../resources` prefix from the request path before
  it calls `server`.
- When `prefix_path` is `"clusters"`, the handler also strips
  `clusters/<name>` and sets `Request.cluster_name` to that name.
- If the cluster path is incomplete, the handler passes a `NotFoundError` to
  `responder`.

`connect` raises `ValueError` when `info` is `None`.

```python
from clusterpedia.resources import Request, Response, ResourcesREST, parse_request_info

def server(request):
    return Response(body=f"{request.cluster_name} {request.path}")

url = "/apis/group/v1/resources/clusters/cluster-1/api"
info = parse_request_info(url, ["api", "apis"], ["api"])
handler = ResourcesREST(server).connect(info, info.name, lambda err: Response(404, str(err)))
print(handler(Request(path=url)).body)  # cluster-1 /api
```

### `clusterpedia.owners`

`OwnerReference` describes one owner of an object.

- `controller_of(refs)` returns the reference marked as controller, if there
  is one.
- `owner_policy_index(refs)` returns the name of the controlling
  `ClusterImportPolicy`, or `[""]` when there is no controller.
- `check_owner_controller(refs)` returns the controlling policy reference.
  Both it and `owner_policy_index` raise `OwnerError` when the controller is
  not an import policy. `check_owner_controller` also raises `OwnerError`
  when there is no controller.

`ClusterAuth` holds a cluster's address and credentials.

- `same_auth(other)` compares two `ClusterAuth` values. An unset byte field
  counts as equal to an empty one.
- `auth_patch()` builds a merge patch for the `spec` of those fields, with
  the byte fields base64 encoded.

### `clusterpedia.templates`

- `negotiate_gvr(resources_for, gr, versions)` picks the served version of a
  resource. With no versions given, it takes the most preferred one. When
  nothing matches, it raises `NegotiationError`.
- `normalize_rendered_name(text)` drops `<no value>` markers from a rendered
  name.
- `is_selected(rendered)` reports whether a rendered selector reads `true`.
  It ignores case, surrounding whitespace and `<no value>` markers.

## Example

```python
from clusterpedia.kubeversion import sort_versions_by_kube_awareness
from clusterpedia.schema import parse_group_version

print(sort_versions_by_kube_awareness(["v1alpha1", "v1", "v2beta1", "v1beta1"]))
# ['v1', 'v2beta1', 'v1beta1', 'v1alpha1']
print(parse_group_version("apps/v1").with_resource("deployments"))
# apps/v1, Resource=deployments
```

## What this package does not do

This package is a library only. It has no command, no API server and no
storage. It does not talk to clusters itself: informers, work queues and the
backing resource handler come from the caller.

It does not provide any of the following:

- a discovery cache or discovery manager; the `clusterpedia.discovery`
  sub-package holds no modules
- status-condition helpers
- reconcile result types