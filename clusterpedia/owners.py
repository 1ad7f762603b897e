"""Controller ownership between policies, lifecycles and the clusters they create."""

from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Any, Iterable

from clusterpedia.schema import parse_group_version

__all__ = [
    "POLICY_GROUP",
    "POLICY_KIND",
    "POLICY_CONTROLLER_FINALIZER",
    "LIFECYCLE_CONTROLLER_FINALIZER",
    "OwnerReference",
    "OwnerError",
    "ClusterAuth",
    "controller_of",
    "owner_policy_index",
    "check_owner_controller",
]

POLICY_GROUP = "policy.clusterpedia.io"
POLICY_KIND = "ClusterImportPolicy"

POLICY_CONTROLLER_FINALIZER = "clusterpedia.io/cluster-import-policy-controller"
LIFECYCLE_CONTROLLER_FINALIZER = "clusterpedia.io/pediacluster-lifecycle-controller"


@dataclass(frozen=True)
class OwnerReference:
    """A reference from an object to the object that owns it."""

    api_version: str
    kind: str
    name: str
    uid: str = ""
    controller: bool = False
    block_owner_deletion: bool = False


class OwnerError(ValueError):
    """The object's controlling owner is missing or is not an import policy."""


def controller_of(owner_references: Iterable[OwnerReference]) -> OwnerReference | None:
    """Return the owner reference marked as controller, if any."""
    return next((ref for ref in owner_references if ref.controller), None)


def _is_policy(ref: OwnerReference) -> bool:
    try:
        group_version = parse_group_version(ref.api_version)
    except ValueError as err:
        raise OwnerError(f"parse ref apiversion failed: {err}") from err
    return group_version.group == POLICY_GROUP and ref.kind == POLICY_KIND


def owner_policy_index(owner_references: Iterable[OwnerReference]) -> list[str]:
    """Index a lifecycle by the name of the policy that controls it.

    A lifecycle without a controller is indexed under ``""``; a controller
    that is not an import policy is an error.
    """
    ref = controller_of(owner_references)
    if ref is None:
        return [""]
    if not _is_policy(ref):
        raise OwnerError("lifecycle not has controller")
    return [ref.name]


def check_owner_controller(owner_references: Iterable[OwnerReference]) -> OwnerReference:
    """Return the controlling import policy of a lifecycle, raising if there is none."""
    ref = controller_of(owner_references)
    if ref is None:
        raise OwnerError("not found owner controller")
    if not _is_policy(ref):
        raise OwnerError("owner controller is not policy.ClusterImportPolicy")
    return ref


def _encode(data: bytes | None) -> str | None:
    if data is None:
        return None
    return base64.b64encode(data).decode("ascii")


@dataclass(frozen=True)
class ClusterAuth:
    """The address and credential fields of a cluster's spec."""

    apiserver: str = ""
    kubeconfig: bytes | None = None
    ca_data: bytes | None = None
    token_data: bytes | None = None
    cert_data: bytes | None = None
    key_data: bytes | None = None

    def auth_patch(self) -> dict[str, Any]:
        """A merge patch that sets only the address and credential fields.

        Byte fields are base64 encoded; unset ones become ``None``.
        """
        return {
            "spec": {
                "apiserver": self.apiserver,
                "caData": _encode(self.ca_data),
                "tokenData": _encode(self.token_data),
                "certData": _encode(self.cert_data),
                "keyData": _encode(self.key_data),
                "kubeconfig": _encode(self.kubeconfig),
            }
        }

    def same_auth(self, other: ClusterAuth) -> bool:
        """Whether both name the same server with the same credentials.

        An unset byte field equals an empty one.
        """
        return self.apiserver == other.apiserver and all(
            (getattr(self, name) or b"") == (getattr(other, name) or b"")
            for name in ("kubeconfig", "ca_data", "token_data", "cert_data", "key_data")
        )