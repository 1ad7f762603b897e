"""Helpers for turning import policies into lifecycles.

They choose the served version of a resource and clean up the text that
name and selector templates render.
"""

from __future__ import annotations

from typing import Callable, Iterable, Sequence

from clusterpedia.schema import GroupResource, GroupVersionResource

__all__ = [
    "NO_VALUE",
    "NegotiationError",
    "negotiate_gvr",
    "normalize_rendered_name",
    "is_selected",
]

# What a template renders for a missing map key.
NO_VALUE = "<no value>"

ResourcesFor = Callable[[GroupVersionResource], Iterable[GroupVersionResource]]


class NegotiationError(LookupError):
    """No served version of the resource fits the versions asked for."""


def _format_list(items: Iterable[object]) -> str:
    return "[" + " ".join(str(item) for item in items) + "]"


def negotiate_gvr(
    resources_for: ResourcesFor,
    gr: GroupResource,
    versions: Sequence[str] | None,
) -> GroupVersionResource:
    """Pick the version of ``gr`` to watch.

    ``resources_for`` maps a partially given resource to the fully qualified
    resources the cluster serves, most preferred first; its errors propagate.
    With no ``versions`` the most preferred one is taken; otherwise the first
    served resource whose version is among ``versions``.
    """
    gvrs = list(resources_for(gr.with_version("")))

    if gr.group == "":
        gvrs = [gvr for gvr in gvrs if gvr.group == ""]
    if not gvrs:
        raise NegotiationError(f"not found {gr}'s version")

    if not versions:
        return gvrs[0]

    wanted = set(versions)
    for gvr in gvrs:
        if gvr.version in wanted:
            return gvr
    raise NegotiationError(
        f"expected versions({_format_list(versions)}) are not match {_format_list(gvrs)}"
    )


def normalize_rendered_name(text: str) -> str:
    """Drop the markers a template leaves for missing values from a rendered name."""
    return text.replace(NO_VALUE, "")


def is_selected(rendered: str) -> bool:
    """Whether a rendered selector template means ``true``.

    Missing-value markers are dropped, case is ignored and surrounding
    whitespace is trimmed.
    """
    return rendered.replace(NO_VALUE, "").lower().strip() == "true"