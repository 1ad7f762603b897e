"""Ordering of API version strings the way Kubernetes ranks them."""

from __future__ import annotations

import re
from enum import IntEnum
from functools import cmp_to_key
from typing import Iterable, NamedTuple

__all__ = ["compare_kube_aware_versions", "sort_versions_by_kube_awareness"]

_KUBE_VERSION = re.compile(r"^v(\d+)(?:(alpha|beta)(\d+))?$")


class _Stability(IntEnum):
    ALPHA = 0
    BETA = 1
    GA = 2


class _KubeVersion(NamedTuple):
    major: int
    stability: _Stability
    minor: int


def _parse(text: str) -> _KubeVersion | None:
    match = _KUBE_VERSION.match(text)
    if match is None:
        return None
    major, kind, minor = match.groups()
    stability = {
        None: _Stability.GA,
        "alpha": _Stability.ALPHA,
        "beta": _Stability.BETA,
    }[kind]
    return _KubeVersion(int(major), stability, int(minor) if minor else 0)


def compare_kube_aware_versions(left: str, right: str) -> int:
    """Return a positive number if ``left`` ranks above ``right``, negative if below, 0 if equal.

    GA ranks above beta, beta above alpha, and higher numbers above lower ones.
    Strings that are not Kubernetes versions rank below all that are, and
    among themselves the lexically smaller ranks higher.
    """
    if left == right:
        return 0
    lv, rv = _parse(left), _parse(right)
    if lv is None and rv is None:
        return (right > left) - (right < left)
    if lv is None:
        return -1
    if rv is None:
        return 1
    if lv.stability != rv.stability:
        return int(lv.stability) - int(rv.stability)
    if lv.major != rv.major:
        return lv.major - rv.major
    return lv.minor - rv.minor


def sort_versions_by_kube_awareness(versions: Iterable[str]) -> list[str]:
    """Return the versions ordered from most to least preferred."""
    return sorted(
        versions,
        key=cmp_to_key(lambda a, b: compare_kube_aware_versions(b, a)),
    )