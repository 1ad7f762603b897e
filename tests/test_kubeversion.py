import itertools
import random

import pytest

from clusterpedia.kubeversion import (
    compare_kube_aware_versions,
    sort_versions_by_kube_awareness,
)

DOCUMENTED_ORDER = [
    "v10",
    "v2",
    "v1",
    "v11beta2",
    "v10beta3",
    "v3beta1",
    "v12alpha1",
    "v11alpha2",
    "foo1",
    "foo10",
]


def test_documented_ordering():
    shuffled = DOCUMENTED_ORDER[:]
    random.Random(7).shuffle(shuffled)
    assert sort_versions_by_kube_awareness(shuffled) == DOCUMENTED_ORDER


def test_sort_does_not_modify_input():
    versions = ["v1", "v2"]
    result = sort_versions_by_kube_awareness(versions)
    assert versions == ["v1", "v2"]
    assert result == ["v2", "v1"]


@pytest.mark.parametrize("version", DOCUMENTED_ORDER)
def test_equal_is_zero(version):
    assert compare_kube_aware_versions(version, version) == 0


@pytest.mark.parametrize("left,right", itertools.combinations(DOCUMENTED_ORDER, 2))
def test_antisymmetric_and_consistent_with_order(left, right):
    forward = compare_kube_aware_versions(left, right)
    backward = compare_kube_aware_versions(right, left)
    assert forward > 0
    assert backward < 0


def test_ga_above_beta_above_alpha():
    assert compare_kube_aware_versions("v1", "v2beta1") > 0
    assert compare_kube_aware_versions("v1beta1", "v2alpha1") > 0
    assert compare_kube_aware_versions("v1alpha1", "v1beta1") < 0


def test_non_kube_versions_rank_last():
    assert compare_kube_aware_versions("v1alpha1", "latest") > 0
    assert compare_kube_aware_versions("latest", "v1alpha1") < 0


def test_non_kube_versions_sorted_lexically():
    assert sort_versions_by_kube_awareness(["zeta", "alpha", "mid"]) == [
        "alpha",
        "mid",
        "zeta",
    ]


def test_sort_is_idempotent():
    once = sort_versions_by_kube_awareness(reversed(DOCUMENTED_ORDER))
    assert sort_versions_by_kube_awareness(once) == once