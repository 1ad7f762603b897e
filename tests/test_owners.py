import base64
import json

import pytest

from clusterpedia.owners import (
    POLICY_GROUP,
    POLICY_KIND,
    ClusterAuth,
    OwnerError,
    OwnerReference,
    check_owner_controller,
    controller_of,
    owner_policy_index,
)

POLICY_API = POLICY_GROUP + "/v1alpha1"


def policy_ref(name="policy-a", controller=True):
    return OwnerReference(POLICY_API, POLICY_KIND, name, controller=controller)


def test_controller_of_picks_controller():
    other = OwnerReference("v1", "ConfigMap", "cm", controller=False)
    ctrl = policy_ref()
    assert controller_of([other, ctrl]) == ctrl


def test_controller_of_none_without_controller():
    assert controller_of([policy_ref(controller=False)]) is None
    assert controller_of([]) is None


def test_owner_policy_index_returns_policy_name():
    assert owner_policy_index([policy_ref("policy-x")]) == ["policy-x"]


def test_owner_policy_index_without_controller_is_empty_key():
    assert owner_policy_index([policy_ref(controller=False)]) == [""]


def test_owner_policy_index_rejects_other_kind():
    ref = OwnerReference(POLICY_API, "Other", "x", controller=True)
    with pytest.raises(OwnerError):
        owner_policy_index([ref])


def test_owner_policy_index_rejects_other_group():
    ref = OwnerReference("apps/v1", POLICY_KIND, "x", controller=True)
    with pytest.raises(OwnerError):
        owner_policy_index([ref])


def test_owner_policy_index_bad_api_version():
    ref = OwnerReference("a/b/c", POLICY_KIND, "x", controller=True)
    with pytest.raises(OwnerError):
        owner_policy_index([ref])


def test_check_owner_controller_returns_ref():
    ref = policy_ref("policy-y")
    assert check_owner_controller([ref]) is ref


def test_check_owner_controller_missing():
    with pytest.raises(OwnerError, match="not found owner controller"):
        check_owner_controller([])


def test_check_owner_controller_wrong_owner():
    ref = OwnerReference("v1", "ConfigMap", "cm", controller=True)
    with pytest.raises(OwnerError, match="owner controller is not policy.ClusterImportPolicy"):
        check_owner_controller([ref])


def test_owner_error_is_value_error():
    with pytest.raises(ValueError):
        check_owner_controller([])


def test_auth_patch_only_auth_fields_and_round_trips():
    auth = ClusterAuth(
        apiserver="https://localhost:6443",
        ca_data=b"ca",
        token_data=b"token",
        kubeconfig=b"config",
    )
    patch = auth.auth_patch()
    assert list(patch) == ["spec"]
    spec = patch["spec"]
    assert set(spec) == {"apiserver", "caData", "tokenData", "certData", "keyData", "kubeconfig"}
    assert spec["apiserver"] == "https://localhost:6443"
    assert base64.b64decode(spec["caData"]) == b"ca"
    assert base64.b64decode(spec["tokenData"]) == b"token"
    assert base64.b64decode(spec["kubeconfig"]) == b"config"
    assert spec["certData"] is None
    assert spec["keyData"] is None


def test_auth_patch_is_json_serializable():
    auth = ClusterAuth(apiserver="https://localhost", key_data=b"")
    encoded = json.dumps(auth.auth_patch())
    decoded = json.loads(encoded)
    assert decoded["spec"]["keyData"] == ""
    assert decoded["spec"]["caData"] is None


def test_same_auth_equal_and_none_equals_empty():
    a = ClusterAuth(apiserver="https://localhost", token_data=b"token", ca_data=None)
    b = ClusterAuth(apiserver="https://localhost", token_data=b"token", ca_data=b"")
    assert a.same_auth(b)
    assert b.same_auth(a)


def test_same_auth_detects_differences():
    base = ClusterAuth(apiserver="https://localhost", cert_data=b"cert")
    assert not base.same_auth(ClusterAuth(apiserver="https://other", cert_data=b"cert"))
    assert not base.same_auth(ClusterAuth(apiserver="https://localhost", cert_data=b"x"))
    assert not base.same_auth(ClusterAuth(apiserver="https://localhost"))