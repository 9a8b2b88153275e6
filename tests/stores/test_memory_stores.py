import pytest

from clusterplan.errors import ConflictError, NotFoundError
from clusterplan.stores.memory import InMemoryAppStore, InMemoryControlPlaneStore, InMemorySecretStore

from conftest import make_control_plane


def test_secret_store_bytes_and_not_found():
    s = InMemorySecretStore()
    s.add("ns", "a", {"k": "v", "b": b"raw"})
    assert s.get("ns", "a").data == {"k": b"v", "b": b"raw"}
    with pytest.raises(NotFoundError):
        s.get("ns", "missing")


def test_control_plane_store_bumps_version_and_detects_stale_writes():
    store = InMemoryControlPlaneStore(make_control_plane())
    cp = store.get("fleet-default", "c1")
    status = cp.status.model_copy(update={"initialized": False})

    updated = store.update_status(cp, status)
    assert updated.resource_version == "2"
    assert updated.status.initialized is False

    with pytest.raises(ConflictError):
        store.update_status(cp, status)


def test_app_store_delete():
    apps = InMemoryAppStore({("p-sys", "legacy"): {}})
    apps.delete("p-sys", "legacy")
    assert apps.deleted == [("p-sys", "legacy")]
    with pytest.raises(NotFoundError):
        apps.get("p-sys", "legacy")
