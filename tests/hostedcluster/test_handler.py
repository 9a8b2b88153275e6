import pytest

from clusterplan.config.models import OperatorChartSettings
from clusterplan.hostedcluster.handler import HostedClusterHandler
from clusterplan.hostedcluster.models import HostedCluster, HostedProvider
from clusterplan.observers.dispatcher import EventBus
from clusterplan.stores.memory import InMemoryAppStore, InMemorySecretStore


class SpyInstaller:
    def __init__(self):
        self.calls = []

    def ensure(self, namespace, name, version, values, wait):
        self.calls.append((namespace, name, version, values, wait))


def _handler(installer, apps=None, secrets=None, bus=None, **settings):
    return HostedClusterHandler(
        installer=installer,
        apps=apps or InMemoryAppStore(),
        secrets=secrets or InMemorySecretStore(),
        system_project_namespace="p-system",
        settings=OperatorChartSettings(**settings),
        bus=bus,
    )


def test_from_configs_is_a_tagged_variant():
    assert HostedCluster.from_configs("c").provider is None
    assert HostedCluster.from_configs("c", eks_config={"region": "us-east-1"}).provider is HostedProvider.EKS
    with pytest.raises(ValueError, match="aks, gke"):
        HostedCluster.from_configs("c", aks_config={}, gke_config={})


def test_skips_absent_deleting_and_non_hosted_clusters():
    spy = SpyInstaller()
    h = _handler(spy)
    assert h.on_cluster_change(None) is None
    h.on_cluster_change(HostedCluster(name="c", provider=HostedProvider.AKS, deleting=True))
    h.on_cluster_change(HostedCluster(name="c"))
    assert spy.calls == []


def test_installs_crd_chart_then_operator_chart(monkeypatch, capture):
    monkeypatch.setenv("HTTP_PROXY", "http://proxy:3128")
    monkeypatch.delenv("HTTPS_PROXY", raising=False)
    monkeypatch.setenv("NO_PROXY", "127.0.0.1")
    spy = SpyInstaller()
    cluster = HostedCluster(name="c1", provider=HostedProvider.EKS)

    out = _handler(spy, bus=EventBus([capture]), system_default_registry="reg.local").on_cluster_change(cluster)

    assert out is cluster
    assert spy.calls[0] == ("cattle-system", "rancher-eks-operator-crd", None, None, True)
    ns, name, version, values, wait = spy.calls[1]
    assert (ns, name, wait) == ("cattle-system", "rancher-eks-operator", True)
    assert values == {
        "global": {"cattle": {"systemDefaultRegistry": "reg.local"}},
        "httpProxy": "http://proxy:3128",
        "httpsProxy": "",
        "noProxy": "127.0.0.1",
        "additionalTrustedCAs": False,
    }
    assert capture.kinds() == ["OperatorChartEnsured", "OperatorChartEnsured"]


def test_additional_ca_secret_sets_flag():
    secrets = InMemorySecretStore()
    secrets.add("cattle-system", "tls-ca-additional", {"ca-additional.pem": "PEM"})
    spy = SpyInstaller()
    _handler(spy, secrets=secrets).on_cluster_change(HostedCluster(name="c1", provider=HostedProvider.GKE))
    assert spy.calls[1][3]["additionalTrustedCAs"] is True


def test_removes_legacy_operator_app(capture):
    apps = InMemoryAppStore({("p-system", "rancher-aks-operator"): {"spec": {}}})
    spy = SpyInstaller()
    _handler(spy, apps=apps, bus=EventBus([capture])).on_cluster_change(
        HostedCluster(name="c1", provider=HostedProvider.AKS)
    )
    assert apps.deleted == [("p-system", "rancher-aks-operator")]
    assert capture.kinds()[0] == "LegacyOperatorRemoved"
    assert len(spy.calls) == 2


def test_installer_failure_propagates():
    class Broken:
        def ensure(self, *a):
            raise RuntimeError("helm down")

    with pytest.raises(RuntimeError, match="helm down"):
        _handler(Broken()).on_cluster_change(HostedCluster(name="c1", provider=HostedProvider.EKS))
