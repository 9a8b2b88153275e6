import pytest

from clusterplan.errors import InitNodeError
from clusterplan.planner.entries import ClusterPlan, PlanEntry, find_init_node

from conftest import make_cluster_plan


def test_find_init_node():
    found, join, entry = find_init_node(make_cluster_plan())
    assert found
    assert join == "https://10.0.0.10:9345"
    assert entry.name == "m0"


def test_no_init_node():
    assert find_init_node(make_cluster_plan(with_init=False)) == (False, "", None)


def test_deleting_init_node_is_ignored():
    plan = ClusterPlan([PlanEntry(namespace="ns", name="m0", init_node=True, join_url="u", deleting=True)])
    assert find_init_node(plan)[0] is False


def test_multiple_init_nodes_is_error():
    plan = ClusterPlan(
        [
            PlanEntry(namespace="ns", name="a", init_node=True, join_url="u1"),
            PlanEntry(namespace="ns", name="b", init_node=True, join_url="u2"),
        ]
    )
    with pytest.raises(InitNodeError, match="ns/a, ns/b"):
        find_init_node(plan)


def test_describe():
    assert PlanEntry(namespace="ns", name="m", node_name="n").describe() == "node n"
    assert PlanEntry(namespace="ns", name="m").describe() == "machine ns/m"
