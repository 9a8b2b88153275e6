import logging

import pytest
import yaml
from typer.testing import CliRunner

from clusterplan.cli.app import app

runner = CliRunner()

STATE = {
    "control_plane": {
        "namespace": "fleet-default",
        "name": "c1",
        "spec": {
            "kubernetes_version": "v1.27.4+k3s1",
            "etcd": {"s3": {"bucket": "snapshots", "cloud_credential_name": "s3-creds"}},
            "etcd_snapshot_create": {"generation": 1},
        },
        "status": {"initialized": True, "bootstrapped": True},
    },
    "machines": [
        {"namespace": "fleet-default", "name": "m0", "node_name": "node-0", "etcd": True,
         "init_node": True, "join_url": "https://10.0.0.10:6443"},
        {"namespace": "fleet-default", "name": "m1", "node_name": "node-1", "etcd": True},
    ],
    "secrets": [
        {"namespace": "fleet-default", "name": "s3-creds",
         "data": {"accessKey": "AK", "secretKey": "SK"}},
    ],
}


@pytest.fixture(autouse=True)
def _restore_logger():
    yield
    logger = logging.getLogger("clusterplan")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def state_file(tmp_path):
    p = tmp_path / "state.yaml"
    p.write_text(yaml.safe_dump(STATE, sort_keys=False))
    return p


def test_reconcile_runs_to_finished(state_file, tmp_path):
    res = runner.invoke(
        app, ["snapshot", "reconcile", str(state_file), "--passes", "4", "--log-dir", str(tmp_path / "logs")]
    )
    assert res.exit_code == 0, res.output
    assert "pass 1: waiting: refreshing etcd create state" in res.output
    assert "pass 4: ok" in res.output
    assert "phase: Finished" in res.output

    saved = yaml.safe_load(state_file.read_text())
    assert saved["control_plane"]["status"]["etcd_snapshot_create_phase"] == "Finished"
    assert saved["control_plane"]["status"]["etcd_snapshot_create"]["generation"] == 1
    assert saved["control_plane"]["resource_version"] == "3"


def test_single_pass_persists_started(state_file, tmp_path):
    res = runner.invoke(app, ["snapshot", "reconcile", str(state_file), "--log-dir", str(tmp_path / "logs")])
    assert res.exit_code == 0, res.output
    assert "phase: Started" in res.output

    res = runner.invoke(app, ["snapshot", "status", str(state_file)])
    assert res.exit_code == 0
    assert "phase: Started" in res.output
    assert '"generation":1' in res.output


def test_status_of_untouched_state(state_file):
    res = runner.invoke(app, ["snapshot", "status", str(state_file)])
    assert res.exit_code == 0
    assert "phase: <none>" in res.output
    assert "request: <none>" in res.output


def test_missing_credential_marks_failed(state_file, tmp_path):
    data = yaml.safe_load(state_file.read_text())
    data["secrets"] = []
    data["control_plane"]["status"]["etcd_snapshot_create_phase"] = "Started"
    data["control_plane"]["status"]["etcd_snapshot_create"] = {"generation": 1}
    state_file.write_text(yaml.safe_dump(data))

    res = runner.invoke(app, ["snapshot", "reconcile", str(state_file), "--log-dir", str(tmp_path / "logs")])
    assert res.exit_code == 0, res.output
    assert "failed to lookup etcdSnapshotCloudCredentialName" in res.output
    assert "phase: Failed" in res.output
