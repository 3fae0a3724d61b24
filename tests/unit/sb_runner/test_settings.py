"""Tests for RunSettings loading, merging and validation."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from sb_common.errors import ConfigurationError
from sb_runner.api import FailurePolicy, RunSettings, WorkloadSettings

pytestmark = pytest.mark.unit_runner


def test_defaults_match_cli() -> None:
    settings = RunSettings()
    assert settings.workload == WorkloadSettings(
        accounts=1000,
        contracts=100,
        max_slots=10000,
        min_slots=1,
        distribution="power-law",
        seed=0,
        code_size=1024,
    )
    assert settings.db_dir == Path("tmp")
    assert settings.harnesses_dir == Path("harnesses")
    assert settings.timeout_seconds == 1800
    assert settings.failure_policy is FailurePolicy.FAIL_FAST
    assert settings.clients == []


def test_clients_accept_comma_string() -> None:
    assert RunSettings(clients=" geth, reth ,,erigon").clients == ["geth", "reth", "erigon"]


@pytest.mark.parametrize("value", [0, None])
def test_timeout_can_be_disabled(value) -> None:
    assert RunSettings(timeout_seconds=value).timeout_seconds is None


def test_zero_timeout_flag_disables_timeout() -> None:
    assert RunSettings().merged({"timeout_seconds": 0}).timeout_seconds is None
    assert RunSettings().merged({"timeout_seconds": 90}).timeout_seconds == 90


def test_require_clients() -> None:
    with pytest.raises(ConfigurationError, match="at least one client"):
        RunSettings().require_clients()
    with pytest.raises(ConfigurationError) as excinfo:
        RunSettings(clients=["geth", "reth", "geth"]).require_clients()
    assert excinfo.value.context["duplicates"] == ["geth"]


def test_load_json(tmp_path: Path) -> None:
    path = tmp_path / "run.json"
    path.write_text(json.dumps({"clients": ["geth"], "workload": {"accounts": 5}}))
    settings = RunSettings.load(path)
    assert settings.clients == ["geth"]
    assert settings.workload.accounts == 5
    assert settings.workload.contracts == 100


def test_load_yaml(tmp_path: Path) -> None:
    path = tmp_path / "run.yaml"
    path.write_text(
        "clients: geth,besu\n"
        "failure_policy: collect\n"
        "timeout_seconds: 90\n"
        "workload:\n"
        "  distribution: uniform\n"
    )
    settings = RunSettings.load(path)
    assert settings.clients == ["geth", "besu"]
    assert settings.failure_policy is FailurePolicy.COLLECT
    assert settings.timeout_seconds == 90
    assert settings.workload.distribution == "uniform"


@pytest.mark.parametrize(
    "name, content",
    [
        ("bad.json", "{not json"),
        ("list.yaml", "- a\n- b\n"),
        ("neg.json", '{"timeout_seconds": -5}'),
        ("slots.json", '{"workload": {"accounts": -1}}'),
    ],
)
def test_load_rejects_invalid_files(tmp_path: Path, name: str, content: str) -> None:
    path = tmp_path / name
    path.write_text(content)
    with pytest.raises(ConfigurationError):
        RunSettings.load(path)


def test_load_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="cannot read"):
        RunSettings.load(tmp_path / "missing.json")


def test_save_and_load(tmp_path: Path) -> None:
    path = tmp_path / "saved.json"
    original = RunSettings(clients=["geth"], skip_build=True)
    original.save(path)
    assert RunSettings.load(path) == original


def test_merged_skips_none_and_merges_workload() -> None:
    base = RunSettings(clients=["geth"], workload=WorkloadSettings(accounts=7, contracts=3))
    merged = base.merged(
        {"clients": None, "skip_build": True, "workload": {"accounts": None, "contracts": 9}}
    )
    assert merged.clients == ["geth"]
    assert merged.skip_build is True
    assert merged.workload.accounts == 7
    assert merged.workload.contracts == 9


def test_to_config_overrides_seed() -> None:
    config = WorkloadSettings(seed=0).to_config(seed=99)
    assert config.seed == 99


def test_to_config_rejects_inverted_bounds() -> None:
    with pytest.raises(ConfigurationError):
        WorkloadSettings(min_slots=10, max_slots=2).to_config()
