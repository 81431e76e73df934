"""Tests for the nsreg command line."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from nsreg.cli.main import app

runner = CliRunner()


def _fake_kubectl(args: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
    if "pods" in args:
        return subprocess.CompletedProcess(args, 0, stdout=json.dumps({"items": []}), stderr="")
    if "create" in args:
        return subprocess.CompletedProcess(
            args, 0, stdout=f"namespace/{args[-1]} created\n", stderr=""
        )
    raise subprocess.CalledProcessError(
        1,
        args,
        stderr=f'Error from server (NotFound): namespaces "{args[-3]}" not found',
    )


@pytest.fixture
def invoke(tmp_path: Path) -> Any:
    env = {
        "NSREG_DATABASE_URL": f"sqlite:///{tmp_path / 'nsreg.db'}",
        "NSREG_CLUSTERS": "100=prod",
    }
    env_file = tmp_path / "missing.env"

    def _invoke(*args: str, user: int = 10, admin: bool = False) -> Any:
        global_args = ["--env-file", str(env_file), "--user-id", str(user)]
        if admin:
            global_args.append("--admin")
        with patch(
            "nsreg.infrastructure.kubectl_client.subprocess.run",
            side_effect=_fake_kubectl,
        ):
            return runner.invoke(app, [*global_args, *args], env=env)

    return _invoke


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "nsreg" in result.output


def test_create_conflict_and_verify(invoke: Any) -> None:
    created = invoke("create", "team-x", "--cluster-code", "100")
    assert created.exit_code == 0, created.output
    assert "Registered" in created.output

    duplicate = invoke("create", "team-x", "--cluster-code", "100", user=20)
    assert duplicate.exit_code == 4
    assert "conflict" in duplicate.output

    assert invoke("verify", "team-x", "-c", "100").exit_code == 4
    available = invoke("verify", "team-y", "-c", "100")
    assert available.exit_code == 0
    assert "Available" in available.output


def test_invalid_name_and_unknown_cluster(invoke: Any) -> None:
    assert invoke("create", "Bad_Name", "-c", "100").exit_code == 1
    assert invoke("create", "team-x", "-c", "999").exit_code == 3


def test_listing_respects_grants(invoke: Any) -> None:
    assert invoke("create", "team-x", "-c", "100").exit_code == 0

    hidden = invoke("list", user=20)
    assert hidden.exit_code == 0
    assert "no namespaces" in hidden.output

    assert invoke("unauthorized", "--for-user", "20", user=20).exit_code == 5
    unauthorized = invoke("unauthorized", "--for-user", "20", admin=True, user=1)
    assert "team-x" in unauthorized.output

    assert invoke("grant", "1", "--for-user", "20").exit_code == 5
    assert invoke("grant", "1", "--for-user", "20", admin=True, user=1).exit_code == 0

    available = invoke("available", user=20)
    assert "team-x" in available.output
    listed = invoke("list", "--search", "TEAM", user=20)
    assert "team-x" in listed.output
    assert "total 1" in listed.output


def test_list_rejects_bad_page(invoke: Any) -> None:
    assert invoke("list", "--page-no", "0").exit_code == 1


def test_delete_flow(invoke: Any) -> None:
    assert invoke("create", "team-x", "-c", "100").exit_code == 0

    assert invoke("delete", "1", user=20).exit_code == 5
    deleted = invoke("delete", "1")
    assert deleted.exit_code == 0, deleted.output
    assert "Deleted" in deleted.output
    assert invoke("delete", "1").exit_code == 3


def test_access_audit_report(invoke: Any, tmp_path: Path) -> None:
    assert invoke("create", "team-x", "-c", "100").exit_code == 0
    reports = tmp_path / "reports"

    result = invoke(
        "access-audit", "--users", "10,20", "--report", str(reports), admin=True, user=1
    )

    assert result.exit_code == 0, result.output
    assert list(reports.rglob("namespace_access_*.csv"))
    assert list(reports.rglob("manifest.json"))
