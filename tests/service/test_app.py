"""Tests for the FastAPI service mode."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from codecontext.service import create_app
from tests._fixtures.repo_builder import RepoBuilder


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_build_endpoint(client: TestClient, repo_builder: RepoBuilder) -> None:
    repo_builder.write({"a.py": "def helper(): pass\ndef main(): helper()\n"})

    response = client.post("/build", json={"path": str(repo_builder.path())})

    assert response.status_code == 200
    data = response.json()
    assert data["mode"] == "full"
    assert data["files"] == 1
    assert data["symbols"] == 2
    assert data["stats"]["file_count"] == 1

    again = client.post("/build", json={"path": str(repo_builder.path())})
    assert again.json()["mode"] == "fresh"


def test_symbol_lookup(client: TestClient, repo_builder: RepoBuilder) -> None:
    repo_builder.write({"a.py": "def helper(): pass\ndef main(): helper()\n"})

    response = client.get("/symbols/helper", params={"path": str(repo_builder.path())})

    assert response.status_code == 200
    [symbol] = response.json()
    assert symbol["file"] == "a.py"
    assert symbol["called_by"] == ["main"]

    missing = client.get("/symbols/nothing", params={"path": str(repo_builder.path())})
    assert missing.status_code == 404


def test_missing_repository_returns_404(client: TestClient, tmp_path) -> None:
    response = client.post("/build", json={"path": str(tmp_path / "missing")})
    assert response.status_code == 404
