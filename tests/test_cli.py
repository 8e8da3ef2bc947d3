"""CLI commands through click's CliRunner."""

import json

import httpx
import pytest
from click.testing import CliRunner

from restree import HttpTransport
from restree.cli import main as cli_main
from restree.cli import tree as cli_tree
from restree.cli.main import main

DECLARATION = {
    "location": "https://api.example.com",
    "headers": {"Accept": "application/json"},
    "endpoints": {
        "user": {"location": "user/{id}", "endpoints": {"images": {}}},
        "search": {},
    },
}


@pytest.fixture
def tree_file(tmp_path):
    path = tmp_path / "tree.json"
    path.write_text(json.dumps(DECLARATION))
    return str(path)


@pytest.fixture(autouse=True)
def config_file(tmp_path, monkeypatch):
    path = tmp_path / "home" / "config.json"
    monkeypatch.setattr(cli_main, "CONFIG_FILE", path)
    return path


@pytest.fixture
def runner():
    return CliRunner()


def test_show(runner, tree_file):
    result = runner.invoke(main, ["show", tree_file])
    assert result.exit_code == 0, result.output
    assert "user" in result.output
    assert "images" in result.output
    assert "search" in result.output


def test_url(runner, tree_file):
    result = runner.invoke(main, ["url", tree_file, "user.images", "-p", "id=7", "-q", "q=a b"])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "https://api.example.com/user/7/images?q=a%20b"


def test_url_missing_parameter(runner, tree_file):
    result = runner.invoke(main, ["url", tree_file, "user.images"])
    assert result.exit_code == 1
    assert "Missing parameter 'id'" in result.output


def test_url_unknown_endpoint(runner, tree_file):
    result = runner.invoke(main, ["url", tree_file, "nope"])
    assert result.exit_code == 1


def test_bad_pair(runner, tree_file):
    result = runner.invoke(main, ["url", tree_file, "user", "-p", "id"])
    assert result.exit_code == 2


def test_config_roundtrip(runner, config_file):
    assert runner.invoke(main, ["config", "set-header", "X-Token", "abc"]).exit_code == 0
    assert runner.invoke(main, ["config", "set-timeout", "5"]).exit_code == 0
    assert json.loads(config_file.read_text()) == {"headers": {"X-Token": "abc"}, "timeout": 5.0}

    result = runner.invoke(main, ["config", "show"])
    assert "X-Token" in result.output

    assert runner.invoke(main, ["config", "unset-header", "X-Token"]).exit_code == 0
    assert json.loads(config_file.read_text())["headers"] == {}


def test_call(runner, tree_file, config_file, monkeypatch):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"created": True})

    monkeypatch.setattr(
        cli_tree,
        "_make_transport",
        lambda timeout: HttpTransport(client=httpx.AsyncClient(transport=httpx.MockTransport(handler))),
    )
    config_file.parent.mkdir(parents=True)
    config_file.write_text(json.dumps({"headers": {"X-Token": "saved"}}))

    result = runner.invoke(main, [
        "call", tree_file, "user", "-X", "POST", "-p", "id=3",
        "-d", '{"name": "ana"}', "-H", "X-Trace: 1", "--json",
    ])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"status": 201, "data": {"created": True}}
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://api.example.com/user/3"
    assert json.loads(request.content) == {"name": "ana"}
    assert request.headers["X-Token"] == "saved"
    assert request.headers["X-Trace"] == "1"


def test_call_failure_exit_code(runner, tree_file, monkeypatch):
    monkeypatch.setattr(
        cli_tree,
        "_make_transport",
        lambda timeout: HttpTransport(client=httpx.AsyncClient(
            transport=httpx.MockTransport(lambda r: httpx.Response(404, json={"error": "gone"})),
        )),
    )
    result = runner.invoke(main, ["call", tree_file, "search", "--json"])
    assert result.exit_code == 1
    assert json.loads(result.output) == {"status": 404, "data": {"error": "gone"}}
