from __future__ import annotations

import json
from pathlib import Path
from typing import Callable

import httpx
import pytest

import ollama_testgen.generation.cli as cli_mod
from ollama_testgen.generation.transport import HttpxTransport


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ["OLLAMA_MODEL", "OLLAMA_BASE_URL", "OLLAMA_STREAM", "OLLAMA_TIMEOUT", "LOG_LEVEL"]:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def cfg(tmp_path: Path) -> str:
    template = tmp_path / "template.txt"
    template.write_text("Write a test for:\n{{input}}\n", encoding="utf-8")
    path = tmp_path / "client.yaml"
    path.write_text(f"model: cfg-model\nbase_url: http://mock\ntemplate_path: {template}\n", encoding="utf-8")
    return str(path)


def _patch_transport(monkeypatch: pytest.MonkeyPatch, handler: Callable[[httpx.Request], httpx.Response]) -> None:
    def factory(timeout: float = 120.0) -> HttpxTransport:
        return HttpxTransport(client=httpx.Client(transport=httpx.MockTransport(handler)))

    monkeypatch.setattr(cli_mod, "HttpxTransport", factory)


def test_cli_prints_generated_code(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], cfg: str) -> None:
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"test_name": "test_x", "code": "assert x() == 1"})

    _patch_transport(monkeypatch, handler)
    rc = cli_mod.main(["--text", "def x(): return 1", "--cfg", cfg, "--model", "cli-model"])
    assert rc == 0
    assert "assert x() == 1" in capsys.readouterr().out
    assert seen[0]["model"] == "cli-model"
    assert seen[0]["prompt"] == "Write a test for:\ndef x(): return 1\n"


def test_cli_raw(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], cfg: str) -> None:
    _patch_transport(monkeypatch, lambda request: httpx.Response(200, text="raw body"))
    assert cli_mod.main(["--text", "x", "--cfg", cfg, "--raw"]) == 0
    assert "raw body" in capsys.readouterr().out


def test_cli_service_error(monkeypatch: pytest.MonkeyPatch, cfg: str) -> None:
    _patch_transport(monkeypatch, lambda request: httpx.Response(500, text="server error"))
    assert cli_mod.main(["--text", "x", "--cfg", cfg]) == 1


def test_cli_parse_error(monkeypatch: pytest.MonkeyPatch, cfg: str) -> None:
    _patch_transport(monkeypatch, lambda request: httpx.Response(200, text="not json"))
    assert cli_mod.main(["--text", "x", "--cfg", cfg]) == 1


def test_cli_missing_config(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli_mod.main(["--text", "x", "--cfg", str(tmp_path / "missing.yaml")]) == 2
    assert "config not found" in capsys.readouterr().err


def test_cli_template_without_placeholder(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], tmp_path: Path
) -> None:
    template = tmp_path / "template.txt"
    template.write_text("Write a test.\n", encoding="utf-8")
    path = tmp_path / "client.yaml"
    path.write_text(f"base_url: http://mock\ntemplate_path: {template}\n", encoding="utf-8")
    sent: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        sent.append(request)
        return httpx.Response(200, json={"test_name": "t", "code": "c"})

    _patch_transport(monkeypatch, handler)
    assert cli_mod.main(["--text", "def secret_fn(): pass", "--cfg", str(path)]) == 2
    assert "{{input}}" in capsys.readouterr().err
    assert sent == []


def test_cli_raw_non_utf8_body(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], cfg: str) -> None:
    _patch_transport(monkeypatch, lambda request: httpx.Response(200, content=b"ok \xff"))
    assert cli_mod.main(["--text", "x", "--cfg", cfg, "--raw"]) == 0
    assert "ok �" in capsys.readouterr().out
