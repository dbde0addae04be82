from __future__ import annotations

from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

from pstore import __version__
from pstore.cli.app import app
from pstore.cli.context import CLIContext
from pstore.core.errors import ErrorCode
from pstore.core.result import Err, Ok, Result
from pstore.output.console import MockConsole
from pstore.platform.files import MemoryFileSystem
from pstore.publish.catalog import CatalogClient, MockCatalogClient
from pstore.publish.errors import RemoteCallFailed


def _fs() -> MemoryFileSystem:
    return MemoryFileSystem(
        {
            "auth.json": b"{}",
            "app.aab": b"bundle",
            "mapping.txt": b"a -> b",
        }
    )


def _patch(
    monkeypatch: pytest.MonkeyPatch,
    *,
    client: MockCatalogClient | None = None,
    connect_error: RemoteCallFailed | None = None,
    fs: MemoryFileSystem | None = None,
) -> tuple[MockConsole, list[str]]:
    import pstore.cli.commands.upload_cmd as upload_cmd

    console = MockConsole()
    ctx = CLIContext(console=console, fs=fs or _fs())
    connected: list[str] = []

    def fake_connect(credentials_path: str) -> Result[CatalogClient, RemoteCallFailed]:
        connected.append(credentials_path)
        if connect_error is not None:
            return Err(connect_error)
        return Ok(client or MockCatalogClient())

    monkeypatch.setattr(upload_cmd, "build_context", lambda **_: ctx)
    monkeypatch.setattr(upload_cmd, "connect_catalog", fake_connect)
    return console, connected


def _upload(**overrides: object) -> None:
    import pstore.cli.commands.upload_cmd as upload_cmd

    kwargs: dict[str, object] = {
        "auth_file": "auth.json",
        "app_id": "com.sample.app",
        "app_bin_only": None,
        "app_bin": None,
        "track": None,
        "apk": False,
        "verbose": False,
        "config_path": None,
    }
    kwargs.update(overrides)
    upload_cmd.upload(**kwargs)  # type: ignore[arg-type]


def test_upload_success(monkeypatch: pytest.MonkeyPatch) -> None:
    client = MockCatalogClient(version_code=12)
    console, connected = _patch(monkeypatch, client=client)

    _upload(app_bin=["app.aab=mapping.txt"])

    assert connected == ["auth.json"]
    assert client.operations == [
        "create_edit",
        "upload_bundle",
        "upload_proguard_mapping",
        "validate_edit",
        "commit_edit",
    ]
    assert console.find("version codes: 12")


def test_bin_only_and_mapping_for_same_path_keep_mapping(monkeypatch: pytest.MonkeyPatch) -> None:
    client = MockCatalogClient()
    _patch(monkeypatch, client=client)

    _upload(app_bin_only=["app.aab"], app_bin=["app.aab=mapping.txt"])

    assert client.count("upload_bundle") == 1
    assert client.count("upload_proguard_mapping") == 1


def test_production_track_rejected_before_connecting(monkeypatch: pytest.MonkeyPatch) -> None:
    console, connected = _patch(monkeypatch)

    with pytest.raises(typer.Exit) as exc:
        _upload(app_bin_only=["app.aab"], track="production")

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
    assert connected == []
    assert console.find("track 'production' is not supported")


def test_no_binaries(monkeypatch: pytest.MonkeyPatch) -> None:
    console, _ = _patch(monkeypatch)

    with pytest.raises(typer.Exit) as exc:
        _upload()

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
    assert console.find("no binary files to upload provided")


def test_missing_auth_file_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    console, _ = _patch(monkeypatch)

    with pytest.raises(typer.Exit) as exc:
        _upload(auth_file=None, app_bin_only=["app.aab"])

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
    assert console.find("authentication file is required")


def test_malformed_app_bin(monkeypatch: pytest.MonkeyPatch) -> None:
    console, _ = _patch(monkeypatch)

    with pytest.raises(typer.Exit) as exc:
        _upload(app_bin=["app.aab"])

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
    assert console.find("expected PATH=MAPPING")


def test_missing_binary_exits_with_io_error(monkeypatch: pytest.MonkeyPatch) -> None:
    console, _ = _patch(monkeypatch)

    with pytest.raises(typer.Exit) as exc:
        _upload(app_bin_only=["missing.aab"])

    assert exc.value.exit_code == int(ErrorCode.IO_ERROR)
    assert console.find("binary file 'missing.aab' does not exist")


def test_connect_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch(monkeypatch, connect_error=RemoteCallFailed(operation="connect", message="bad key"))

    with pytest.raises(typer.Exit) as exc:
        _upload(app_bin_only=["app.aab"])

    assert exc.value.exit_code == int(ErrorCode.ENV_ERROR)


def test_integrity_failure_exit_code(monkeypatch: pytest.MonkeyPatch) -> None:
    client = MockCatalogClient(remote_sha256="randomValue")
    console, _ = _patch(monkeypatch, client=client)

    with pytest.raises(typer.Exit) as exc:
        _upload(app_bin_only=["app.aab"])

    assert exc.value.exit_code == int(ErrorCode.INTEGRITY_ERROR)
    assert client.count("delete_edit") == 1
    assert console.has_error()


def test_config_file_supplies_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = tmp_path / "pstore.toml"
    config.write_text(
        """
[publish]
package_name = "com.from.config"
track = "beta"
credentials = "auth.json"

[[publish.binaries]]
path = "app.aab"
mapping = "mapping.txt"
""",
        encoding="utf-8",
    )
    client = MockCatalogClient()
    console, connected = _patch(monkeypatch, client=client)

    _upload(auth_file=None, app_id=None, config_path=config)

    assert connected == ["auth.json"]
    assert client.calls[0] == ("create_edit", "com.from.config")
    assert client.count("upload_proguard_mapping") == 1
    assert console.find("uploaded to beta")


def test_flags_override_config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = tmp_path / "pstore.toml"
    config.write_text('[publish]\npackage_name = "com.from.config"\n', encoding="utf-8")
    client = MockCatalogClient()
    _patch(monkeypatch, client=client)

    _upload(config_path=config, app_bin_only=["app.aab"])

    assert client.calls[0] == ("create_edit", "com.sample.app")


def test_invalid_config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = tmp_path / "pstore.toml"
    config.write_text("[publish\n", encoding="utf-8")
    console, _ = _patch(monkeypatch)

    with pytest.raises(typer.Exit) as exc:
        _upload(config_path=config)

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
    assert console.find("Invalid TOML syntax")


def test_legacy_flag_names(monkeypatch: pytest.MonkeyPatch) -> None:
    client = MockCatalogClient()
    _patch(monkeypatch, client=client)

    result = CliRunner().invoke(
        app,
        [
            "upload",
            "--authFile",
            "auth.json",
            "--appId",
            "com.sample.app",
            "--appBin",
            "app.aab=mapping.txt",
            "--apk",
        ],
    )

    assert result.exit_code == 0, result.output
    assert client.count("upload_apk") == 1
    assert client.count("upload_proguard_mapping") == 1


def test_version_flag() -> None:
    result = CliRunner().invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output
