from __future__ import annotations

from pathlib import Path

import typer

from pstore.cli.commands._helpers import (
    exit_on_publish_error,
    exit_with_error,
    parse_mapping_pairs,
)
from pstore.cli.context import build_context
from pstore.core.config import PublishConfig, load_config
from pstore.core.errors import ErrorCode
from pstore.core.result import Err, Result
from pstore.publish.catalog import CatalogClient
from pstore.publish.config import DEFAULT_TRACK
from pstore.publish.errors import RemoteCallFailed
from pstore.publish.google_play import GooglePlayCatalogClient
from pstore.publish.model import PublishInput
from pstore.publish.orchestrator import Publisher
from pstore.publish.request import collect_binaries, validate_request


def connect_catalog(credentials_path: str) -> Result[CatalogClient, RemoteCallFailed]:
    return GooglePlayCatalogClient.from_service_account_file(credentials_path)


def upload(
    auth_file: str | None = typer.Option(
        None,
        "--auth-file",
        "--authFile",
        help="Service account JSON key file.",
    ),
    app_id: str | None = typer.Option(
        None,
        "--app-id",
        "--appId",
        help="Application ID, e.g. com.sample.app",
    ),
    app_bin_only: list[str] | None = typer.Option(
        None,
        "--app-bin-only",
        "--appBinOnly",
        help="Binary to upload without a mapping (repeatable), e.g. build/app.aab",
    ),
    app_bin: list[str] | None = typer.Option(
        None,
        "--app-bin",
        "--appBin",
        help="Binary and its ProGuard mapping as PATH=MAPPING (repeatable).",
    ),
    track: str | None = typer.Option(
        None,
        "--track",
        help=f"Track to upload to: internal, alpha or beta [default: {DEFAULT_TRACK}]",
    ),
    apk: bool = typer.Option(False, "--apk", help="Binaries are .apk files (default: .aab bundles)."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output."),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        help="TOML file with [publish] settings; flags take precedence.",
    ),
) -> None:
    """Upload binaries (and mappings) to Google Play in a single edit."""
    file_config = PublishConfig()
    if config_path is not None:
        loaded = load_config(config_path)
        if isinstance(loaded, Err):
            exit_with_error(build_context(), loaded.error.message, code=ErrorCode.USER_ERROR)
        file_config = loaded.value

    ctx = build_context(verbose=verbose or bool(file_config.verbose))

    credentials = auth_file or file_config.credentials
    if credentials is None:
        exit_with_error(ctx, "authentication file is required (--auth-file)", code=ErrorCode.USER_ERROR)

    pairs = parse_mapping_pairs(app_bin or [])
    if isinstance(pairs, str):
        exit_with_error(ctx, f"invalid --app-bin (expected PATH=MAPPING): {pairs}", code=ErrorCode.USER_ERROR)

    publish_input = PublishInput(
        package_name=app_id or file_config.package_name or "",
        track=track or file_config.track or DEFAULT_TRACK,
        credentials_path=credentials,
        binaries=collect_binaries(app_bin_only or [], [*file_config.binaries, *pairs]),
        is_apk=apk or bool(file_config.apk),
        verbose=verbose or bool(file_config.verbose),
    )

    validated = validate_request(publish_input, fs=ctx.fs)
    if isinstance(validated, Err):
        exit_on_publish_error(ctx, validated.error)
    request = validated.value

    client = connect_catalog(credentials)
    if isinstance(client, Err):
        exit_on_publish_error(ctx, client.error)

    publisher = Publisher(fs=ctx.fs, console=ctx.console)
    result = publisher.run(request, client.value)
    if isinstance(result, Err):
        exit_on_publish_error(ctx, result.error)

    outcome = result.value
    codes = ", ".join(str(code) for code in outcome.version_codes)
    ctx.console.success(
        f"all files uploaded to {request.track} for {request.package_name} (version codes: {codes})"
    )
