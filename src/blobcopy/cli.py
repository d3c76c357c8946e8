"""
blobcopy CLI

Implements 2 CLI verbs with Operations facade integration:
- copy: Server-side copy of one blob to another key, then verify by digest
- verify: Verify an existing copy without copying again

Connection values come from flags, a YAML config file (--config) or the
environment, in that order of precedence.
"""
from __future__ import annotations

import logging
import typer
from typing import Optional

from .cli_context import CLIContext
from .operations import Operations, OpsConfig, exit_code_for_outcome, run_and_exit
from .operations.printers import print_outcome

app = typer.Typer(
    name="blobcopy",
    help="Copy a blob within an Azure storage container and verify the copy.",
    no_args_is_help=True,
)

_CONNECTION_HELP = (
    "Either --config or --account-name + --account-key + --container are required "
    "(environment variables fill in anything not given)."
)


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
            force=True,
        )
        # SDK HTTP logging is noisy and can include request headers
        logging.getLogger("azure").setLevel(logging.WARNING)


def _build_operations(
    config: Optional[str],
    account_name: Optional[str],
    account_key: Optional[str],
    container: Optional[str],
    staging_dir: Optional[str],
    parallel: Optional[bool],
) -> Operations:
    context = CLIContext.from_options(
        config_path=config,
        account_name=account_name,
        account_key=account_key,
        container=container,
        staging_dir=staging_dir,
        parallel_verify=parallel,
    )
    ops_config = OpsConfig.from_settings(context.settings)
    return Operations(config=ops_config, store=context.store)


def _require_keys(source: str, destination: str) -> None:
    if not source.strip():
        raise ValueError("--source must not be empty")
    if not destination.strip():
        raise ValueError("--destination must not be empty")


@app.command()
def copy(
    source: str = typer.Option(..., "--source", "-s", help="Source blob to copy from"),
    destination: str = typer.Option(..., "--destination", "-d", help="Destination blob to copy to (may equal source)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to YAML configuration file"),
    account_name: Optional[str] = typer.Option(None, "--account-name", "-n", help="Azure account name"),
    account_key: Optional[str] = typer.Option(None, "--account-key", "-k", help="Azure account key"),
    container: Optional[str] = typer.Option(None, "--container", "-b", help="Azure container"),
    staging_dir: Optional[str] = typer.Option(None, "--staging-dir", help="Directory for verification temp files"),
    parallel: Optional[bool] = typer.Option(None, "--parallel/--sequential", help="Download both blobs concurrently when verifying"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
) -> None:
    """Copy SOURCE to DESTINATION server-side, then verify content digests."""
    _configure_logging(verbose)

    def _copy() -> int:
        _require_keys(source, destination)
        ops = _build_operations(config, account_name, account_key, container, staging_dir, parallel)
        outcome = ops.copy(source, destination)
        print_outcome(outcome, source, destination)
        return exit_code_for_outcome(outcome)

    code = run_and_exit(_copy)
    raise typer.Exit(code=code)


@app.command()
def verify(
    source: str = typer.Option(..., "--source", "-s", help="Reference blob"),
    destination: str = typer.Option(..., "--destination", "-d", help="Blob expected to match the reference"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to YAML configuration file"),
    account_name: Optional[str] = typer.Option(None, "--account-name", "-n", help="Azure account name"),
    account_key: Optional[str] = typer.Option(None, "--account-key", "-k", help="Azure account key"),
    container: Optional[str] = typer.Option(None, "--container", "-b", help="Azure container"),
    staging_dir: Optional[str] = typer.Option(None, "--staging-dir", help="Directory for verification temp files"),
    parallel: Optional[bool] = typer.Option(None, "--parallel/--sequential", help="Download both blobs concurrently"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
) -> None:
    """Verify DESTINATION already matches SOURCE without copying."""
    _configure_logging(verbose)

    def _verify() -> int:
        _require_keys(source, destination)
        ops = _build_operations(config, account_name, account_key, container, staging_dir, parallel)
        outcome = ops.verify(source, destination)
        print_outcome(outcome, source, destination)
        return exit_code_for_outcome(outcome)

    code = run_and_exit(_verify)
    raise typer.Exit(code=code)


@app.callback(epilog=_CONNECTION_HELP)
def _main() -> None:
    """Copy a blob within an Azure storage container and verify the copy."""


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
