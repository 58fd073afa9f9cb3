"""guestpin locate command - Show where a guest artifact is expected."""

from __future__ import annotations

from pathlib import Path

import click

from guestpin_cli.errors import CLIError
from guestpin_cli.output import info, print_json, warning


@click.command("locate")
@click.argument("crate", type=str)
@click.option(
    "--base-dir",
    "base_dir",
    type=click.Path(file_okay=False),
    default=".",
    help="Base directory for a relative CRATE path [default: .]",
)
@click.option(
    "--target-triple",
    "target_triple",
    type=str,
    default=None,
    help="Target triple [default: riscv32im-risc0-zkvm-elf]",
)
@click.option(
    "--profile",
    "profile",
    type=click.Choice(["debug", "release"]),
    default="release",
    help="Build profile [default: release]",
)
@click.option(
    "--workspace-root",
    "workspace_root",
    type=click.Path(file_okay=False),
    default=None,
    help="Workspace root containing target/ [default: parent of --base-dir]",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Output as JSON",
)
def locate_cmd(
    crate: str,
    base_dir: str,
    target_triple: str | None,
    profile: str,
    workspace_root: str | None,
    as_json: bool,
) -> None:
    """Resolve a guest crate to its expected artifact path.

    Reads the crate's Cargo.toml and prints the canonical crate
    directory, crate name and artifact path.

    Examples:

        guestpin locate ../guest

        guestpin locate ../guest --profile debug --json
    """
    from guestpin_core import ResolutionError
    from guestpin_core.compiler import locate
    from guestpin_core.schemas import DEFAULT_TARGET_TRIPLE

    try:
        resolved = locate(
            crate,
            Path(base_dir),
            target_triple=target_triple or DEFAULT_TARGET_TRIPLE,
            profile=profile,
            workspace_root=workspace_root,
        )
    except ResolutionError as e:
        raise CLIError(str(e)) from None

    exists = resolved.artifact_path.is_file()
    if as_json:
        print_json(
            {
                "crate_dir": str(resolved.crate_dir),
                "crate_name": resolved.crate_name,
                "artifact_path": str(resolved.artifact_path),
                "exists": exists,
            }
        )
        return

    info(f"crate:    {resolved.crate_name}")
    info(f"crate dir: {resolved.crate_dir}")
    info(f"artifact: {resolved.artifact_path}")
    if not exists:
        warning("Artifact not built yet")
