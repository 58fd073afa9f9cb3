"""guestpin generate command - Write binding modules from guestpin.yaml."""

from __future__ import annotations

from pathlib import Path

import click

from guestpin_cli.errors import (
    EXIT_SYSTEM_ERROR,
    CLIError,
    handle_file_not_found,
    handle_permission_error,
)
from guestpin_cli.output import info, success


@click.command()
@click.option(
    "-f",
    "--file",
    "file_path",
    type=click.Path(exists=False),
    default="./guestpin.yaml",
    help="Path to guestpin.yaml [default: ./guestpin.yaml]",
)
@click.option(
    "-o",
    "--output",
    "output_path",
    type=click.Path(),
    default="./guests",
    help="Output package directory [default: ./guests]",
)
@click.option(
    "--base-dir",
    "base_dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Base directory for relative crate paths [default: GUESTPIN_BASE_DIR or guestpin.yaml dir]",
)
def generate(file_path: str, output_path: str, base_dir: str | None) -> None:
    """Generate binding modules from guestpin.yaml.

    Locates each guest artifact, derives its image ID and writes one
    module per binding (ELF and ID constants) plus a package index.
    Nothing is written unless every binding succeeds.

    Examples:

        guestpin generate

        guestpin generate --output host/src/host/guests

        guestpin generate --file host/guestpin.yaml --base-dir host
    """
    path = Path(file_path)

    if not path.exists():
        handle_file_not_found(file_path)

    # Import here to avoid heavy imports at CLI startup
    from guestpin_core import BindingCompiler, GuestpinError
    from guestpin_core.compiler import write_bindings

    try:
        compiler = BindingCompiler(base_dir=base_dir)
        bindings = compiler.compile(path)
        write_bindings(bindings, Path(output_path))

    except PermissionError as e:
        handle_permission_error(e.filename or output_path, "access")

    except OSError as e:
        raise CLIError(f"Generation failed: {e}", exit_code=EXIT_SYSTEM_ERROR) from None

    except GuestpinError as e:
        raise CLIError(f"Generation failed: {e}") from None

    for binding in bindings:
        info(f"  {binding.name}: {binding.crate_name} ({len(binding.elf)} bytes) {binding.image_id}")
    success(f"Generated {len(bindings)} binding(s) in {output_path}")
