"""guestpin validate command - Validate guestpin.yaml configuration."""

from __future__ import annotations

from pathlib import Path

import click

from guestpin_cli.errors import (
    EXIT_SYSTEM_ERROR,
    CLIError,
    format_pydantic_error,
    handle_file_not_found,
)
from guestpin_cli.output import success


@click.command()
@click.option(
    "-f",
    "--file",
    "file_path",
    type=click.Path(exists=False),
    default="./guestpin.yaml",
    help="Path to guestpin.yaml [default: ./guestpin.yaml]",
)
def validate(file_path: str) -> None:
    """Validate guestpin.yaml configuration.

    Checks the file against the BindingsSpec schema without touching
    any guest crate or artifact.

    Examples:

        guestpin validate

        guestpin validate --file host/guestpin.yaml
    """
    path = Path(file_path)

    if not path.exists():
        handle_file_not_found(file_path)

    from pydantic import ValidationError as PydanticValidationError

    from guestpin_core import ConfigurationError
    from guestpin_core.compiler import load_bindings_spec

    try:
        spec = load_bindings_spec(path)
    except ConfigurationError as e:
        if isinstance(e.__cause__, PydanticValidationError):
            formatted = format_pydantic_error(e.__cause__)
            raise CLIError(f"Invalid configuration in {file_path}:\n{formatted}") from None
        raise CLIError(str(e)) from None
    except OSError as e:
        raise CLIError(f"Cannot read {file_path}: {e}", exit_code=EXIT_SYSTEM_ERROR) from None

    success(f"Configuration valid ({len(spec.bindings)} binding(s))")
