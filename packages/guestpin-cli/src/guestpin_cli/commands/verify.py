"""guestpin verify command - Check generated modules against their IDs."""

from __future__ import annotations

import click

from guestpin_cli.errors import CLIError
from guestpin_cli.output import error, success


@click.command()
@click.argument(
    "output_path",
    type=click.Path(exists=True, file_okay=False),
    default="./guests",
)
def verify(output_path: str) -> None:
    """Verify a generated binding package.

    Re-derives each module's image ID from its embedded ELF and
    compares it with the module's ID constant.

    Examples:

        guestpin verify

        guestpin verify host/src/host/guests
    """
    from guestpin_core import VerificationError
    from guestpin_core.compiler import verify_package

    try:
        results = verify_package(output_path)
    except VerificationError as e:
        raise CLIError(str(e)) from None

    failures = [r for r in results if not r.passed]
    for result in results:
        if result.passed:
            success(f"{result.name}: {result.expected}")
        else:
            error(f"{result.name}: {result.message}")

    if failures:
        raise SystemExit(1)
