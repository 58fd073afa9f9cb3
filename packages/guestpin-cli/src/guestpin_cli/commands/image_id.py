"""guestpin image-id command - Print the image ID of a file."""

from __future__ import annotations

from pathlib import Path

import click

from guestpin_cli.errors import CLIError, handle_permission_error
from guestpin_cli.output import info, print_json


@click.command("image-id")
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "-d",
    "--digest",
    "digest",
    type=click.Choice(["sha256", "blake2s", "sha3_256"]),
    default="sha256",
    help="Digest scheme [default: sha256]",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Output as JSON",
)
def image_id(file_path: str, digest: str, as_json: bool) -> None:
    """Print the image ID of a guest artifact.

    Examples:

        guestpin image-id target/riscv32im-risc0-zkvm-elf/release/adder

        guestpin image-id adder.elf --digest blake2s --json
    """
    from guestpin_core.compiler import DigestError, compute_image_id

    try:
        data = Path(file_path).read_bytes()
    except PermissionError:
        handle_permission_error(file_path, "read")

    try:
        result = compute_image_id(data, digest)
    except DigestError as e:
        raise CLIError(f"Cannot derive image ID for {file_path}: {e}") from None

    if as_json:
        print_json(
            {
                "file": file_path,
                "digest": digest,
                "words": list(result.words),
                "hex": result.hex(),
            }
        )
        return

    info(f"words: [{', '.join(f'0x{w:08x}' for w in result.words)}]")
    info(f"hex:   {result.hex()}")
