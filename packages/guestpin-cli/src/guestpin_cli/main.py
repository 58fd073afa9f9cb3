"""CLI entry point for guestpin.

Defines the main CLI group. Subcommands are loaded lazily so that
'guestpin --help' does not import the compiler stack.
"""

from __future__ import annotations

import importlib
from typing import Any

import click
import rich_click as rclick

from guestpin_cli import __version__
from guestpin_cli.output import set_no_color

# Configure rich-click for better help formatting
rclick.rich_click.TEXT_MARKUP = "markdown"
rclick.rich_click.SHOW_ARGUMENTS = True
rclick.rich_click.GROUP_ARGUMENTS_OPTIONS = True


class LazyGroup(rclick.RichGroup):
    """Click group that loads commands lazily.

    Commands are only imported when actually invoked, not at import time.

    Attributes:
        lazy_subcommands: Mapping of command names to module paths.
    """

    def __init__(
        self,
        *args: Any,
        lazy_subcommands: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize LazyGroup.

        Args:
            *args: Positional arguments for parent class.
            lazy_subcommands: Mapping of command name to module path.
                Format: {"generate": "guestpin_cli.commands.generate.generate"}
            **kwargs: Keyword arguments for parent class.
        """
        super().__init__(*args, **kwargs)
        self.lazy_subcommands: dict[str, str] = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        """Return sorted names of directly registered and lazy commands."""
        commands = set(super().list_commands(ctx))
        commands.update(self.lazy_subcommands.keys())
        return sorted(commands)

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Get a command by name, loading lazily if needed.

        Args:
            ctx: Click context.
            cmd_name: Name of the command to get.

        Returns:
            Click Command instance, or None if not found.
        """
        cmd = super().get_command(ctx, cmd_name)  # type: ignore[arg-type]
        if cmd is not None:
            return cmd

        if cmd_name not in self.lazy_subcommands:
            return None

        module_path = self.lazy_subcommands[cmd_name]
        module_name, attr_name = module_path.rsplit(".", 1)
        mod = importlib.import_module(module_name)
        return getattr(mod, attr_name)  # type: ignore[no-any-return]


LAZY_COMMANDS = {
    "generate": "guestpin_cli.commands.generate.generate",
    "locate": "guestpin_cli.commands.locate.locate_cmd",
    "image-id": "guestpin_cli.commands.image_id.image_id",
    "verify": "guestpin_cli.commands.verify.verify",
    "validate": "guestpin_cli.commands.validate.validate",
}


@click.command(cls=LazyGroup, lazy_subcommands=LAZY_COMMANDS)
@click.version_option(version=__version__, prog_name="guestpin")
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output.",
    is_eager=True,
    expose_value=False,
    callback=lambda ctx, param, value: set_no_color(value) if value else None,
)
def cli() -> None:
    """guestpin - Pin guest binaries into host programs.

    Locates prebuilt guest artifacts, derives their image IDs and
    generates importable constants modules.

    **Getting Started:**

    - `guestpin validate` - Validate guestpin.yaml
    - `guestpin generate` - Generate binding modules
    - `guestpin verify` - Check generated modules against their IDs
    - `guestpin locate` - Show where a guest artifact is expected
    - `guestpin image-id` - Print the image ID of a file
    """
    pass


if __name__ == "__main__":
    cli()
