"""Python module emitter for guestpin bindings.

Turns GeneratedBindings into an importable package:

    <output_dir>/
        __init__.py          imports every binding module
        <binding_name>.py    ELF, ID, ID_HEX, CRATE_NAME, DIGEST constants

The payload is embedded by value as bytes literals, byte for byte, so
``digest(ELF) == ID`` holds for the imported module. Output carries no
timestamps or absolute paths: the same bindings always render to the
same source text.

Usage:
    from guestpin_core.compiler.emitter import write_bindings

    write_bindings(bindings, Path("host/generated/guests"))
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import structlog
from jinja2.sandbox import SandboxedEnvironment

from guestpin_core.compiler.models import GeneratedBinding

logger = structlog.get_logger(__name__)

# Package index module name
INDEX_FILE_NAME = "__init__.py"

# Payload bytes per line of the generated ELF literal
BYTES_PER_LINE = 32

BINDING_MODULE_TEMPLATE = '''\
"""Guest binding '{{ name }}'.

Generated by guestpin. Do not edit.
"""

from __future__ import annotations

from typing import Final

CRATE_NAME: Final = {{ crate_name | pyrepr }}
DIGEST: Final = {{ digest | pyrepr }}
ID: Final[tuple[int, ...]] = ({{ words | join(", ") }})
ID_HEX: Final = {{ id_hex | pyrepr }}
ELF: Final[bytes] = (
{% for chunk in elf_chunks %}
    {{ chunk }}
{% endfor %}
)
'''

PACKAGE_INDEX_TEMPLATE = '''\
"""Guest bindings generated by guestpin. Do not edit."""

from __future__ import annotations

{% for name in names %}
from . import {{ name }}
{% endfor %}

__all__ = [
{% for name in names %}
    {{ name | pyrepr }},
{% endfor %}
]
'''


def _create_environment() -> SandboxedEnvironment:
    env = SandboxedEnvironment(
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["pyrepr"] = repr
    return env


_env = _create_environment()


def _chunk_payload(elf: bytes) -> list[str]:
    return [repr(elf[i : i + BYTES_PER_LINE]) for i in range(0, len(elf), BYTES_PER_LINE)]


def render_binding_module(binding: GeneratedBinding) -> str:
    """Render the Python source of one binding module.

    Args:
        binding: Generated binding to embed.

    Returns:
        Module source text.
    """
    return _env.from_string(BINDING_MODULE_TEMPLATE).render(
        name=binding.name,
        crate_name=binding.crate_name,
        digest=binding.digest.value,
        words=[f"0x{word:08x}" for word in binding.image_id.words],
        id_hex=binding.image_id.hex(),
        elf_chunks=_chunk_payload(binding.elf),
    )


def render_package_index(bindings: Sequence[GeneratedBinding]) -> str:
    """Render the ``__init__.py`` that imports every binding module.

    Args:
        bindings: Bindings in declaration order.

    Returns:
        Module source text.
    """
    return _env.from_string(PACKAGE_INDEX_TEMPLATE).render(
        names=[binding.name for binding in bindings],
    )


def _write_if_changed(path: Path, content: str) -> bool:
    if path.exists() and path.read_text(encoding="utf-8") == content:
        return False
    path.write_text(content, encoding="utf-8")
    return True


def write_bindings(bindings: Sequence[GeneratedBinding], output_dir: Path | str) -> list[Path]:
    """Write binding modules and the package index.

    Files whose content is unchanged are left untouched so that build
    tools watching modification times do not rebuild needlessly.

    Args:
        bindings: Bindings to write, in declaration order.
        output_dir: Target package directory. Created if missing.

    Returns:
        Paths of all package files, index last.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    paths: list[Path] = []
    for binding in bindings:
        module_path = output_dir / f"{binding.name}.py"
        changed = _write_if_changed(module_path, render_binding_module(binding))
        logger.info(
            "binding_module_written" if changed else "binding_module_unchanged",
            binding=binding.name,
            path=str(module_path),
        )
        paths.append(module_path)

    index_path = output_dir / INDEX_FILE_NAME
    _write_if_changed(index_path, render_package_index(bindings))
    paths.append(index_path)

    return paths
