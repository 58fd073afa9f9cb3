"""Binding request model for guestpin.

This module defines BindingRequest, the structured form of a single
"bind this guest crate under this name" invocation, together with the
enums for build profile and digest scheme.
"""

from __future__ import annotations

import keyword
import unicodedata
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Cross-compilation target searched when a request does not name one
DEFAULT_TARGET_TRIPLE = "riscv32im-risc0-zkvm-elf"

# Target triples are path segments under target/
TARGET_TRIPLE_PATTERN = r"^[A-Za-z0-9_][A-Za-z0-9_.-]*$"


class BuildProfile(str, Enum):
    """Cargo build profiles that produce a guest artifact.

    The value is the directory name under ``target/<triple>/``.
    """

    debug = "debug"
    release = "release"


class DigestScheme(str, Enum):
    """Digest functions available for deriving an image identifier.

    All schemes produce 256 bits, exposed as 8 unsigned 32-bit words.
    """

    sha256 = "sha256"
    blake2s = "blake2s"
    sha3_256 = "sha3_256"


def validate_binding_name(name: str) -> str:
    """Check that a binding name can be used as a generated module name.

    Args:
        name: Proposed binding name.

    Returns:
        The name, unchanged.

    Raises:
        ValueError: If the name is not a public, non-keyword Python identifier.
    """
    if not name.isidentifier():
        raise ValueError(f"Binding name '{name}' is not a valid identifier")
    # import statements NFKC-normalize names; the module file keeps the raw name
    if unicodedata.normalize("NFKC", name) != name:
        raise ValueError(f"Binding name '{name}' is not in NFKC normal form")
    if keyword.iskeyword(name):
        raise ValueError(f"Binding name '{name}' is a reserved keyword")
    if name.startswith("_"):
        raise ValueError(f"Binding name '{name}' must not start with an underscore")
    return name


class BindingRequest(BaseModel):
    """A request to bind one guest crate's artifact under a name.

    Attributes:
        binding_name: Name of the generated binding module. Must be a valid
            Python identifier, unique within the generated package.
        crate_reference: Path to the guest crate directory, absolute or
            relative to the invocation base directory.
        target_triple: Cross-compilation target whose output is searched.
        profile: Build profile whose output is searched.
        workspace_root: Optional workspace root holding ``target/``. Relative
            values are resolved against the base directory. When omitted,
            the parent of the base directory is used.

    Example:
        >>> request = BindingRequest(
        ...     binding_name="adder_guest",
        ...     crate_reference="../guest",
        ... )
        >>> request.profile
        <BuildProfile.release: 'release'>
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    binding_name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Name of the generated binding",
    )
    crate_reference: str = Field(
        ...,
        min_length=1,
        description="Path to the guest crate directory",
    )
    target_triple: str = Field(
        default=DEFAULT_TARGET_TRIPLE,
        pattern=TARGET_TRIPLE_PATTERN,
        description="Cross-compilation target triple",
    )
    profile: BuildProfile = Field(
        default=BuildProfile.release,
        description="Build profile (debug or release)",
    )
    workspace_root: str | None = Field(
        default=None,
        min_length=1,
        description="Workspace root containing target/",
    )

    @field_validator("binding_name")
    @classmethod
    def check_binding_name(cls, v: str) -> str:
        """Validate that binding_name is usable as a module name."""
        return validate_binding_name(v)
