"""Compiler models for guestpin.

This module defines the values passed between the Artifact Locator,
the Binding Generator and the Module Emitter:
- ImageId: 8 x 32-bit content identifier of an artifact
- ResolvedArtifactPath: Locator output
- GeneratedBinding: Generator output, consumed by the emitter
"""

from __future__ import annotations

import struct
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from guestpin_core.schemas import DigestScheme, validate_binding_name

# Number of 32-bit words in an image identifier
IMAGE_ID_WORDS = 8

# Size of an image identifier in bytes
IMAGE_ID_SIZE = IMAGE_ID_WORDS * 4

_WORDS_FORMAT = f"<{IMAGE_ID_WORDS}I"

Word = Annotated[int, Field(ge=0, le=0xFFFFFFFF)]


class ImageId(BaseModel):
    """Deterministic content identifier of a guest artifact.

    Stored as 8 unsigned 32-bit words. The byte form packs the words
    little-endian, so ``ImageId.from_bytes(raw).to_bytes() == raw``.

    Attributes:
        words: The 8 identifier words.

    Example:
        >>> image_id = ImageId.from_bytes(bytes(32))
        >>> image_id.words
        (0, 0, 0, 0, 0, 0, 0, 0)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    words: tuple[Word, ...] = Field(
        ...,
        min_length=IMAGE_ID_WORDS,
        max_length=IMAGE_ID_WORDS,
        description="Identifier as 8 unsigned 32-bit words",
    )

    @classmethod
    def from_bytes(cls, raw: bytes) -> ImageId:
        """Build an ImageId from its 32-byte little-endian form.

        Raises:
            ValueError: If ``raw`` is not exactly 32 bytes.
        """
        if len(raw) != IMAGE_ID_SIZE:
            raise ValueError(f"Image id must be {IMAGE_ID_SIZE} bytes, got {len(raw)}")
        return cls(words=struct.unpack(_WORDS_FORMAT, raw))

    @classmethod
    def from_hex(cls, value: str) -> ImageId:
        """Build an ImageId from its hex form (see ``hex()``)."""
        return cls.from_bytes(bytes.fromhex(value))

    def to_bytes(self) -> bytes:
        """Return the 32-byte little-endian form."""
        return struct.pack(_WORDS_FORMAT, *self.words)

    def hex(self) -> str:
        """Return the byte form as lowercase hex."""
        return self.to_bytes().hex()

    def __str__(self) -> str:
        return self.hex()


class ResolvedArtifactPath(BaseModel):
    """Canonical location of one guest artifact.

    Produced by the Artifact Locator and consumed once by the Binding
    Generator. Two references to the same crate resolve to equal instances.

    Attributes:
        crate_dir: Canonical guest crate directory.
        crate_name: ``package.name`` read from the crate manifest.
        artifact_path: Canonical path of the expected artifact file.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    crate_dir: Path = Field(..., description="Canonical guest crate directory")
    crate_name: str = Field(..., min_length=1, description="Crate name from manifest")
    artifact_path: Path = Field(..., description="Canonical artifact path")

    @field_validator("crate_dir", "artifact_path")
    @classmethod
    def check_absolute(cls, v: Path) -> Path:
        """Require absolute paths."""
        if not v.is_absolute():
            raise ValueError(f"Path must be absolute: {v}")
        return v


class GeneratedBinding(BaseModel):
    """A guest artifact's payload and identifier, ready to be emitted.

    The payload is kept verbatim. Construction fails unless
    ``image_id == digest(elf)`` under the named digest scheme.

    Attributes:
        name: Binding name (generated module name).
        crate_name: Guest crate name the artifact was built from.
        digest: Digest scheme that produced ``image_id``.
        elf: Raw artifact bytes.
        image_id: Identifier derived from ``elf``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1, description="Binding name")
    crate_name: str = Field(..., min_length=1, description="Guest crate name")
    digest: DigestScheme = Field(..., description="Digest scheme")
    elf: bytes = Field(..., min_length=1, repr=False, description="Raw artifact bytes")
    image_id: ImageId = Field(..., description="Identifier derived from elf")

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        """Validate the binding name as a module name."""
        return validate_binding_name(v)

    @model_validator(mode="after")
    def check_image_id(self) -> GeneratedBinding:
        """Enforce that image_id matches the payload."""
        from guestpin_core.compiler.digest import compute_image_id

        if compute_image_id(self.elf, self.digest) != self.image_id:
            raise ValueError("image_id does not match digest of elf")
        return self
