"""guestpin-core: Guest artifact location, identification and binding generation.

This package provides:
- BindingRequest / BindingsSpec: Pydantic schemas for binding requests and guestpin.yaml
- locate: Resolve a guest crate reference to its prebuilt artifact
- generate: Read an artifact and derive its ImageId
- write_bindings: Emit importable constants modules (ELF, ID)
- BindingCompiler: Run the whole pipeline from guestpin.yaml
"""

from __future__ import annotations

__version__ = "0.1.0"

# Compiler pipeline and models
from guestpin_core.compiler import (
    BindingCompiler,
    GeneratedBinding,
    ImageId,
    ResolvedArtifactPath,
    compute_image_id,
    generate,
    locate,
    locate_request,
    verify_module,
    verify_package,
    write_bindings,
)

# Error types
from guestpin_core.errors import (
    ArtifactUnreadableError,
    BindingError,
    ConfigurationError,
    DigestFailureError,
    GenerationError,
    GuestpinError,
    ManifestInvalidError,
    NameMissingError,
    PathNotFoundError,
    ResolutionError,
    VerificationError,
)

# Schema models
from guestpin_core.schemas import (
    BindingEntry,
    BindingRequest,
    BindingsSpec,
    BuildProfile,
    DigestScheme,
)

__all__ = [
    "__version__",
    # Compiler
    "BindingCompiler",
    "locate",
    "locate_request",
    "generate",
    "compute_image_id",
    "write_bindings",
    "verify_module",
    "verify_package",
    "ImageId",
    "ResolvedArtifactPath",
    "GeneratedBinding",
    # Errors
    "GuestpinError",
    "ConfigurationError",
    "BindingError",
    "ResolutionError",
    "PathNotFoundError",
    "ManifestInvalidError",
    "NameMissingError",
    "GenerationError",
    "ArtifactUnreadableError",
    "DigestFailureError",
    "VerificationError",
    # Schema models
    "BindingsSpec",
    "BindingEntry",
    "BindingRequest",
    "BuildProfile",
    "DigestScheme",
]
