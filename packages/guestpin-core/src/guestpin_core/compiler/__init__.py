"""Compiler module for guestpin.

This module exports the binding pipeline and its models:
- locate / locate_request: Artifact Locator
- generate: Binding Generator
- compute_image_id: Digest function
- write_bindings / render_binding_module: Module Emitter
- verify_module / verify_package: Round-trip verification
- BindingCompiler: guestpin.yaml -> generated package
- ImageId, ResolvedArtifactPath, GeneratedBinding: Pipeline models
"""

from __future__ import annotations

from guestpin_core.compiler.compiler import (
    BASE_DIR_ENV_VAR,
    BindingCompiler,
    load_bindings_spec,
)
from guestpin_core.compiler.digest import DIGEST_FUNCTIONS, DigestError, compute_image_id
from guestpin_core.compiler.emitter import (
    render_binding_module,
    render_package_index,
    write_bindings,
)
from guestpin_core.compiler.generator import generate, read_artifact
from guestpin_core.compiler.locator import (
    MANIFEST_FILE_NAME,
    locate,
    locate_request,
    read_crate_name,
)
from guestpin_core.compiler.models import (
    IMAGE_ID_WORDS,
    GeneratedBinding,
    ImageId,
    ResolvedArtifactPath,
)
from guestpin_core.compiler.verifier import (
    VerificationResult,
    verify_module,
    verify_package,
)

__all__: list[str] = [
    # Compiler class
    "BindingCompiler",
    "load_bindings_spec",
    "BASE_DIR_ENV_VAR",
    # Locator
    "locate",
    "locate_request",
    "read_crate_name",
    "MANIFEST_FILE_NAME",
    # Generator
    "generate",
    "read_artifact",
    # Digest
    "compute_image_id",
    "DigestError",
    "DIGEST_FUNCTIONS",
    # Emitter
    "render_binding_module",
    "render_package_index",
    "write_bindings",
    # Verifier
    "verify_module",
    "verify_package",
    "VerificationResult",
    # Models
    "ImageId",
    "ResolvedArtifactPath",
    "GeneratedBinding",
    "IMAGE_ID_WORDS",
]
