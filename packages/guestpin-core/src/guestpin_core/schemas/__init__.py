"""Schema definitions for guestpin.

Root Models:
- BindingsSpec: Root schema for guestpin.yaml
- BindingEntry: One declared binding

Request Models:
- BindingRequest: Structured request for a single binding
- BuildProfile: Build profile enum (debug, release)
- DigestScheme: Digest scheme enum
"""

from __future__ import annotations

from guestpin_core.schemas.binding_request import (
    DEFAULT_TARGET_TRIPLE,
    BindingRequest,
    BuildProfile,
    DigestScheme,
    validate_binding_name,
)
from guestpin_core.schemas.bindings_spec import (
    BINDINGS_FILE_NAME,
    BindingEntry,
    BindingsSpec,
)

__all__ = [
    "BindingsSpec",
    "BindingEntry",
    "BindingRequest",
    "BuildProfile",
    "DigestScheme",
    "DEFAULT_TARGET_TRIPLE",
    "BINDINGS_FILE_NAME",
    "validate_binding_name",
]
