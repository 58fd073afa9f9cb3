"""Custom exception hierarchy for guestpin-core.

This module defines the exception classes used throughout guestpin:
- GuestpinError: Base exception for all guestpin errors
- ConfigurationError: Raised when a bindings file cannot be loaded
- BindingError: Base for failures of a single binding request
  - ResolutionError (PathNotFoundError, ManifestInvalidError, NameMissingError)
  - GenerationError (ArtifactUnreadableError, DigestFailureError)
- VerificationError: Raised when a generated module cannot be loaded

Every binding failure is terminal for the current build. Messages identify
the failing request (binding name and unresolved reference) and the
underlying cause. Technical details are logged internally via structlog.
"""

from __future__ import annotations

from typing import ClassVar

import structlog

logger = structlog.get_logger(__name__)


class GuestpinError(Exception):
    """Base exception for guestpin.

    Args:
        user_message: Message to display to the user.
        internal_details: Optional technical details. Logged, never displayed.

    Example:
        >>> raise GuestpinError(
        ...     "Bindings file invalid",
        ...     internal_details="bindings[0].name failed identifier check"
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize GuestpinError with user message and optional internal details.

        Args:
            user_message: Message to display to the user.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(user_message)
        self.user_message = user_message

        if internal_details:
            logger.error(
                "guestpin_error",
                error_type=self.__class__.__name__,
                user_message=user_message,
                internal_details=internal_details,
            )


class ConfigurationError(GuestpinError):
    """Raised when a bindings file cannot be parsed or validated.

    Attributes:
        file_path: Path to the bindings file (if known).
        field_path: Dot-separated path to the invalid field (e.g., "bindings.0.crate").

    Example:
        >>> raise ConfigurationError(
        ...     "Duplicate binding name 'adder'",
        ...     file_path="guestpin.yaml",
        ...     field_path="bindings",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        file_path: str | None = None,
        field_path: str | None = None,
        internal_details: str | None = None,
    ) -> None:
        """Initialize ConfigurationError with context.

        Args:
            user_message: Message to display to the user.
            file_path: Path to the bindings file (optional).
            field_path: Dot-separated path to the field (optional).
            internal_details: Technical details for internal logging only.
        """
        context_parts: list[str] = []
        if file_path:
            context_parts.append(f"in {file_path}")
        if field_path:
            context_parts.append(f"field '{field_path}'")

        if context_parts:
            full_message = f"{user_message} ({', '.join(context_parts)})"
        else:
            full_message = user_message

        super().__init__(full_message, internal_details=internal_details)

        self.file_path = file_path
        self.field_path = field_path


class BindingError(GuestpinError):
    """Base exception for a failed binding request.

    Subclasses set ``summary`` to a short description of the failure.
    The user message has the form::

        Binding 'adder_guest' (../guest): crate path not found: <cause>

    Attributes:
        crate_reference: The crate reference as written in the request.
        binding_name: Name of the binding being generated, if known.
        cause: Underlying cause (I/O error text, missing field name).
    """

    summary: ClassVar[str] = "binding failed"

    def __init__(
        self,
        crate_reference: str,
        cause: str,
        *,
        binding_name: str | None = None,
        internal_details: str | None = None,
    ) -> None:
        """Initialize BindingError with request context.

        Args:
            crate_reference: The unresolved crate reference.
            cause: Underlying cause of the failure.
            binding_name: Name of the binding, if known.
            internal_details: Technical details for internal logging only.
        """
        if binding_name:
            subject = f"Binding '{binding_name}' ({crate_reference})"
        else:
            subject = f"Crate reference '{crate_reference}'"

        super().__init__(
            f"{subject}: {self.summary}: {cause}",
            internal_details=internal_details,
        )

        self.crate_reference = crate_reference
        self.binding_name = binding_name
        self.cause = cause


class ResolutionError(BindingError):
    """Raised when the Artifact Locator cannot resolve a crate reference."""

    summary = "resolution failed"


class PathNotFoundError(ResolutionError):
    """Raised when a crate reference does not canonicalize to an existing directory."""

    summary = "crate path not found"


class ManifestInvalidError(ResolutionError):
    """Raised when the crate manifest is unreadable or cannot be parsed."""

    summary = "crate manifest invalid"


class NameMissingError(ResolutionError):
    """Raised when the crate manifest does not declare ``package.name``.

    Attributes:
        field_path: The manifest field that is missing.
    """

    summary = "crate name missing"

    def __init__(
        self,
        crate_reference: str,
        *,
        manifest_path: str,
        field_path: str = "package.name",
        binding_name: str | None = None,
    ) -> None:
        super().__init__(
            crate_reference,
            f"field '{field_path}' not found in {manifest_path}",
            binding_name=binding_name,
        )
        self.field_path = field_path


class GenerationError(BindingError):
    """Raised when the Binding Generator cannot produce a binding."""

    summary = "generation failed"


class ArtifactUnreadableError(GenerationError):
    """Raised when the located artifact is missing or cannot be read.

    This includes the race where the artifact is deleted or replaced
    between location and read.
    """

    summary = "artifact unreadable"


class DigestFailureError(GenerationError):
    """Raised when the image identifier cannot be derived from the artifact bytes."""

    summary = "digest failed"


class VerificationError(GuestpinError):
    """Raised when a generated binding module cannot be loaded for verification."""

    pass
