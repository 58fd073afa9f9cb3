"""Binding generator for guestpin.

Reads a located guest artifact and derives its image identifier:

    ResolvedArtifactPath -> bytes (one held file handle) -> digest -> GeneratedBinding

The artifact can change between location and read, because the guest is
built by an external step. Immediately before reading, the generator checks
that the path still canonicalizes to the located path. It then reads through
one file handle and hashes exactly the bytes it read, so the payload and
identifier always describe the same content.

No caching: every call re-reads the artifact and re-derives the identifier.
"""

from __future__ import annotations

import os
import stat
from pathlib import Path

import structlog

from guestpin_core.compiler.digest import DigestError, compute_image_id
from guestpin_core.compiler.models import GeneratedBinding, ResolvedArtifactPath
from guestpin_core.errors import ArtifactUnreadableError, DigestFailureError
from guestpin_core.schemas import BindingRequest, DigestScheme

logger = structlog.get_logger(__name__)


def read_artifact(
    request: BindingRequest,
    resolved: ResolvedArtifactPath,
) -> bytes:
    """Read the full content of a located artifact.

    Args:
        request: Binding request, for error context.
        resolved: Locator output.

    Returns:
        The artifact bytes.

    Raises:
        ArtifactUnreadableError: If the artifact is missing, no longer at its
            canonical location, not a regular file, or cannot be read.
    """
    path = resolved.artifact_path

    def unreadable(cause: str) -> ArtifactUnreadableError:
        return ArtifactUnreadableError(
            request.crate_reference,
            cause,
            binding_name=request.binding_name,
        )

    current = Path(os.path.realpath(path))
    if current != path:
        raise unreadable(f"{path} now resolves to {current}")

    try:
        # Opening a FIFO must not wait for a writer
        fd = os.open(path, os.O_RDONLY | getattr(os, "O_NONBLOCK", 0))
        try:
            if not stat.S_ISREG(os.fstat(fd).st_mode):
                raise unreadable(f"{path} is not a regular file")
            os.set_blocking(fd, True)
            with os.fdopen(fd, "rb", closefd=False) as f:
                return f.read()
        finally:
            os.close(fd)
    except OSError as e:
        raise unreadable(f"failed to read {path}: {e}") from e


def generate(
    request: BindingRequest,
    resolved: ResolvedArtifactPath,
    *,
    digest: DigestScheme | str = DigestScheme.sha256,
) -> GeneratedBinding:
    """Generate a binding from a located artifact.

    Args:
        request: Binding request supplying the binding name.
        resolved: Locator output for the request.
        digest: Digest scheme used to derive the image identifier.

    Returns:
        GeneratedBinding whose ``image_id`` is the digest of its ``elf``.

    Raises:
        ArtifactUnreadableError: If the artifact cannot be read.
        DigestFailureError: If the identifier cannot be derived.

    Example:
        >>> resolved = locate_request(request, base_dir)
        >>> binding = generate(request, resolved)
        >>> binding.image_id == compute_image_id(binding.elf)
        True
    """
    log = logger.bind(binding=request.binding_name, crate=resolved.crate_name)

    elf = read_artifact(request, resolved)

    try:
        image_id = compute_image_id(elf, digest)
    except DigestError as e:
        raise DigestFailureError(
            request.crate_reference,
            f"{resolved.artifact_path}: {e}",
            binding_name=request.binding_name,
        ) from e

    log.info(
        "binding_generated",
        size=len(elf),
        digest=DigestScheme(digest).value,
        image_id=image_id.hex(),
    )

    return GeneratedBinding(
        name=request.binding_name,
        crate_name=resolved.crate_name,
        digest=DigestScheme(digest),
        elf=elf,
        image_id=image_id,
    )
