"""Image identifier derivation for guestpin.

The digest is a black box: a deterministic function from a non-empty
byte payload to an ImageId. Each scheme maps onto a 256-bit ``hashlib``
constructor whose output is split into 8 little-endian 32-bit words.

Usage:
    from guestpin_core.compiler.digest import compute_image_id

    image_id = compute_image_id(elf_bytes)            # sha256
    image_id = compute_image_id(elf_bytes, "blake2s")
"""

from __future__ import annotations

import hashlib
from collections.abc import Callable
from typing import Any

from guestpin_core.compiler.models import IMAGE_ID_SIZE, ImageId
from guestpin_core.schemas import DigestScheme

DIGEST_FUNCTIONS: dict[DigestScheme, Callable[[bytes], Any]] = {
    DigestScheme.sha256: hashlib.sha256,
    DigestScheme.blake2s: hashlib.blake2s,
    DigestScheme.sha3_256: hashlib.sha3_256,
}


class DigestError(ValueError):
    """Raised when an image identifier cannot be derived."""

    pass


def compute_image_id(
    data: bytes,
    scheme: DigestScheme | str = DigestScheme.sha256,
) -> ImageId:
    """Derive the ImageId of a byte payload.

    Args:
        data: Artifact bytes. Must be non-empty.
        scheme: Digest scheme name or enum member.

    Returns:
        ImageId of ``data``.

    Raises:
        DigestError: If ``data`` is empty, the scheme is unknown, or the
            digest width is not 256 bits.

    Example:
        >>> compute_image_id(b"guest") == compute_image_id(b"guest")
        True
    """
    if not data:
        raise DigestError("cannot derive an image id from an empty payload")

    try:
        scheme = DigestScheme(scheme)
    except ValueError:
        available = ", ".join(s.value for s in DigestScheme)
        raise DigestError(f"unknown digest scheme '{scheme}'. Available: {available}") from None

    raw = DIGEST_FUNCTIONS[scheme](data).digest()
    if len(raw) != IMAGE_ID_SIZE:
        raise DigestError(f"{scheme.value} produced {len(raw)} bytes, expected {IMAGE_ID_SIZE}")

    return ImageId.from_bytes(raw)
