"""Artifact locator for guestpin.

Resolves a guest crate reference into the canonical path of its
prebuilt artifact:

    <crate_reference>           -> canonical crate directory
    <crate_dir>/Cargo.toml      -> package.name
    <workspace_root>/target/<target_triple>/<profile>/<package.name>

Only the convention path is considered; no other locations are searched.
The artifact itself is not opened here. A missing artifact is reported
by the Binding Generator when it reads the file.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from guestpin_core.compiler.models import ResolvedArtifactPath
from guestpin_core.errors import ManifestInvalidError, NameMissingError, PathNotFoundError
from guestpin_core.schemas import DEFAULT_TARGET_TRIPLE, BindingRequest, BuildProfile

logger = logging.getLogger(__name__)

# Guest crate manifest file name
MANIFEST_FILE_NAME = "Cargo.toml"

# Build output directory under the workspace root
TARGET_DIR_NAME = "target"


def canonicalize_crate_dir(
    crate_reference: str | Path,
    base_dir: str | Path,
    *,
    binding_name: str | None = None,
) -> Path:
    """Resolve a crate reference to a canonical, existing directory.

    Args:
        crate_reference: Absolute path, or path relative to ``base_dir``.
        base_dir: Invocation base directory.
        binding_name: Binding name for error context.

    Returns:
        Canonical crate directory (symlinks and ``.``/``..`` resolved).

    Raises:
        PathNotFoundError: If the path does not exist or is not a directory.
    """
    reference = str(crate_reference)
    path = Path(crate_reference)
    if not path.is_absolute():
        path = Path(base_dir) / path

    try:
        crate_dir = path.resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise PathNotFoundError(
            reference,
            f"failed to canonicalize path {path}: {e}",
            binding_name=binding_name,
        ) from e

    if not crate_dir.is_dir():
        raise PathNotFoundError(
            reference,
            f"{crate_dir} is not a directory",
            binding_name=binding_name,
        )

    return crate_dir


def read_crate_name(
    crate_dir: Path,
    *,
    crate_reference: str | None = None,
    binding_name: str | None = None,
) -> str:
    """Read ``package.name`` from a crate's Cargo.toml.

    Args:
        crate_dir: Canonical crate directory.
        crate_reference: Original reference for error context.
        binding_name: Binding name for error context.

    Returns:
        The declared crate name.

    Raises:
        ManifestInvalidError: If the manifest is unreadable, unparsable,
            or declares a name that is not a plain string.
        NameMissingError: If ``package.name`` is absent or empty.
    """
    reference = crate_reference or str(crate_dir)
    manifest_path = crate_dir / MANIFEST_FILE_NAME

    try:
        with manifest_path.open("rb") as f:
            manifest: dict[str, Any] = tomllib.load(f)
    except OSError as e:
        raise ManifestInvalidError(
            reference,
            f"cannot read {manifest_path}: {e}",
            binding_name=binding_name,
        ) from e
    except tomllib.TOMLDecodeError as e:
        raise ManifestInvalidError(
            reference,
            f"cannot parse {manifest_path}: {e}",
            binding_name=binding_name,
        ) from e

    package = manifest.get("package")
    if package is None:
        raise NameMissingError(
            reference,
            manifest_path=str(manifest_path),
            binding_name=binding_name,
        )
    if not isinstance(package, dict):
        raise ManifestInvalidError(
            reference,
            f"'package' in {manifest_path} is not a table",
            binding_name=binding_name,
        )

    name = package.get("name")
    if name is None or name == "":
        raise NameMissingError(
            reference,
            manifest_path=str(manifest_path),
            binding_name=binding_name,
        )
    if not isinstance(name, str):
        raise ManifestInvalidError(
            reference,
            f"'package.name' in {manifest_path} is not a string",
            binding_name=binding_name,
        )
    # The name becomes a single path segment under target/
    if name in (".", "..") or "/" in name or "\\" in name:
        raise ManifestInvalidError(
            reference,
            f"'package.name' in {manifest_path} is not a valid crate name: {name!r}",
            binding_name=binding_name,
        )

    return name


def resolve_workspace_root(
    base_dir: str | Path,
    workspace_root: str | Path | None = None,
) -> Path:
    """Return the canonical workspace root.

    Args:
        base_dir: Invocation base directory.
        workspace_root: Explicit root, absolute or relative to ``base_dir``.
            When None, the parent of ``base_dir`` is used.

    Returns:
        Canonical workspace root. It is not required to exist.
    """
    base = Path(base_dir).resolve()
    if workspace_root is None:
        return base.parent

    root = Path(workspace_root)
    if not root.is_absolute():
        root = base / root
    return root.resolve()


def locate(
    crate_reference: str | Path,
    base_dir: str | Path,
    *,
    target_triple: str = DEFAULT_TARGET_TRIPLE,
    profile: BuildProfile | str = BuildProfile.release,
    workspace_root: str | Path | None = None,
    binding_name: str | None = None,
) -> ResolvedArtifactPath:
    """Locate the prebuilt artifact of a guest crate.

    Args:
        crate_reference: Path to the guest crate directory, absolute or
            relative to ``base_dir``.
        base_dir: Invocation base directory.
        target_triple: Cross-compilation target whose output is searched.
        profile: Build profile whose output is searched.
        workspace_root: Workspace root holding ``target/``. Defaults to the
            parent of ``base_dir``.
        binding_name: Binding name for error context.

    Returns:
        ResolvedArtifactPath with canonical crate directory and artifact path.

    Raises:
        PathNotFoundError: If the crate directory cannot be canonicalized.
        ManifestInvalidError: If Cargo.toml is unreadable or unparsable.
        NameMissingError: If Cargo.toml has no ``package.name``.

    Example:
        >>> resolved = locate("../guest", "/ws/host")
        >>> resolved.artifact_path
        PosixPath('/ws/target/riscv32im-risc0-zkvm-elf/release/adder')
    """
    profile = BuildProfile(profile)
    crate_dir = canonicalize_crate_dir(crate_reference, base_dir, binding_name=binding_name)
    crate_name = read_crate_name(
        crate_dir,
        crate_reference=str(crate_reference),
        binding_name=binding_name,
    )

    root = resolve_workspace_root(base_dir, workspace_root)
    artifact_path = (root / TARGET_DIR_NAME / target_triple / profile.value / crate_name).resolve()

    logger.debug(
        "Located artifact for crate %s at %s",
        crate_name,
        artifact_path,
    )

    return ResolvedArtifactPath(
        crate_dir=crate_dir,
        crate_name=crate_name,
        artifact_path=artifact_path,
    )


def locate_request(request: BindingRequest, base_dir: str | Path) -> ResolvedArtifactPath:
    """Locate the artifact for a BindingRequest.

    Args:
        request: Binding request.
        base_dir: Invocation base directory.

    Returns:
        ResolvedArtifactPath for the request's crate.
    """
    return locate(
        request.crate_reference,
        base_dir,
        target_triple=request.target_triple,
        profile=request.profile,
        workspace_root=request.workspace_root,
        binding_name=request.binding_name,
    )
