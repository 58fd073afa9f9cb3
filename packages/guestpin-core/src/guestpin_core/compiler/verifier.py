"""Round-trip verification of generated binding modules.

Loads a generated module from its file and re-derives the image id from
the embedded payload. A binding passes when ``digest(ELF) == ID`` under
the module's own ``DIGEST`` scheme.
"""

from __future__ import annotations

import ast
import importlib.util
from pathlib import Path
from types import ModuleType

from pydantic import BaseModel, ConfigDict, Field

from guestpin_core.compiler.digest import DigestError, compute_image_id
from guestpin_core.compiler.emitter import INDEX_FILE_NAME
from guestpin_core.compiler.models import ImageId
from guestpin_core.errors import VerificationError


class VerificationResult(BaseModel):
    """Outcome of verifying one binding module.

    Attributes:
        name: Binding (module) name.
        path: Module file path.
        expected: ID constant declared by the module.
        actual: Image id re-derived from the module's ELF payload.
        passed: Whether expected and actual match.
        message: Human-readable summary.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., description="Binding name")
    path: str = Field(..., description="Module file path")
    expected: ImageId | None = Field(default=None, description="Declared ID")
    actual: ImageId | None = Field(default=None, description="Re-derived ID")
    passed: bool = Field(..., description="Whether the round-trip holds")
    message: str = Field(..., description="Summary")


def load_binding_module(path: Path | str) -> ModuleType:
    """Execute a generated binding module from its file path.

    Raises:
        VerificationError: If the file is missing or fails to execute.
    """
    path = Path(path)
    if not path.is_file():
        raise VerificationError(f"Binding module not found: {path}")

    spec = importlib.util.spec_from_file_location(f"_guestpin_verify_{path.stem}", path)
    if spec is None or spec.loader is None:
        raise VerificationError(f"Cannot load binding module: {path}")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise VerificationError(
            f"Binding module failed to load: {path}",
            internal_details=f"{type(e).__name__}: {e}",
        ) from e
    return module


def verify_module(path: Path | str) -> VerificationResult:
    """Verify that a binding module's ID matches its ELF payload.

    Args:
        path: Path to a generated ``<binding_name>.py`` file.

    Returns:
        VerificationResult for the module.

    Raises:
        VerificationError: If the module cannot be loaded.
    """
    path = Path(path)
    module = load_binding_module(path)
    name = path.stem

    def failed(message: str, expected: ImageId | None = None) -> VerificationResult:
        return VerificationResult(
            name=name,
            path=str(path),
            expected=expected,
            passed=False,
            message=message,
        )

    elf = getattr(module, "ELF", None)
    words = getattr(module, "ID", None)
    scheme = getattr(module, "DIGEST", None)
    if not isinstance(elf, bytes) or words is None or scheme is None:
        return failed("module does not define ELF, ID and DIGEST")

    try:
        expected = ImageId(words=tuple(words))
    except (TypeError, ValueError) as e:
        return failed(f"ID is not a valid image id: {e}")

    try:
        actual = compute_image_id(elf, scheme)
    except DigestError as e:
        return failed(str(e), expected)

    passed = actual == expected
    return VerificationResult(
        name=name,
        path=str(path),
        expected=expected,
        actual=actual,
        passed=passed,
        message="ok" if passed else f"ID {expected.hex()} != digest(ELF) {actual.hex()}",
    )


def read_package_index(output_dir: Path | str) -> list[str]:
    """Return the binding names exported by a generated package.

    Reads ``__all__`` from the package index without importing it.

    Raises:
        VerificationError: If the index is missing, does not parse, or has no
            literal ``__all__``.
    """
    index_path = Path(output_dir) / INDEX_FILE_NAME
    if not index_path.is_file():
        raise VerificationError(f"Binding package index not found: {index_path}")

    try:
        tree = ast.parse(index_path.read_text(encoding="utf-8"), filename=str(index_path))
        for node in tree.body:
            if isinstance(node, ast.Assign) and any(
                isinstance(target, ast.Name) and target.id == "__all__" for target in node.targets
            ):
                return [str(name) for name in ast.literal_eval(node.value)]
    except (SyntaxError, ValueError, TypeError) as e:
        raise VerificationError(
            f"Binding package index is not valid: {index_path}",
            internal_details=f"{type(e).__name__}: {e}",
        ) from e

    raise VerificationError(f"No __all__ in binding package index: {index_path}")


def verify_package(output_dir: Path | str) -> list[VerificationResult]:
    """Verify every binding module exported by a generated package.

    Args:
        output_dir: Generated package directory.

    Returns:
        One VerificationResult per exported binding, in index order.
    """
    output_dir = Path(output_dir)
    return [verify_module(output_dir / f"{name}.py") for name in read_package_index(output_dir)]
