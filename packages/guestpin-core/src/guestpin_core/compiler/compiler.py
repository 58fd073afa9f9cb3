"""BindingCompiler for guestpin.

This module implements the BindingCompiler, which turns guestpin.yaml into
generated binding modules:

    guestpin.yaml -> BindingsSpec -> [BindingRequest]
                  -> locate -> generate -> [GeneratedBinding]
                  -> write_bindings -> <output_dir>/*.py

Compilation is all-or-nothing. Every request is located and generated
before anything is written, and the first failure aborts the run.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path

import structlog
import yaml
from pydantic import ValidationError

from guestpin_core.compiler.emitter import write_bindings
from guestpin_core.compiler.generator import generate
from guestpin_core.compiler.locator import locate_request
from guestpin_core.compiler.models import GeneratedBinding
from guestpin_core.errors import ConfigurationError
from guestpin_core.schemas import BindingRequest, BindingsSpec, DigestScheme

logger = structlog.get_logger(__name__)

# Environment variable overriding the invocation base directory
BASE_DIR_ENV_VAR = "GUESTPIN_BASE_DIR"


def load_bindings_spec(spec_path: Path | str) -> BindingsSpec:
    """Load guestpin.yaml, mapping parse failures to ConfigurationError.

    Args:
        spec_path: Path to guestpin.yaml.

    Returns:
        Validated BindingsSpec.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigurationError: If YAML or schema validation fails.
    """
    spec_path = Path(spec_path)
    try:
        return BindingsSpec.from_yaml(spec_path)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            "Invalid YAML",
            file_path=str(spec_path),
            internal_details=str(e),
        ) from e
    except ValidationError as e:
        first = e.errors()[0]
        field_path = ".".join(str(x) for x in first["loc"]) or None
        raise ConfigurationError(
            f"Invalid bindings file: {first['msg']}",
            file_path=str(spec_path),
            field_path=field_path,
            internal_details=str(e),
        ) from e


class BindingCompiler:
    """Compile guestpin.yaml into generated binding modules.

    Example:
        >>> compiler = BindingCompiler()
        >>> bindings = compiler.compile(Path("host/guestpin.yaml"))
        >>> compiler.build(Path("host/guestpin.yaml"), Path("host/guests"))
    """

    def __init__(self, base_dir: Path | str | None = None) -> None:
        """Initialize the BindingCompiler.

        Args:
            base_dir: Base directory for relative crate references. If not
                specified, uses GUESTPIN_BASE_DIR, then the bindings file's
                ``base_dir``, then the directory holding guestpin.yaml.
        """
        self.base_dir = Path(base_dir) if base_dir is not None else None

    def resolve_base_dir(self, spec: BindingsSpec, spec_path: Path) -> Path:
        """Determine the base directory for a spec.

        Args:
            spec: Loaded BindingsSpec.
            spec_path: Path of the file the spec was loaded from.

        Returns:
            Absolute base directory.
        """
        if self.base_dir is not None:
            return self.base_dir.resolve()

        env_dir = os.environ.get(BASE_DIR_ENV_VAR)
        if env_dir:
            return Path(env_dir).resolve()

        spec_dir = spec_path.resolve().parent
        if spec.base_dir:
            return (spec_dir / spec.base_dir).resolve()
        return spec_dir

    def compile(self, spec_path: Path | str) -> list[GeneratedBinding]:
        """Compile every binding declared in guestpin.yaml.

        Args:
            spec_path: Path to guestpin.yaml.

        Returns:
            Generated bindings in declaration order.

        Raises:
            FileNotFoundError: If guestpin.yaml not found.
            ConfigurationError: If guestpin.yaml is invalid.
            ResolutionError: If a crate reference cannot be resolved.
            GenerationError: If an artifact cannot be read or digested.
        """
        spec_path = Path(spec_path)
        spec = load_bindings_spec(spec_path)
        base_dir = self.resolve_base_dir(spec, spec_path)

        # Relative workspace roots in the file are relative to the file
        requests = [
            self._anchor_workspace_root(request, spec_path)
            for request in spec.to_requests()
        ]

        return self.compile_requests(requests, base_dir, digest=spec.digest)

    def compile_requests(
        self,
        requests: Sequence[BindingRequest],
        base_dir: Path | str,
        *,
        digest: DigestScheme | str = DigestScheme.sha256,
    ) -> list[GeneratedBinding]:
        """Locate and generate a sequence of binding requests.

        Args:
            requests: Requests in generation order.
            base_dir: Base directory for relative crate references.
            digest: Digest scheme for image identifiers.

        Returns:
            Generated bindings in request order.

        Raises:
            ConfigurationError: If two requests share a binding name.
            ResolutionError: If a crate reference cannot be resolved.
            GenerationError: If an artifact cannot be read or digested.
        """
        names = [request.binding_name for request in requests]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ConfigurationError(f"Duplicate binding names: {', '.join(duplicates)}")

        bindings: list[GeneratedBinding] = []
        for request in requests:
            resolved = locate_request(request, base_dir)
            logger.info(
                "binding_located",
                binding=request.binding_name,
                crate=resolved.crate_name,
                artifact=str(resolved.artifact_path),
            )
            bindings.append(generate(request, resolved, digest=digest))

        return bindings

    def build(self, spec_path: Path | str, output_dir: Path | str) -> list[Path]:
        """Compile guestpin.yaml and write the binding package.

        Args:
            spec_path: Path to guestpin.yaml.
            output_dir: Package directory for generated modules.

        Returns:
            Paths of the package files.
        """
        bindings = self.compile(spec_path)
        return write_bindings(bindings, output_dir)

    def _anchor_workspace_root(self, request: BindingRequest, spec_path: Path) -> BindingRequest:
        if request.workspace_root is None or Path(request.workspace_root).is_absolute():
            return request
        anchored = spec_path.resolve().parent / request.workspace_root
        return request.model_copy(update={"workspace_root": str(anchored)})
