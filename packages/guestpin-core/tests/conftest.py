"""Shared pytest fixtures for guestpin-core tests.

Provides a temporary Cargo-style workspace:

    workspace/
        host/                                        base directory
        guest/Cargo.toml                             package.name = "adder"
        target/riscv32im-risc0-zkvm-elf/release/adder
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path

import pytest
import structlog

GUEST_CRATE_NAME = "adder"
TARGET_TRIPLE = "riscv32im-risc0-zkvm-elf"

# A small stand-in for a guest ELF: header magic plus every byte value
SAMPLE_ELF = b"\x7fELF\x01\x01\x01\x00" + bytes(range(256))


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to output to stdout for test capture."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,  # Important for test isolation
    )


@pytest.fixture(autouse=True)
def clear_base_dir_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep GUESTPIN_BASE_DIR from the outer environment out of tests."""
    monkeypatch.delenv("GUESTPIN_BASE_DIR", raising=False)


@pytest.fixture
def sample_elf() -> bytes:
    """Return sample guest artifact bytes."""
    return SAMPLE_ELF


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Return an empty workspace directory with a host crate directory."""
    root = tmp_path / "workspace"
    (root / "host").mkdir(parents=True)
    return root


@pytest.fixture
def host_dir(workspace: Path) -> Path:
    """Return the host crate directory (the invocation base directory)."""
    return workspace / "host"


@pytest.fixture
def make_guest_crate(workspace: Path) -> Callable[..., Path]:
    """Return a factory creating guest crates inside the workspace.

    The factory signature is::

        make_guest_crate(dir_name, crate_name=None, manifest=None) -> Path

    ``manifest`` replaces the generated Cargo.toml text when given.
    """

    def _make(
        dir_name: str = "guest",
        crate_name: str | None = GUEST_CRATE_NAME,
        manifest: str | None = None,
    ) -> Path:
        crate_dir = workspace / dir_name
        crate_dir.mkdir(parents=True, exist_ok=True)
        if manifest is None:
            manifest = '[package]\nversion = "0.1.0"\nedition = "2021"\n'
            if crate_name is not None:
                manifest = f'[package]\nname = "{crate_name}"\nversion = "0.1.0"\nedition = "2021"\n'
        (crate_dir / "Cargo.toml").write_text(manifest)
        return crate_dir

    return _make


@pytest.fixture
def make_artifact(workspace: Path) -> Callable[..., Path]:
    """Return a factory writing prebuilt artifacts under workspace/target.

    The factory signature is::

        make_artifact(crate_name, payload, target_triple=..., profile="release") -> Path
    """

    def _make(
        crate_name: str = GUEST_CRATE_NAME,
        payload: bytes = SAMPLE_ELF,
        target_triple: str = TARGET_TRIPLE,
        profile: str = "release",
    ) -> Path:
        artifact = workspace / "target" / target_triple / profile / crate_name
        artifact.parent.mkdir(parents=True, exist_ok=True)
        artifact.write_bytes(payload)
        return artifact

    return _make


@pytest.fixture
def guest_crate(make_guest_crate: Callable[..., Path]) -> Path:
    """Return the default guest crate directory (crate name "adder")."""
    return make_guest_crate()


@pytest.fixture
def guest_artifact(make_artifact: Callable[..., Path]) -> Path:
    """Return the default prebuilt guest artifact path."""
    return make_artifact()


@pytest.fixture
def guestpin_yaml(host_dir: Path, guest_crate: Path, guest_artifact: Path) -> Path:
    """Return a guestpin.yaml in the host directory binding the default guest."""
    path = host_dir / "guestpin.yaml"
    path.write_text(
        'version: "1.0"\n'
        "bindings:\n"
        "  - name: adder_guest\n"
        "    crate: ../guest\n"
    )
    return path
