"""Shared test fixtures for guestpin-cli tests.

Provides CliRunner fixtures and a temporary workspace with a prebuilt
guest artifact.
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

GUESTPIN_YAML_FILENAME = "guestpin.yaml"
TARGET_TRIPLE = "riscv32im-risc0-zkvm-elf"


@pytest.fixture(autouse=True)
def clear_base_dir_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep GUESTPIN_BASE_DIR from the outer environment out of tests."""
    monkeypatch.delenv("GUESTPIN_BASE_DIR", raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture
def isolated_runner(cli_runner: CliRunner) -> Generator[CliRunner, None, None]:
    """Create a Click test runner with an isolated filesystem.

    Yields:
        CliRunner instance with isolated filesystem.
    """
    with cli_runner.isolated_filesystem():
        yield cli_runner


@pytest.fixture
def elf_bytes() -> bytes:
    """Return sample guest artifact bytes."""
    return b"\x7fELF\x01\x01\x01\x00" + bytes(range(64))


@pytest.fixture
def workspace(tmp_path: Path, elf_bytes: bytes) -> Path:
    """Create a workspace with host/, guest/ (crate "adder") and its artifact.

    Returns:
        Path to the workspace root.
    """
    root = tmp_path / "workspace"
    (root / "host").mkdir(parents=True)
    guest = root / "guest"
    guest.mkdir()
    (guest / "Cargo.toml").write_text('[package]\nname = "adder"\nversion = "0.1.0"\n')

    artifact = root / "target" / TARGET_TRIPLE / "release" / "adder"
    artifact.parent.mkdir(parents=True)
    artifact.write_bytes(elf_bytes)
    return root


@pytest.fixture
def guestpin_yaml(workspace: Path) -> Path:
    """Return a valid guestpin.yaml in workspace/host."""
    path = workspace / "host" / GUESTPIN_YAML_FILENAME
    path.write_text("bindings:\n  - name: adder_guest\n    crate: ../guest\n")
    return path


@pytest.fixture
def invalid_guestpin_yaml(tmp_path: Path) -> Path:
    """Return a guestpin.yaml with an invalid binding name."""
    path = tmp_path / GUESTPIN_YAML_FILENAME
    path.write_text("bindings:\n  - name: not-an-identifier\n    crate: ../guest\n")
    return path


def flatten(output: str) -> str:
    """Collapse whitespace so assertions survive Rich line wrapping."""
    return " ".join(output.split())


@pytest.fixture
def flat() -> Callable[[str], str]:
    """Expose flatten() to tests without importing conftest."""
    return flatten
