"""Unit tests for round-trip verification of generated modules."""

from __future__ import annotations

from pathlib import Path

import pytest

from guestpin_core.compiler.digest import compute_image_id
from guestpin_core.compiler.emitter import write_bindings
from guestpin_core.compiler.models import GeneratedBinding
from guestpin_core.compiler.verifier import read_package_index, verify_module, verify_package
from guestpin_core.errors import VerificationError
from guestpin_core.schemas import DigestScheme


@pytest.fixture
def package_dir(tmp_path: Path, sample_elf: bytes) -> Path:
    """Return a generated package with two bindings."""
    bindings = [
        GeneratedBinding(
            name=name,
            crate_name=name,
            digest=scheme,
            elf=sample_elf + name.encode(),
            image_id=compute_image_id(sample_elf + name.encode(), scheme),
        )
        for name, scheme in (("adder", DigestScheme.sha256), ("hasher", DigestScheme.blake2s))
    ]
    output = tmp_path / "guests"
    write_bindings(bindings, output)
    return output


class TestVerifyModule:
    """Tests for verify_module()."""

    def test_generated_module_passes(self, package_dir: Path) -> None:
        result = verify_module(package_dir / "adder.py")

        assert result.passed
        assert result.name == "adder"
        assert result.expected == result.actual

    def test_tampered_payload_fails(self, package_dir: Path) -> None:
        module = package_dir / "adder.py"
        module.write_text(module.read_text().replace("b'\\x7fELF", "b'\\x7fELG", 1))

        result = verify_module(module)

        assert not result.passed
        assert "!= digest(ELF)" in result.message

    def test_module_without_constants_fails(self, tmp_path: Path) -> None:
        module = tmp_path / "plain.py"
        module.write_text("VALUE = 1\n")

        result = verify_module(module)

        assert not result.passed
        assert "does not define" in result.message

    def test_missing_module(self, tmp_path: Path) -> None:
        with pytest.raises(VerificationError, match="not found"):
            verify_module(tmp_path / "missing.py")

    def test_broken_module(self, tmp_path: Path) -> None:
        module = tmp_path / "broken.py"
        module.write_text("ELF = (\n")

        with pytest.raises(VerificationError, match="failed to load"):
            verify_module(module)


class TestVerifyPackage:
    """Tests for verify_package()."""

    def test_verifies_every_exported_binding(self, package_dir: Path) -> None:
        results = verify_package(package_dir)

        assert [r.name for r in results] == ["adder", "hasher"]
        assert all(r.passed for r in results)

    def test_reads_index_without_import(self, package_dir: Path) -> None:
        assert read_package_index(package_dir) == ["adder", "hasher"]

    def test_missing_index(self, tmp_path: Path) -> None:
        with pytest.raises(VerificationError, match="index not found"):
            verify_package(tmp_path)

    @pytest.mark.parametrize(
        "index",
        ["__all__ = [\n", "__all__ = sorted(['adder'])\n"],
        ids=["syntax-error", "non-literal"],
    )
    def test_unparsable_index(self, package_dir: Path, index: str) -> None:
        (package_dir / "__init__.py").write_text(index, encoding="utf-8")

        with pytest.raises(VerificationError, match="index is not valid"):
            verify_package(package_dir)
