"""Tests for the umask calculator.

New files start from 666 and new directories from 777; the umask
names the bits to strip away.
"""

import pytest

from py_perms.permissions import InvalidFormatError, to_numeric, to_symbolic
from py_perms.umask import (
    COMMON_UMASKS,
    DIRECTORY_BASE_MODE,
    FILE_BASE_MODE,
    compute_default,
    is_valid_umask,
    normalize_umask,
    parse_umask,
    preview,
)


class TestComputeDefault:
    """Verify base & ~umask for both entry kinds."""

    def test_zero_umask_file(self) -> None:
        """Files never get execute, even with no umask."""
        assert to_numeric(compute_default("000", is_container=False)) == "666"

    def test_zero_umask_directory(self) -> None:
        """Directories get everything with no umask."""
        assert to_numeric(compute_default("000", is_container=True)) == "777"

    def test_standard_umask_directory(self) -> None:
        """022 gives the familiar rwxr-xr-x directory."""
        perms = compute_default("022", is_container=True)
        assert to_numeric(perms) == "755"
        assert to_symbolic(perms) == "rwxr-xr-x"

    def test_standard_umask_file(self) -> None:
        """022 gives 644 files."""
        assert to_numeric(compute_default("022", is_container=False)) == "644"

    def test_private_umask(self) -> None:
        """077 keeps everything to the owner."""
        assert to_numeric(compute_default("077", is_container=False)) == "600"
        assert to_numeric(compute_default("077", is_container=True)) == "700"

    def test_umask_cannot_add_bits(self) -> None:
        """Masking out execute on a file changes nothing."""
        assert to_numeric(compute_default("111", is_container=False)) == "666"

    def test_empty_umask_means_no_restriction(self) -> None:
        """An empty umask behaves like 000."""
        assert compute_default("", is_container=True) == compute_default("000", is_container=True)

    def test_full_umask(self) -> None:
        """777 strips everything."""
        assert to_numeric(compute_default("777", is_container=True)) == "000"

    def test_base_modes(self) -> None:
        """The conventional base modes."""
        assert FILE_BASE_MODE == 0o666  # noqa: PLR2004
        assert DIRECTORY_BASE_MODE == 0o777  # noqa: PLR2004


class TestUmaskValidation:
    """Verify the input gate and parsing."""

    @pytest.mark.parametrize("text", ["000", "022", "777", ""])
    def test_valid_umasks(self, text: str) -> None:
        """Three octal digits or empty pass the gate."""
        assert is_valid_umask(text)

    @pytest.mark.parametrize("text", ["22", "0222", "089", "abc", " 22", "02a"])
    def test_invalid_umasks(self, text: str) -> None:
        """Anything else is refused."""
        assert not is_valid_umask(text)

    def test_normalize(self) -> None:
        """Empty normalises to 000."""
        assert normalize_umask("") == "000"
        assert normalize_umask("027") == "027"

    def test_normalize_rejects_invalid(self) -> None:
        """Normalising a bad umask raises."""
        with pytest.raises(InvalidFormatError):
            normalize_umask("9")

    def test_parse(self) -> None:
        """Parsing reads octal."""
        assert parse_umask("022") == 0o022  # noqa: PLR2004
        assert parse_umask("") == 0
        assert parse_umask("7") == 0o7  # noqa: PLR2004

    def test_parse_rejects_invalid(self) -> None:
        """Non-octal text is an InvalidFormatError."""
        with pytest.raises(InvalidFormatError):
            parse_umask("8")


class TestPreview:
    """Verify the side-by-side defaults preview."""

    def test_preview_both_kinds(self) -> None:
        """A preview carries both file and directory defaults."""
        result = preview("022")
        assert to_numeric(result.file) == "644"
        assert to_numeric(result.directory) == "755"

    def test_preview_lines(self) -> None:
        """The summary shows symbolic and numeric forms."""
        lines = preview("077").lines()
        assert "rw------- (600)" in lines[0]
        assert "rwx------ (700)" in lines[1]

    def test_presets_match_descriptions(self) -> None:
        """Each preset's description names the modes it produces."""
        for preset in COMMON_UMASKS:
            result = preview(preset.value)
            assert f"{to_numeric(result.directory)}/{to_numeric(result.file)}" in preset.description
