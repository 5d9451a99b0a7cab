"""Unit tests for scan command.

Tests for the CLI scan command, including CSV export and interactive
deletion driven through the prompt.
"""

from pathlib import Path
from unittest.mock import patch

import pytest
from diskclean.cli.main import app
from diskclean.core.interchange import read_csv
from diskclean.filesystem import scanner as scanner_module
from typer.testing import CliRunner

runner = CliRunner()


@pytest.fixture
def no_size_threshold(isolated_config: Path) -> None:
    """Show every directory in interactive mode."""
    config_dir = isolated_config / "diskclean"
    config_dir.mkdir(parents=True)
    (config_dir / "config.toml").write_text("min_size_bytes = 0\n")


class TestScanCommand:
    """Tests for diskclean scan command."""

    def test_scan_help(self) -> None:
        """Scan command shows help."""
        result = runner.invoke(app, ["scan", "--help"])

        assert result.exit_code == 0
        assert "Scan a directory tree" in result.output

    def test_scan_summary(self, sample_tree: Path) -> None:
        """Scan prints the summary with root totals."""
        result = runner.invoke(app, ["scan", str(sample_tree)])

        assert result.exit_code == 0
        assert "Scan complete: 4 directories reported" in result.output
        assert "Scan Summary" in result.output
        assert "Total directories: 4" in result.output
        assert "Temp directories: 2" in result.output
        assert "Largest Directories" in result.output

    def test_scan_bracketed_names(self, tmp_path: Path) -> None:
        """Brackets in paths are printed literally, not read as styles."""
        root = tmp_path / "x[" / "]y" / "[bold]data"
        (root / "node_modules").mkdir(parents=True)
        (root / "node_modules" / "index.js").write_text("x")

        result = runner.invoke(app, ["scan", str(root)])

        assert result.exit_code == 0
        assert f"Root: {root}" in result.output
        assert f"{root}/node_modules" in result.output

    def test_scan_missing_path(self, tmp_path: Path) -> None:
        """Missing roots exit with an error."""
        result = runner.invoke(app, ["scan", str(tmp_path / "missing")])

        assert result.exit_code == 1
        assert "Path does not exist" in result.output

    def test_scan_to_csv(self, sample_tree: Path, tmp_path: Path) -> None:
        """--output-csv saves every entry."""
        target = tmp_path / "scan.csv"

        result = runner.invoke(app, ["scan", str(sample_tree), "--output-csv", str(target)])

        assert result.exit_code == 0
        assert "Saved 4 entries" in result.output
        entries = {e.path: e for e in read_csv(target)}
        assert entries[str(sample_tree)].size_bytes == 57

    def test_scan_temp_only(self, sample_tree: Path, tmp_path: Path) -> None:
        """--temp-only keeps temporary directories only."""
        target = tmp_path / "scan.csv"

        result = runner.invoke(app, ["scan", str(sample_tree), "-t", "-o", str(target)])

        assert result.exit_code == 0
        assert {e.path for e in read_csv(target)} == {
            str(sample_tree / "node_modules"),
            str(sample_tree / "src" / "__pycache__"),
        }

    def test_scan_nothing_to_report(self, tmp_path: Path) -> None:
        """A tree without temp directories reports nothing in temp-only mode."""
        (tmp_path / "src").mkdir()

        result = runner.invoke(app, ["scan", str(tmp_path), "--temp-only"])

        assert result.exit_code == 0
        assert "No directories to report." in result.output

    def test_scan_lists_issues(self, sample_tree: Path) -> None:
        """Unreadable paths are listed after the scan."""
        real = scanner_module._list_directory
        blocked = str(sample_tree / "src")

        def listing(path: str):
            if path == blocked:
                raise PermissionError(13, "Permission denied", path)
            return real(path)

        with patch.object(scanner_module, "_list_directory", side_effect=listing):
            result = runner.invoke(app, ["scan", str(sample_tree)])
            quiet = runner.invoke(app, ["--quiet", "scan", str(sample_tree)])

        assert result.exit_code == 0
        assert "1 path(s) could not be read" in result.output
        assert "Permission" in result.output
        assert quiet.exit_code == 0
        assert "1 path(s) could not be read" in quiet.output
        assert "Permission" not in quiet.output

    def test_scan_invalid_settings(self, sample_tree: Path, isolated_config: Path) -> None:
        """A broken settings file stops the command."""
        config_dir = isolated_config / "diskclean"
        config_dir.mkdir(parents=True)
        (config_dir / "config.toml").write_text("max_workers = 0\n")

        result = runner.invoke(app, ["scan", str(sample_tree)])

        assert result.exit_code == 1
        assert "Invalid config content" in result.output


@pytest.mark.usefixtures("no_size_threshold")
class TestScanInteractive:
    """Tests for scan --interactive."""

    def test_delete_confirmed(self, sample_tree: Path) -> None:
        """Selecting, committing and typing 'yes' deletes the directory."""
        # Largest first: project, node_modules, src, __pycache__
        result = runner.invoke(app, ["scan", str(sample_tree), "-i"], input="2\nd\nyes\n")

        assert result.exit_code == 0
        assert "Deleted 1 directory(ies), freed 25 B." in result.output
        assert not (sample_tree / "node_modules").exists()
        assert (sample_tree / "src").exists()

    def test_delete_refused(self, sample_tree: Path) -> None:
        """Any answer other than 'yes' cancels and keeps the directory."""
        result = runner.invoke(app, ["scan", str(sample_tree), "-i"], input="2\nd\ny\nq\n")

        assert result.exit_code == 0
        assert "Deletion cancelled." in result.output
        assert (sample_tree / "node_modules").exists()

    def test_dry_run(self, sample_tree: Path) -> None:
        """--dry-run reports without deleting."""
        result = runner.invoke(
            app, ["scan", str(sample_tree), "-i", "--dry-run"], input="2\nd\nyes\n"
        )

        assert result.exit_code == 0
        assert "would be deleted" in result.output
        assert (sample_tree / "node_modules").exists()

    def test_failed_deletion_exits_nonzero(self, sample_tree: Path) -> None:
        """A failed path makes the command exit with 1."""
        with patch(
            "diskclean.filesystem.operator.shutil.rmtree",
            side_effect=PermissionError(13, "Permission denied"),
        ):
            result = runner.invoke(app, ["scan", str(sample_tree), "-i"], input="2\nd\nyes\n")

        assert result.exit_code == 1
        assert "1 failed" in result.output

    def test_quit_without_selection(self, sample_tree: Path) -> None:
        """Quitting deletes nothing."""
        result = runner.invoke(app, ["scan", str(sample_tree), "-i"], input="q\n")

        assert result.exit_code == 0
        assert (sample_tree / "node_modules").exists()

    def test_threshold_hides_small_directories(
        self, sample_tree: Path, isolated_config: Path
    ) -> None:
        """With the default threshold a tiny tree offers nothing."""
        (isolated_config / "diskclean" / "config.toml").unlink()

        result = runner.invoke(app, ["scan", str(sample_tree), "-i"])

        assert result.exit_code == 0
        assert "No directories of at least 1.00 MB to select." in result.output
