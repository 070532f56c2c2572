"""Packaging checks for semantic-tree-diff.

These tests inspect the built wheel and the current installation rather than
creating temporary virtualenvs.
"""

from __future__ import annotations

import importlib
import subprocess
import sys
import zipfile
from importlib.metadata import entry_points
from pathlib import Path

import pytest

import semantic_tree_diff

PROJECT_ROOT = Path(__file__).parent.parent.parent


class TestBaseInstall:
    def test_top_level_api(self) -> None:
        for name in ("compare", "is_equivalent", "build_report", "TreeBuilder"):
            assert hasattr(semantic_tree_diff, name), name

    def test_compare_basic(self) -> None:
        result = semantic_tree_diff.compare({"a": 1}, {"a": 1}, "json")
        assert result.equivalent

    def test_py_typed_marker_in_source(self) -> None:
        package_dir = Path(semantic_tree_diff.__file__).parent
        assert (package_dir / "py.typed").is_file()


class TestWheelContents:
    """Verify the built wheel contains required files."""

    @pytest.fixture(scope="class")
    def wheel_path(self) -> Path:
        """Build a fresh wheel and return its path."""
        dist_dir = PROJECT_ROOT / "dist"
        try:
            result = subprocess.run(
                ["poetry", "build", "-f", "wheel"],
                cwd=str(PROJECT_ROOT),
                capture_output=True,
                text=True,
            )
        except FileNotFoundError:
            pytest.skip("poetry is not installed")
        if result.returncode != 0:
            pytest.skip(f"poetry build failed: {result.stderr}")

        wheels = sorted(dist_dir.glob("*.whl"), key=lambda p: p.stat().st_mtime)
        if not wheels:
            pytest.skip("No wheel found in dist/")
        return wheels[-1]

    def test_py_typed_in_wheel(self, wheel_path: Path) -> None:
        with zipfile.ZipFile(wheel_path) as zf:
            names = zf.namelist()
            assert any(n.endswith("py.typed") for n in names), names

    def test_no_pycache_in_wheel(self, wheel_path: Path) -> None:
        with zipfile.ZipFile(wheel_path) as zf:
            pycache_files = [n for n in zf.namelist() if "__pycache__" in n]
            assert not pycache_files, f"__pycache__ found in wheel: {pycache_files}"

    def test_all_source_modules_in_wheel(self, wheel_path: Path) -> None:
        expected_modules = [
            "semantic_tree_diff/__init__.py",
            "semantic_tree_diff/api.py",
            "semantic_tree_diff/comparator.py",
            "semantic_tree_diff/exceptions.py",
            "semantic_tree_diff/result.py",
            "semantic_tree_diff/algorithm/assignment.py",
            "semantic_tree_diff/algorithm/config.py",
            "semantic_tree_diff/algorithm/hash_matcher.py",
            "semantic_tree_diff/algorithm/matching.py",
            "semantic_tree_diff/algorithm/scoring.py",
            "semantic_tree_diff/algorithm/similarity_matcher.py",
            "semantic_tree_diff/algorithm/tree_matcher.py",
            "semantic_tree_diff/diff/builders.py",
            "semantic_tree_diff/diff/classifier.py",
            "semantic_tree_diff/diff/constructor.py",
            "semantic_tree_diff/diff/formatting.py",
            "semantic_tree_diff/diff/mapper.py",
            "semantic_tree_diff/diff/models.py",
            "semantic_tree_diff/options/dimensions.py",
            "semantic_tree_diff/options/match_options.py",
            "semantic_tree_diff/options/profiles.py",
            "semantic_tree_diff/options/whitespace.py",
            "semantic_tree_diff/tree/builder.py",
            "semantic_tree_diff/tree/nodes.py",
            "semantic_tree_diff/tree/serializer.py",
            "semantic_tree_diff/tree/signature.py",
            "semantic_tree_diff/integrations/_pytest_plugin.py",
        ]
        with zipfile.ZipFile(wheel_path) as zf:
            names = zf.namelist()
            for module in expected_modules:
                assert any(module in n for n in names), (
                    f"Module {module} not found in wheel"
                )

    def test_metadata_in_wheel(self, wheel_path: Path) -> None:
        with zipfile.ZipFile(wheel_path) as zf:
            metadata_files = [n for n in zf.namelist() if "METADATA" in n]
            assert metadata_files, "No METADATA found in wheel"
            metadata = zf.read(metadata_files[0]).decode()
            assert "semantic-tree-diff" in metadata.lower()
            assert "0.1.0" in metadata


class TestPytestPluginDiscovery:
    def test_entry_point_registered(self) -> None:
        pytest11_eps = entry_points(group="pytest11")
        ours = [ep for ep in pytest11_eps if "semantic_tree_diff" in str(ep.value)]
        assert ours, (
            "No pytest11 entry point found for semantic-tree-diff. "
            f"Available: {[ep.name for ep in pytest11_eps]}"
        )

    def test_fixture_defined_in_plugin(self) -> None:
        mod = importlib.import_module(
            "semantic_tree_diff.integrations._pytest_plugin"
        )
        assert callable(mod.assert_documents_equivalent)

    def test_plugin_discovery_via_pytest(self) -> None:
        result = subprocess.run(
            [sys.executable, "-m", "pytest", "--fixtures", "-q"],
            capture_output=True,
            text=True,
            cwd=str(PROJECT_ROOT),
        )
        assert "assert_documents_equivalent" in result.stdout, (
            f"Fixture not found in pytest fixtures list. stdout: {result.stdout[:500]}"
        )


class TestPackageMetadata:
    def test_version(self) -> None:
        assert semantic_tree_diff.__version__ == "0.1.0"

    def test_all_exports(self) -> None:
        expected = {
            "ClassificationError",
            "ComparisonResult",
            "ConfigurationError",
            "DiffNode",
            "DiffReport",
            "DocumentFormat",
            "GlobalMatchSettings",
            "MatchBehavior",
            "MatchDimension",
            "MatchProfile",
            "MatcherConfig",
            "MatchingInvariantError",
            "NodeKind",
            "ReportOptions",
            "SemanticComparator",
            "SemanticDiffError",
            "ShowDiffs",
            "TreeBuilder",
            "TreeNode",
            "build_report",
            "compare",
            "define_profile",
            "is_equivalent",
        }
        actual = set(semantic_tree_diff.__all__)
        assert expected == actual, (
            f"Missing: {expected - actual}, Extra: {actual - expected}"
        )
