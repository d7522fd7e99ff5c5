"""
Global test configuration for pclconvert.

This module provides global pytest configuration and fixtures.
"""

import shutil
import sys
from pathlib import Path

import pytest

# Ensure the project src directory is importable without relying on external environment.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

TESTS_ROOT = Path(__file__).resolve().parent
if str(TESTS_ROOT) not in sys.path:
    sys.path.insert(0, str(TESTS_ROOT))

FIXTURES_DIR = TESTS_ROOT / "fixtures"


@pytest.fixture
def classic_solution(tmp_path) -> Path:
    """A writable copy of the ClassicSolution fixture; returns the .sln path."""
    target = tmp_path / "ClassicSolution"
    shutil.copytree(FIXTURES_DIR / "ClassicSolution", target)
    return target / "ClassicSolution.sln"


@pytest.fixture
def classic_csproj_lines() -> list[str]:
    """Lines of the classic .NET 4.5 fixture project file."""
    path = FIXTURES_DIR / "ClassicSolution" / "Classic.Library" / "Classic.Library.csproj"
    return path.read_text(encoding="utf-8").splitlines()
