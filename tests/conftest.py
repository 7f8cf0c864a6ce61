"""Pytest fixtures for SwiftGuard tests."""
from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def swiftguard_toml(tmp_path: Path) -> Path:
    """Create a temporary .swiftguard.toml file."""
    config_path: Path = tmp_path / ".swiftguard.toml"
    config_path.write_text(
        """
include = ["Sources/**/*.swift"]
exclude = ["**/Generated/**"]
output_format = "jsonl"
show_source = false
warnings_as_errors = true
jobs = 4

[rules]
UNW001 = "error"
prefer-let = "off"

[rules.CLS001]
severity = "error"
justification_marker = "subclass-ok:"

[rules.ACC001]
exempt_extensions = true

[rules.SWT001]
marker = "exhaustive-enough"

[ignores]
require_reason = false
disallow = ["UNW001"]
max_per_file = 10
"""
    )
    return config_path


@pytest.fixture
def invalid_toml(tmp_path: Path) -> Path:
    """Create an invalid TOML file."""
    config_path: Path = tmp_path / ".swiftguard.toml"
    config_path.write_text("invalid [ toml content")
    return config_path


@pytest.fixture
def invalid_config(tmp_path: Path) -> Path:
    """Create a .swiftguard.toml with invalid values."""
    config_path: Path = tmp_path / ".swiftguard.toml"
    config_path.write_text(
        """
output_format = "xml"
jobs = 0

[rules]
UNW001 = "fatal"
FAKE001 = "error"

[ignores]
disallow = ["FAKE002"]
"""
    )
    return config_path
