"""Unit tests for CLI verbosity handling."""

from __future__ import annotations

import logging

import pytest

from bencore.cli.verbosity import VerbosityLevel, VerbosityManager

pytestmark = [pytest.mark.cli, pytest.mark.unit]


class TestVerbosityManager:
    """Test VerbosityManager class."""

    def test_from_count_default(self):
        """Test the default maps to warnings."""
        vm = VerbosityManager.from_count(0)
        assert vm.level == VerbosityLevel.NORMAL
        assert vm.logging_level == logging.WARNING
        assert not vm.is_verbose()

    def test_from_count_verbose(self):
        """Test -v maps to info."""
        vm = VerbosityManager.from_count(1)
        assert vm.level == VerbosityLevel.VERBOSE
        assert vm.logging_level == logging.INFO
        assert vm.is_verbose()
        assert not vm.is_debug()

    def test_from_count_debug(self):
        """Test -vv maps to debug."""
        vm = VerbosityManager.from_count(2)
        assert vm.logging_level == logging.DEBUG
        assert vm.is_debug()

    @pytest.mark.parametrize(("count", "expected"), [(-3, 0), (7, 2)])
    def test_count_is_clamped(self, count, expected):
        """Test out-of-range counts are clamped."""
        assert VerbosityManager(count).verbosity_count == expected
