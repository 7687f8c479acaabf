"""Bridge test fixtures: mock SB objects for the LLDB classes heapscope touches."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest


def _sb_error(success: bool) -> MagicMock:
    """An SBError-like mock; SBError objects are always truthy."""
    err = MagicMock(name="SBError")
    err.Success.return_value = success
    err.Fail.return_value = not success
    err.__str__ = lambda self: "" if success else "operation not permitted"
    err.__bool__ = lambda self: True
    return err


@pytest.fixture()
def mock_sb_debugger():
    return MagicMock(name="SBDebugger")


@pytest.fixture()
def mock_sb_target():
    sb = MagicMock(name="SBTarget")
    sb.GetAddressByteSize.return_value = 8
    sb.GetNumModules.return_value = 0

    no_symbols = MagicMock(name="SBSymbolContextList")
    no_symbols.GetSize.return_value = 0
    sb.FindSymbols.return_value = no_symbols
    return sb


@pytest.fixture()
def mock_sb_process(mock_sb_target):
    sb = MagicMock(name="SBProcess")
    sb.GetProcessID.return_value = 12345
    sb.GetTarget.return_value = mock_sb_target
    sb.Detach.return_value = _sb_error(True)

    no_regions = MagicMock(name="SBMemoryRegionInfoList")
    no_regions.GetSize.return_value = 0
    sb.GetMemoryRegions.return_value = no_regions
    return sb


@pytest.fixture()
def mock_sb_error_success():
    return _sb_error(True)


@pytest.fixture()
def mock_sb_error_fail():
    return _sb_error(False)
