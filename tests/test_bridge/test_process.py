"""Tests for Process wrapper."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from heapscope.bridge.process import Process
from heapscope.bridge.target import Target


class TestProcess:
    def test_pid(self, mock_sb_process):
        assert Process(mock_sb_process, MagicMock()).pid == 12345

    def test_target(self, mock_sb_process):
        target = MagicMock()
        assert Process(mock_sb_process, target).target is target

    def test_address_byte_size(self, mock_sb_process, mock_sb_target):
        mock_sb_target.GetAddressByteSize.return_value = 4
        process = Process(mock_sb_process, Target(mock_sb_target))
        assert process.address_byte_size == 4
        mock_sb_process.GetTarget.assert_not_called()

    def test_address_byte_size_defaults_to_8(self, mock_sb_process, mock_sb_target):
        mock_sb_target.GetAddressByteSize.return_value = 0
        assert Process(mock_sb_process, Target(mock_sb_target)).address_byte_size == 8

    def test_detach(self, mock_sb_process, mock_sb_error_success):
        mock_sb_process.Detach.return_value = mock_sb_error_success
        Process(mock_sb_process, MagicMock()).detach()
        mock_sb_process.Detach.assert_called_once()

    def test_detach_failure(self, mock_sb_process, mock_sb_error_fail):
        mock_sb_process.Detach.return_value = mock_sb_error_fail
        with pytest.raises(RuntimeError, match="Failed to detach from PID 12345"):
            Process(mock_sb_process, MagicMock()).detach()

    def test_read_memory(self, mock_sb_process):
        error = MagicMock()
        error.Fail.return_value = False
        mock_sb_process.ReadMemory.return_value = b"\x31\x00\x00\x00\x00\x00\x00\x00"

        proc = Process(mock_sb_process, MagicMock())
        with patch("heapscope.bridge.process.lldb") as mock_lldb:
            mock_lldb.SBError.return_value = error
            data = proc.read_memory(0x555555559008, 8)
        assert data == b"\x31" + b"\x00" * 7
        mock_sb_process.ReadMemory.assert_called_once_with(0x555555559008, 8, error)

    def test_read_memory_failure(self, mock_sb_process):
        error = MagicMock()
        error.Fail.return_value = True
        error.__str__ = lambda self: "memory read failed for 0x1000"
        mock_sb_process.ReadMemory.return_value = None

        proc = Process(mock_sb_process, MagicMock())
        with patch("heapscope.bridge.process.lldb") as mock_lldb:
            mock_lldb.SBError.return_value = error
            with pytest.raises(RuntimeError, match="Failed to read 16 bytes at 0x1000"):
                proc.read_memory(0x1000, 16)
