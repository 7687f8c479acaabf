"""Module and symbol lookup on an ``lldb.SBTarget``."""

from __future__ import annotations

from typing import Any, List

try:
    import lldb
except ImportError:
    lldb = None  # type: ignore[assignment]

from .types import ModuleInfo, SymbolInfo


class Target:
    """Wraps the ``SBTarget`` of an attached process."""

    def __init__(self, sb_target: Any) -> None:
        self._sb = sb_target

    @property
    def address_byte_size(self) -> int:
        return self._sb.GetAddressByteSize()

    @property
    def modules(self) -> List[ModuleInfo]:
        """Every valid module currently loaded, in LLDB's order."""
        loaded: List[ModuleInfo] = []
        for i in range(self._sb.GetNumModules()):
            sb_module = self._sb.GetModuleAtIndex(i)
            if not sb_module.IsValid():
                continue
            file_spec = sb_module.GetFileSpec()
            loaded.append(
                ModuleInfo(
                    name=file_spec.GetFilename() or "",
                    path=str(file_spec) if file_spec.IsValid() else "",
                )
            )
        return loaded

    def find_symbols(self, name: str) -> List[SymbolInfo]:
        """Every loaded symbol called *name*, across all modules.

        Symbols that have no load address yet are left out.
        """
        contexts = self._sb.FindSymbols(name)
        found: List[SymbolInfo] = []
        for i in range(contexts.GetSize()):
            context = contexts.GetContextAtIndex(i)
            symbol = context.GetSymbol()
            if not symbol.IsValid():
                continue
            address = symbol.GetStartAddress().GetLoadAddress(self._sb)
            if address == lldb.LLDB_INVALID_ADDRESS:
                continue
            sb_module = context.GetModule()
            module = sb_module.GetFileSpec().GetFilename() if sb_module.IsValid() else ""
            found.append(
                SymbolInfo(name=symbol.GetName() or name, address=address, module=module or "")
            )
        return found
