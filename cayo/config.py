from __future__ import annotations
import os

_TRUTHY = {'1', 'true', 'yes', 'on'}


def flag_from_env(var: str, default: bool = False) -> bool:
    raw = os.environ.get(var)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY


def trace_enabled() -> bool:
    """Default for VM execution tracing when none is passed explicitly."""
    return flag_from_env('CAYO_TRACE')


def disasm_enabled() -> bool:
    return flag_from_env('CAYO_DISASM')
