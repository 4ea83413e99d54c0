import io

import pytest

from cayo.compiler import VM

# Tests taking the `vm` fixture run twice: tracing off and on. Tracing only
# adds output, so results must be identical in both modes.


@pytest.fixture(params=[False, True], ids=["plain", "trace"])
def trace(request):
    return request.param


@pytest.fixture
def out():
    return io.StringIO()


@pytest.fixture
def err():
    return io.StringIO()


@pytest.fixture
def vm(trace, out, err):
    return VM(trace=trace, out=out, err=err)


@pytest.fixture
def clean_env(monkeypatch):
    # Keep developer shells with CAYO_TRACE / CAYO_DISASM set from changing output
    monkeypatch.delenv("CAYO_TRACE", raising=False)
    monkeypatch.delenv("CAYO_DISASM", raising=False)
    return monkeypatch
