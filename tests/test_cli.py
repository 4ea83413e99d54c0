import pytest

from cayo.cli import main, demo_chunk, EXIT_OK, EXIT_DATAERR, EXIT_SOFTWARE, EXIT_IOERR
from cayo.compiler import Chunk, decode_chunk


@pytest.fixture
def demo_file(tmp_path, clean_env):
    path = tmp_path / "demo.cayoc"
    path.write_bytes(demo_chunk().to_bytes())
    return path


def test_demo_disassembles_and_runs(capsys, clean_env):
    assert main(["demo"]) == EXIT_OK
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "=== demo ==="
    assert lines[1] == "0000  123 LOAD_CONST       Number(1.2)"
    assert lines[2] == "0001    | LOAD_CONST       Number(3.6)"
    assert float(lines[-1]) == pytest.approx(0.8275862068965517)


def test_demo_writes_encoded_chunk(tmp_path, capsys, clean_env):
    target = tmp_path / "out.cayoc"
    assert main(["demo", "--output", str(target)]) == EXIT_OK
    assert decode_chunk(target.read_bytes()) == demo_chunk()


def test_run(demo_file, capsys):
    assert main(["run", str(demo_file)]) == EXIT_OK
    out = capsys.readouterr().out
    assert float(out.strip()) == pytest.approx(0.8275862068965517)


def test_run_with_trace_and_disassembly(demo_file, capsys):
    assert main(["run", str(demo_file), "--trace", "--disassemble"]) == EXIT_OK
    out = capsys.readouterr().out
    assert f"=== {demo_file} ===" in out
    assert "=== trace ===" in out
    assert "          [ 1.2 ][ 3.6 ]" in out


def test_disasm_env_flag(demo_file, clean_env, capsys):
    clean_env.setenv("CAYO_DISASM", "yes")
    assert main(["run", str(demo_file)]) == EXIT_OK
    assert f"=== {demo_file} ===" in capsys.readouterr().out


def test_run_reports_runtime_error(tmp_path, capsys, clean_env):
    chunk = Chunk()
    chunk.emit_return(3)
    path = tmp_path / "underflow.cayoc"
    path.write_bytes(chunk.to_bytes())

    assert main(["run", str(path)]) == EXIT_SOFTWARE
    err = capsys.readouterr().err
    assert "RuntimeError: Stack underflow" in err
    assert "[line 3] in script" in err


def test_run_reports_bad_bytecode(tmp_path, capsys, clean_env):
    path = tmp_path / "junk.cayoc"
    path.write_bytes(b"\x00\x01\x02")
    assert main(["run", str(path)]) == EXIT_DATAERR
    assert capsys.readouterr().err.startswith("CompileError: ")


def test_missing_file(tmp_path, capsys, clean_env):
    assert main(["run", str(tmp_path / "nope.cayoc")]) == EXIT_IOERR
    assert "Could not read file" in capsys.readouterr().err


def test_disasm_command(demo_file, capsys):
    assert main(["disasm", str(demo_file), "--label", "saved"]) == EXIT_OK
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "=== saved ==="
    assert lines[-1] == "0005    | RETURN"


def test_disasm_rejects_bad_bytecode(tmp_path, capsys):
    path = tmp_path / "junk.cayoc"
    path.write_bytes(b"CAYO")
    assert main(["disasm", str(path)]) == EXIT_DATAERR


def test_requires_a_command():
    with pytest.raises(SystemExit):
        main([])
