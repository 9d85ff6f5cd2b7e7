import os
import subprocess
import sys


ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SAMPLES = os.path.join(ROOT, "samples")


def run_cli(*args):
    cli = os.path.join(ROOT, "cli.py")
    return subprocess.run(
        [sys.executable, cli, *args],
        text=True,
        capture_output=True,
        cwd=ROOT,
        timeout=10,
    )


def sample(name):
    return os.path.join(SAMPLES, name)


def test_run_add():
    proc = run_cli(sample("add.iin"))
    assert proc.returncode == 0, proc.stdout + proc.stderr
    assert proc.stdout.splitlines() == ["7"]


def test_run_samples():
    expected = {"sub.iin": ["7"], "skip.iin": ["1"], "countdown.iin": ["0"]}
    for name, lines in expected.items():
        proc = run_cli(sample(name))
        assert proc.returncode == 0, f"{name}: {proc.stdout}{proc.stderr}"
        assert proc.stdout.splitlines() == lines


def test_no_arguments_is_usage_error():
    proc = run_cli()
    assert proc.returncode == 1
    assert "Usage:" in proc.stdout


def test_two_arguments_is_usage_error():
    proc = run_cli(sample("add.iin"), sample("sub.iin"))
    assert proc.returncode == 1
    assert "Usage:" in proc.stdout


def test_unknown_flag_is_usage_error():
    proc = run_cli("--fast", sample("add.iin"))
    assert proc.returncode == 1
    assert "Usage:" in proc.stdout


def test_missing_file():
    proc = run_cli(os.path.join(SAMPLES, "does_not_exist.iin"))
    assert proc.returncode == 1
    assert proc.stdout.startswith("FATAL: Failed to open input file:")


def test_underflow_is_fatal():
    proc = run_cli(sample("underflow.iin"))
    assert proc.returncode == 1
    lines = proc.stdout.splitlines()
    assert lines[0] == "1"
    assert lines[1].startswith("FATAL: stack underflow")
    assert len(lines) == 2


def test_duplicate_label_fails_before_running():
    proc = run_cli(sample("duplicate_label.iin"))
    assert proc.returncode == 1
    assert proc.stdout.splitlines() == ["FATAL: parse error: duplicate label (line 3: 'loop:')"]


def test_unknown_opcode(tmp_path):
    p = tmp_path / "bad.iin"
    p.write_text("frobnicate\n", encoding="utf-8")
    proc = run_cli(str(p))
    assert proc.returncode == 1
    assert proc.stdout.startswith("FATAL: parse error: unknown opcode")


def test_trace_goes_to_stderr():
    proc = run_cli("--trace", sample("add.iin"))
    assert proc.returncode == 0
    assert proc.stdout.splitlines() == ["7"]
    assert proc.stderr.splitlines()[0] == "TRACE pc=0000 line=1 push 3"
    assert len(proc.stderr.splitlines()) == 4


def test_profile_report():
    proc = run_cli(sample("countdown.iin"), "--profile")
    assert proc.returncode == 0
    assert proc.stdout.splitlines() == ["0"]
    assert proc.stderr.startswith("PROFILE 22 steps")


def test_trace_and_profile_conflict():
    proc = run_cli("--trace", "--profile", sample("add.iin"))
    assert proc.returncode == 1


def test_dump_does_not_run():
    proc = run_cli("--dump", sample("skip.iin"))
    assert proc.returncode == 0
    out = proc.stdout.splitlines()
    assert "  skip -> 0004" in out
    assert "  0001  je 0 skip" in out
    assert "skip:" in out
    assert "1" not in out


def test_color_prefix():
    proc = run_cli("--color", sample("underflow.iin"))
    assert proc.returncode == 1
    assert "stack underflow" in proc.stdout
    assert "\x1b[" in proc.stdout


def test_debug_prints_traceback():
    proc = run_cli("--debug", sample("underflow.iin"))
    assert proc.returncode == 1
    assert "Traceback" in proc.stderr
    assert "VMRuntimeError" in proc.stderr
