import io

import pytest

from pixelshop.cli.run_script import ScriptAborted, ScriptRunner, main


@pytest.fixture
def white_png(tmp_path, service, white_2x2):
    path = tmp_path / "white.png"
    service.image_repository.save(white_2x2, path)
    return path


def _runner(service, **kwargs):
    return ScriptRunner(service, out=io.StringIO(), **kwargs)


def test_runs_script_file(tmp_path, service, white_png):
    out_path = tmp_path / "dark.png"
    script = tmp_path / "edit.txt"
    script.write_text(
        "# darken everything\n"
        f"load {white_png} w\n"
        "darken 300 w d\n"
        f"save {out_path} d\n"
    )
    runner = _runner(service)
    runner.run_file(script)
    assert runner.errors == []
    assert service.get_image("d").to_list() == [(0, 0, 0)] * 4
    assert out_path.exists()


def test_errors_are_reported_and_run_continues(service, white_2x2):
    service.put_image("w", white_2x2)
    runner = _runner(service)
    runner.run_lines(["blur ghost x", "brighten abc w w", "sepia w s"])
    assert len(runner.errors) == 2
    assert runner.errors[0].startswith("<stdin>:1:")
    assert runner.errors[1].startswith("<stdin>:2:")
    assert "s" in service.registry
    assert "Error:" in runner.out.getvalue()


def test_strict_mode_stops_at_first_error(service, white_2x2):
    service.put_image("w", white_2x2)
    runner = _runner(service, strict=True)
    with pytest.raises(ScriptAborted):
        runner.run_lines(["blur ghost x", "sepia w s"])
    assert "s" not in service.registry


def test_quit_stops_reading(service, white_2x2):
    service.put_image("w", white_2x2)
    runner = _runner(service)
    runner.run_lines(["blur w b", "q", "sepia w s"])
    assert "b" in service.registry
    assert "s" not in service.registry


def test_nested_run(tmp_path, service, white_2x2):
    service.put_image("w", white_2x2)
    inner = tmp_path / "inner.txt"
    inner.write_text("vertical-flip w v\n")
    outer = tmp_path / "outer.txt"
    outer.write_text(f"run {inner}\nhorizontal-flip v h\n")
    runner = _runner(service)
    runner.run_file(outer)
    assert runner.errors == []
    assert "h" in service.registry


def test_self_including_script_hits_depth_limit(tmp_path, service):
    loop = tmp_path / "loop.txt"
    loop.write_text(f"run {loop}\n")
    runner = _runner(service)
    runner.run_file(loop)
    assert any("nested deeper" in e for e in runner.errors)


def test_missing_nested_script_reported(tmp_path, service):
    script = tmp_path / "s.txt"
    script.write_text(f"run {tmp_path / 'nope.txt'}\n")
    runner = _runner(service)
    runner.run_file(script)
    assert len(runner.errors) == 1


def test_main_exit_codes(tmp_path, white_png, capsys):
    good = tmp_path / "good.txt"
    good.write_text(f"load {white_png} w\nsepia w s\nsave {tmp_path / 's.png'} s\n")
    assert main(["-f", str(good)]) == 0
    assert (tmp_path / "s.png").exists()

    bad = tmp_path / "bad.txt"
    bad.write_text("blur ghost x\n")
    assert main(["-f", str(bad)]) == 1
    assert main(["-f", str(bad), "--strict"]) == 1
    assert main(["-f", str(tmp_path / "absent.txt")]) == 1


def test_relative_run_resolves_next_to_including_script(tmp_path, monkeypatch, service, white_2x2):
    service.put_image("w", white_2x2)
    scripts = tmp_path / "scripts"
    scripts.mkdir()
    (scripts / "inner.txt").write_text("sepia w s\n")
    outer = scripts / "outer.txt"
    outer.write_text("run inner.txt\n")
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()
    monkeypatch.chdir(elsewhere)

    runner = _runner(service)
    runner.run_file(outer)
    assert runner.errors == []
    assert "s" in service.registry
