import io
from pathlib import Path

import pytest

from valuetext.cli import main
from valuetext.options import MAX_DEPTH_SENTINEL


@pytest.fixture(autouse=True)
def _isolated_cwd(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("VALUETEXT_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)


def test_render_yaml_value(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["render", "[1, 2, 3]"]) == 0
    assert capsys.readouterr().out == "[1, 2, 3] (3 items)\n"


def test_render_yaml_mapping_and_scalars(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["render", "{a: 1, b: [true, null]}"]) == 0
    assert main(["render", "2025-01-15"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == ["{a: 1, b: [True, <null>] (2 items)} (2 items)", "2025-01-15"]


def test_render_reads_stdin_when_value_is_omitted(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("- x\n- y\n"))
    assert main(["render"]) == 0
    assert capsys.readouterr().out == "[x, y] (2 items)\n"


def test_render_flags_override_options(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--max-items", "2", "render", "[1, 2, 3]"]) == 0
    assert main(["--no-count", "render", "[1, 2]"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == ["[1, 2, ...] (3 items)", "[1, 2]"]


def test_render_array_with_dimensions(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--dimensions", "render", "--array", "[[1, 2], [3, 4]]"]) == 0
    assert capsys.readouterr().out == "[[1, 2], [3, 4]] (2D 2×2, 4 items)\n"


def test_render_array_depth_limit(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--max-depth", "1", "render", "--array", "[[1, 2], [3, 4]]"]) == 0
    assert capsys.readouterr().out == f"{MAX_DEPTH_SENTINEL}\n"


def test_render_uses_config_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / "valuetext.yaml").write_text("options:\n  null_string: nil\n", encoding="utf-8")
    assert main(["render", "~"]) == 0
    assert capsys.readouterr().out == "nil\n"


def test_explicit_config_path(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "custom.yaml"
    path.write_text("options:\n  collection_separator: ' | '\n", encoding="utf-8")
    assert main(["--config", str(path), "render", "[1, 2]"]) == 0
    assert capsys.readouterr().out == "[1 | 2] (2 items)\n"


def test_invalid_config_exits_with_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / "valuetext.yaml").write_text("options:\n  max_collection_items: -1\n", encoding="utf-8")
    with pytest.raises(SystemExit) as exc_info:
        main(["render", "1"])
    assert exc_info.value.code == 2
    assert capsys.readouterr().err.startswith("ERROR: Invalid configuration")


def test_invalid_yaml_value_exits_with_error(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        main(["render", "[1, 2"])
    assert exc_info.value.code == 2
    assert capsys.readouterr().err.startswith("ERROR: Invalid YAML value")


def test_parse_prints_rendered_value(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["parse", "--type", "timedelta", "1:2:03:04"]) == 0
    assert main(["parse", "--type", "int", "abc"]) == 0
    assert main(["parse", "--type", "uuid", "not-a-guid"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == ["1.02:03:04", "0", "00000000-0000-0000-0000-000000000000"]


def test_probe_reports_through_exit_code(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["probe", "--type", "uint8", "255"]) == 0
    assert main(["probe", "--type", "uint8", "300"]) == 1
    assert capsys.readouterr().out.splitlines() == ["true", "false"]


def test_unknown_type_name_is_rejected() -> None:
    with pytest.raises(SystemExit) as exc_info:
        main(["parse", "--type", "widget", "1"])
    assert exc_info.value.code == 2
