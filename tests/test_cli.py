"""
Tests for the command-line entry point.
"""

import logging

import pytest
from lexipoeia.cli import main
from lexipoeia.examples import EXAMPLE_SOURCE


@pytest.fixture(autouse=True)
def restore_warning_capture():
    yield
    logging.captureWarnings(False)


@pytest.fixture
def spec_file(tmp_path):
    path = tmp_path / "example.lex"
    path.write_text(EXAMPLE_SOURCE, encoding="utf-8")
    return path


def test_default_output_file(spec_file):
    assert main([str(spec_file)]) == 0
    output = spec_file.parent / "example.lex.words"
    lines = output.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 100


def test_explicit_output_file(spec_file, tmp_path):
    output = tmp_path / "out.txt"
    assert main([str(spec_file), str(output)]) == 0
    assert len(output.read_text(encoding="utf-8").splitlines()) == 100


def test_runs_are_identical(spec_file, tmp_path):
    first, second = tmp_path / "a.txt", tmp_path / "b.txt"
    main([str(spec_file), str(first)])
    main([str(spec_file), str(second)])
    assert first.read_bytes() == second.read_bytes()


def test_missing_argument_exits_2(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([])
    assert excinfo.value.code == 2
    assert "usage" in capsys.readouterr().err


def test_missing_input_file(tmp_path):
    assert main([str(tmp_path / "missing.lex")]) == 1


def test_invalid_specification(tmp_path):
    path = tmp_path / "bad.lex"
    path.write_text("V = a;\n%cv = X V;\n", encoding="utf-8")
    assert main([str(path)]) == 1
    assert not (tmp_path / "bad.lex.words").exists()


def test_unwritable_output(spec_file, tmp_path):
    assert main([str(spec_file), str(tmp_path / "no" / "such" / "dir.txt")]) == 1


def test_warning_does_not_stop_generation(tmp_path):
    path = tmp_path / "warn.lex"
    path.write_text("V = a;\n%v = V;\n! v zz;\n#mean = 1;\n#words = 4;\n", encoding="utf-8")
    assert main([str(path)]) == 0
    assert (tmp_path / "warn.lex.words").read_text(encoding="utf-8") == "a\na\na\na\n"


def test_dump_yaml(spec_file, capsys):
    assert main([str(spec_file), "--dump", "yaml"]) == 0
    out = capsys.readouterr().out
    assert "phoneme_groups:" in out
    assert not (spec_file.parent / "example.lex.words").exists()


def test_dump_json(spec_file, capsys):
    assert main([str(spec_file), "--dump", "json"]) == 0
    assert '"syllables"' in capsys.readouterr().out


def test_analyze_report(spec_file, capsys):
    assert main([str(spec_file), "--analyze"]) == 0
    assert "Syllable templates: 2" in capsys.readouterr().err


def test_non_utf8_input(tmp_path):
    path = tmp_path / "latin1.lex"
    path.write_bytes(b"V = \xff\xfe;\n")
    assert main([str(path)]) == 1
    assert not (tmp_path / "latin1.lex.words").exists()


def test_generation_failure_leaves_no_output(tmp_path):
    path = tmp_path / "nopool.lex"
    path.write_text("v = a;\n#mean = 1;\n#words = 2;\n", encoding="utf-8")
    assert main([str(path)]) == 1
    assert not (tmp_path / "nopool.lex.words").exists()


def test_generation_failure_keeps_earlier_output(tmp_path):
    path = tmp_path / "nopool.lex"
    path.write_text("v = a;\n#mean = 1;\n#words = 2;\n", encoding="utf-8")
    output = tmp_path / "nopool.lex.words"
    output.write_text("kept\n", encoding="utf-8")
    assert main([str(path)]) == 1
    assert output.read_text(encoding="utf-8") == "kept\n"


def test_byte_order_mark_input(tmp_path):
    path = tmp_path / "bom.lex"
    path.write_bytes("V = a;\n%s = V;\n#mean = 1;\n#words = 2;\n".encode("utf-8-sig"))
    assert main([str(path)]) == 0
    assert (tmp_path / "bom.lex.words").read_text(encoding="utf-8") == "a\na\n"
