import io

from emjson.cli import main

FIRST = '{"a":1,"b":[true,null,"x"]}'
SECOND = '{"c":{"d":2.5}}'


def test_prints_each_object(tmp_path, capsys):
    source = tmp_path / "in.json"
    source.write_text(FIRST + "\n" + SECOND + "\n", encoding="utf-8")
    assert main([str(source)]) == 0
    assert capsys.readouterr().out.splitlines() == [FIRST, SECOND]


def test_summary(tmp_path, capsys):
    source = tmp_path / "in.json"
    source.write_text(FIRST + SECOND, encoding="utf-8")
    assert main(["--summary", str(source)]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[:2] == [FIRST, SECOND]
    assert lines[2] == "2 , 2"


def test_reads_standard_input(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO(SECOND))
    assert main([]) == 0
    assert capsys.readouterr().out.splitlines() == [SECOND]


def test_syntax_error_fails(tmp_path, capsys):
    source = tmp_path / "bad.json"
    source.write_text('{"a":1,}', encoding="utf-8")
    assert main([str(source)]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("emjson:")


def test_unfinished_object_fails(tmp_path, capsys):
    source = tmp_path / "part.json"
    source.write_text('{"a":[1,', encoding="utf-8")
    assert main([str(source)]) == 1
    assert capsys.readouterr().err.startswith("emjson:")


def test_missing_file_fails(tmp_path, capsys):
    assert main([str(tmp_path / "absent.json")]) == 1
    assert capsys.readouterr().err.startswith("emjson:")