import json

from binparser.cli import main


def test_info(tmp_path, capsys):
    p = tmp_path / "in.bin"
    p.write_bytes(b"\x01\x02\x03")
    assert main(["info", str(p)]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out == {"length": 3, "byte_pos": 0, "bit_pos": 0, "length_bits": 24}


def test_read_plan(tmp_path, capsys):
    p = tmp_path / "in.bin"
    p.write_bytes(b"\x00\xa5\xbe\xef")
    assert main(["read", str(p), "hi:u4,lo:u4,tail:bytes2", "--offset", "1", "--dump"]) == 0
    captured = capsys.readouterr()
    out = json.loads(captured.out)
    assert [f["value"] for f in out] == [0xA, 0x5, "beef"]
    assert out[-1]["end"] == {"byte": 4, "bit": 0}
    assert "***** Syntax Reader Dump *****" in captured.err


def test_read_error_exit_status(tmp_path, capsys):
    p = tmp_path / "in.bin"
    p.write_bytes(b"\x00")
    assert main(["read", str(p), "a:u32"]) == 1
    assert capsys.readouterr().err.startswith("error:")


def test_no_command_prints_help(capsys):
    assert main([]) == 2
    assert "binparser" in capsys.readouterr().out


def test_missing_input_exit_status(tmp_path, capsys):
    assert main(["info", str(tmp_path / "nope.bin")]) == 1
    assert capsys.readouterr().err.startswith("error:")
