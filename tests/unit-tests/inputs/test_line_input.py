from fwcodec.inputs.line_input import LineInput


def test_iter_lines_strips_terminators(tmp_path):
    p = tmp_path / "data.txt"
    p.write_bytes(b"first   \r\nsecond\n\nlast")
    assert list(LineInput(str(p)).iter_lines()) == ["first   ", "second", "", "last"]


def test_iter_lines_respects_encoding(tmp_path):
    p = tmp_path / "latin.txt"
    p.write_bytes("José\n".encode("latin-1"))
    assert list(LineInput(str(p), encoding="latin-1").iter_lines()) == ["José"]


def test_iter_lines_replaces_undecodable_bytes(tmp_path):
    p = tmp_path / "bad.txt"
    p.write_bytes(b"ab\xffcd\n")
    assert list(LineInput(str(p)).iter_lines()) == ["ab�cd"]
