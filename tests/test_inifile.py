import pytest

from tileterm.inifile import update_ini_file
from tileterm.options import parse_options


def write(path, text, prefix=b""):
    path.write_bytes(prefix + text.encode("utf-8"))


def read(path):
    return path.read_bytes().decode("utf-8")


def test_creates_file_with_grouped_property(tmp_path):
    path = tmp_path / "app.ini"
    update_ini_file(path, "bearlibterminal", "window.title", "Hello")
    assert read(path) == "[bearlibterminal]\nwindow: title=Hello\n"


def test_replaces_existing_value(tmp_path):
    path = tmp_path / "app.ini"
    write(path, "[app]\nfoo=old\n")
    update_ini_file(path, "app", "foo", "new")
    assert read(path) == "[app]\nfoo=new\n"


def test_preserves_casing(tmp_path):
    path = tmp_path / "app.ini"
    write(path, "[App]\nFoo=1\n")
    update_ini_file(path, "app", "foo", "2")
    assert read(path) == "[App]\nFoo=2\n"


def test_merges_sub_values(tmp_path):
    path = tmp_path / "app.ini"
    write(path, "[s]\nfont: a.png, size=8x8\n")
    update_ini_file(path, "s", "font.size", "10x10")
    assert read(path) == "[s]\nfont: a.png, size=10x10\n"


def test_empty_value_removes_line(tmp_path):
    path = tmp_path / "app.ini"
    write(path, "[app]\nfoo=1\nbar=2\n")
    update_ini_file(path, "app", "foo", "")
    assert read(path) == "[app]\nbar=2\n"


def test_duplicates_are_removed(tmp_path):
    path = tmp_path / "app.ini"
    write(path, "[app]\nfoo=1\nfoo=2\n")
    update_ini_file(path, "app", "foo", "3")
    assert read(path) == "[app]\nfoo=3\n"


def test_inserts_after_last_property_of_section(tmp_path):
    path = tmp_path / "app.ini"
    write(path, "[a]\nx=1\n\n[b]\ny=2\n")
    update_ini_file(path, "a", "z", "3")
    assert read(path) == "[a]\nx=1\nz=3\n\n[b]\ny=2\n"


def test_appends_new_section_after_blank_line(tmp_path):
    path = tmp_path / "app.ini"
    write(path, "[a]\nx=1\n")
    update_ini_file(path, "b", "y", "2")
    assert read(path) == "[a]\nx=1\n\n[b]\ny=2\n"


@pytest.mark.parametrize("value", ["it's", " padded", "trailing ", "plain"])
def test_quoted_values_round_trip(tmp_path, value):
    path = tmp_path / "app.ini"
    update_ini_file(path, "app", "foo", value)
    line = read(path).splitlines()[1]
    groups = parse_options(line, True)
    assert groups[0].name == "foo"
    assert groups[0].attributes == {"_": value}


def test_quote_escaping(tmp_path):
    path = tmp_path / "app.ini"
    update_ini_file(path, "app", "foo", "it's")
    assert read(path) == "[app]\nfoo='it''s'\n"


def test_crlf_preserved(tmp_path):
    path = tmp_path / "app.ini"
    write(path, "[app]\r\nfoo=1\r\n")
    update_ini_file(path, "app", "bar", "2")
    assert read(path) == "[app]\r\nfoo=1\r\nbar=2\r\n"


def test_utf8_bom_preserved(tmp_path):
    path = tmp_path / "app.ini"
    write(path, "[app]\nfoo=1\n", prefix=b"\xef\xbb\xbf")
    update_ini_file(path, "app", "foo", "2")
    assert path.read_bytes() == b"\xef\xbb\xbf[app]\nfoo=2\n"


def test_utf16_file_rejected(tmp_path):
    path = tmp_path / "app.ini"
    original = b"\xff\xfe[\x00a\x00]\x00"
    path.write_bytes(original)
    with pytest.raises(ValueError):
        update_ini_file(path, "a", "b", "c")
    assert path.read_bytes() == original


def test_comments_and_other_sections_untouched(tmp_path):
    path = tmp_path / "app.ini"
    write(path, "; comment\n[other]\nfoo=9\n[app]\n")
    update_ini_file(path, "app", "foo", "1")
    assert read(path) == "; comment\n[other]\nfoo=9\n[app]\nfoo=1\n"