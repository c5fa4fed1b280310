import pytest

from devtemplates.errors import DestinationExistsError, TemplateNotFoundError
from devtemplates.util.paths import copy_file, copy_tree, ensure_dir


def test_ensure_dir(tmp_path):
    d = tmp_path / "subdir" / "nested"
    assert not d.exists()
    ensure_dir(d)
    assert d.is_dir()
    ensure_dir(d)  # idempotent


def test_copy_file_into_empty_destination_is_byte_identical(tmp_path):
    src = tmp_path / "src.md"
    src.write_bytes(b"line one\r\nline two\n\xe2\x9c\x85\n")
    dest = tmp_path / "out" / "nested" / "dest.md"

    overwritten = copy_file(src, dest)

    assert overwritten is False
    assert dest.read_bytes() == src.read_bytes()


def test_copy_file_refuses_existing_destination(tmp_path):
    src = tmp_path / "src.md"
    src.write_text("template", encoding="utf-8")
    dest = tmp_path / "dest.md"
    dest.write_text("Modified", encoding="utf-8")

    with pytest.raises(DestinationExistsError) as exc_info:
        copy_file(src, dest)

    assert exc_info.value.dest == dest
    assert dest.read_text(encoding="utf-8") == "Modified"


def test_copy_file_force_overwrites(tmp_path):
    src = tmp_path / "src.md"
    src.write_text("template v2", encoding="utf-8")
    dest = tmp_path / "dest.md"
    dest.write_text("Modified", encoding="utf-8")

    assert copy_file(src, dest, force=True) is True
    assert dest.read_text(encoding="utf-8") == "template v2"


def test_copy_file_missing_source(tmp_path):
    dest = tmp_path / "dest.md"
    with pytest.raises(TemplateNotFoundError):
        copy_file(tmp_path / "nope.md", dest)
    assert not dest.exists()


def _make_tree(root):
    (root / "sub").mkdir(parents=True)
    (root / "a.txt").write_text("a", encoding="utf-8")
    (root / "sub" / "b.txt").write_text("b", encoding="utf-8")


def test_copy_tree(tmp_path):
    src = tmp_path / "src"
    _make_tree(src)
    dest = tmp_path / "dest"

    written = copy_tree(src, dest)

    assert written == [dest / "a.txt", dest / "sub" / "b.txt"]
    assert (dest / "sub" / "b.txt").read_text(encoding="utf-8") == "b"


def test_copy_tree_guard_and_force(tmp_path):
    src = tmp_path / "src"
    _make_tree(src)
    dest = tmp_path / "dest"
    copy_tree(src, dest)
    (dest / "a.txt").write_text("local edit", encoding="utf-8")
    (dest / "extra.txt").write_text("keep me", encoding="utf-8")

    with pytest.raises(DestinationExistsError):
        copy_tree(src, dest)
    assert (dest / "a.txt").read_text(encoding="utf-8") == "local edit"

    copy_tree(src, dest, force=True)
    assert (dest / "a.txt").read_text(encoding="utf-8") == "a"
    assert (dest / "extra.txt").read_text(encoding="utf-8") == "keep me"


def test_copy_tree_missing_source(tmp_path):
    with pytest.raises(TemplateNotFoundError):
        copy_tree(tmp_path / "missing", tmp_path / "dest")
