from devtemplates.util.gitignore import ensure_gitignore_entry, has_entry

ENTRY = ".github/copilot-instructions.md"


def test_missing_gitignore_is_not_created(repo):
    res = ensure_gitignore_entry(repo, ENTRY)
    assert res.status == "missing"
    assert not (repo / ".gitignore").exists()
    assert list(repo.iterdir()) == []


def test_entry_added_once(repo):
    gi = repo / ".gitignore"
    gi.write_text("node_modules/\n", encoding="utf-8")

    assert ensure_gitignore_entry(repo, ENTRY).status == "added"
    assert ensure_gitignore_entry(repo, ENTRY).status == "present"

    lines = gi.read_text(encoding="utf-8").splitlines()
    assert lines == ["node_modules/", ENTRY]


def test_entry_appended_on_new_line_without_trailing_newline(repo):
    gi = repo / ".gitignore"
    gi.write_text("node_modules/", encoding="utf-8")

    ensure_gitignore_entry(repo, ENTRY)

    assert gi.read_text(encoding="utf-8") == f"node_modules/\n{ENTRY}\n"


def test_empty_gitignore(repo):
    gi = repo / ".gitignore"
    gi.write_text("", encoding="utf-8")
    ensure_gitignore_entry(repo, ENTRY)
    assert gi.read_text(encoding="utf-8") == f"{ENTRY}\n"


def test_has_entry_matches_whole_lines_only():
    assert has_entry(f"a\n  {ENTRY}  \n", ENTRY)
    assert not has_entry(f"# {ENTRY}\n", ENTRY)
    assert not has_entry(f"{ENTRY}.bak\n", ENTRY)
