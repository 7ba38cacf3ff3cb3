import json

import pytest

from quick_alias import cli
from quick_alias.services.vault_host import split_front_matter


@pytest.fixture
def vault(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    root = tmp_path / "vault"
    root.mkdir()
    (root / "2024-01-01.md").write_text(
        "Some text [[Project Plan|plan]] more [[Project Plan|Roadmap]]\n", encoding="utf-8"
    )
    (root / "notes.md").write_text("[[Other|o]]\n", encoding="utf-8")
    (root / "Project Plan.md").write_text("---\naliases: [plan]\n---\nbody\n", encoding="utf-8")
    (root / "Other.md").write_text("other\n", encoding="utf-8")
    return root


def _aliases(path):
    metadata, _, _ = split_front_matter(path.read_text(encoding="utf-8"))
    return metadata.get("aliases")


def test_open_updates_linked_note(vault, capsys):
    cli.main(["--vault", str(vault), "open", "2024-01-01.md"])

    assert _aliases(vault / "Project Plan.md") == ["plan", "roadmap"]
    assert "Updated aliases in 1 referenced note(s)." in capsys.readouterr().out


def test_open_non_matching_note_changes_nothing(vault):
    cli.main(["--vault", str(vault), "open", "notes.md"])
    assert _aliases(vault / "Other.md") is None


def test_open_missing_file_exits(vault):
    with pytest.raises(SystemExit) as exc:
        cli.main(["--vault", str(vault), "open", "missing.md"])
    assert exc.value.code == 1


def test_scan_reports_total(vault, capsys):
    cli.main(["--vault", str(vault), "scan"])
    assert capsys.readouterr().out.strip().endswith("Updated aliases in 1 note(s).")


def test_config_set_and_show(vault, capsys):
    cli.main(["--vault", str(vault), "config", "set-pattern", "notes"])
    capsys.readouterr()
    cli.main(["--vault", str(vault), "config", "show"])

    shown = json.loads(capsys.readouterr().out)
    assert shown == {"filePattern": "notes", "showUpdateNotice": True, "debounceMs": 1000}

    cli.main(["--vault", str(vault), "scan"])
    assert _aliases(vault / "Other.md") == ["o"]


def test_config_rejects_bad_pattern(vault, capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["--vault", str(vault), "config", "set-pattern", "[0-9"])
    assert exc.value.code == 1
    assert "Invalid regex" in capsys.readouterr().out


def test_config_rejects_bad_debounce(vault):
    with pytest.raises(SystemExit):
        cli.main(["--vault", str(vault), "config", "set-debounce", "10"])


def test_open_with_relative_vault_path(vault, capsys):
    # cwd is the vault's parent
    cli.main(["--vault", "vault", "open", "2024-01-01.md"])

    assert _aliases(vault / "Project Plan.md") == ["plan", "roadmap"]
    assert "Updated aliases in 1 referenced note(s)." in capsys.readouterr().out
