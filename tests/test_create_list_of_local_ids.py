from pathlib import Path

from ar5iv_util.create_list_of_local_ids import main


def _make_corpus(root: Path) -> None:
    (root / "2308" / "2308.12345").mkdir(parents=True)
    (root / "0607" / "math0607467").mkdir(parents=True)
    (root / "0607" / "hep-th0607001").mkdir(parents=True)


def test_main_lists_ids_sorted(tmp_path):
    root = tmp_path / "corpus"
    _make_corpus(root)
    out = tmp_path / "unchecked.txt"
    assert main([str(root), str(out)]) == 0
    lines = out.read_text(encoding="utf-8").splitlines()
    assert lines == ["hep-th/0607001", "math/0607467", "2308.12345"]


def test_main_keeps_existing_list(tmp_path):
    root = tmp_path / "corpus"
    _make_corpus(root)
    out = tmp_path / "unchecked.txt"
    out.write_text("already here\n", encoding="utf-8")
    assert main([str(root), str(out)]) == 0
    assert out.read_text(encoding="utf-8") == "already here\n"


def test_main_on_missing_root_writes_empty_list(tmp_path):
    out = tmp_path / "unchecked.txt"
    assert main([str(tmp_path / "absent"), str(out)]) == 0
    assert out.read_text(encoding="utf-8") == ""