from __future__ import annotations

from phashrank.cli import main
from phashrank.io.corpus import load_corpus


def test_index_then_rank(tmp_path, image_dir, capsys):
    corpus_path = tmp_path / "hashes" / "corpus.txt"

    assert main(["index", str(image_dir), "--out", str(corpus_path)]) == 0
    entries = load_corpus(corpus_path)
    assert [entry.identifier for entry in entries] == ["a.png", "b.jpg"]

    capsys.readouterr()
    assert main(["rank", str(image_dir / "a.png"), "--corpus", str(corpus_path), "-k", "1"]) == 0
    out = capsys.readouterr().out
    assert "1. a.png  0" in out
    assert "b.jpg" not in out


def test_index_strict_and_report(tmp_path, image_dir):
    report_path = tmp_path / "report.json"

    status = main(
        [
            "index",
            str(image_dir),
            "--out",
            str(tmp_path / "corpus.txt"),
            "--report",
            str(report_path),
            "--strict",
        ]
    )

    assert status == 1
    assert report_path.exists()


def test_rank_writes_table(tmp_path, image_dir):
    corpus_path = tmp_path / "corpus.txt"
    table_path = tmp_path / "ranking.csv"
    main(["index", str(image_dir), "--out", str(corpus_path)])

    status = main(
        [
            "rank",
            str(image_dir / "b.jpg"),
            "--corpus",
            str(corpus_path),
            "--out",
            str(table_path),
        ]
    )

    assert status == 0
    assert table_path.read_text(encoding="utf-8").splitlines()[1].startswith("1,b.jpg,0,")


def test_hash_reports_failures(image_dir, capsys):
    status = main(["hash", str(image_dir / "a.png"), str(image_dir / "broken.png")])

    captured = capsys.readouterr()
    assert status == 1
    line = captured.out.strip()
    assert line.startswith("a.png ")
    assert len(line.split()[1]) == 49
    assert "broken.png" in captured.err


def test_hash_respects_policy(image_dir, capsys):
    assert main(["--policy", "no_dc", "hash", str(image_dir / "a.png")]) == 0

    assert len(capsys.readouterr().out.split()[1]) == 63


def test_compare_same_image(image_dir, capsys):
    path = str(image_dir / "a.png")

    assert main(["compare", path, path]) == 0
    assert "distance 0 (match)" in capsys.readouterr().out


def test_invalid_config_exits_with_error(image_dir, capsys):
    status = main(["--smaller-size", "64", "hash", str(image_dir / "a.png")])

    assert status == 2
    assert "[error]" in capsys.readouterr().err


def test_hash_survives_corrupt_header(tmp_path, image_dir, capsys):
    bad = tmp_path / "bad.ppm"
    bad.write_bytes(b"P6\n\xfa 8\n255\n" + bytes(192))

    status = main(["hash", str(bad), str(image_dir / "a.png")])

    captured = capsys.readouterr()
    assert status == 1
    assert captured.out.startswith("a.png ")
    assert "bad.ppm" in captured.err
