import json

from ptphotogallery.ptphotogallery import main

from tests.conftest import write_image


def test_cli_writes_manifest_under_project_root(tmp_path):
    write_image(tmp_path / "photos" / "a.jpg", size=(40, 20), mtime_ms=2_000)
    write_image(tmp_path / "photos" / "nested" / "b.png", size=(10, 10), mtime_ms=1_000)

    code = main(["--root", str(tmp_path), "--quiet"])

    assert code == 0
    entries = json.loads((tmp_path / "gallery.json").read_text(encoding="utf-8"))
    assert entries == [
        {"src": "photos/a.jpg", "alt": "a", "w": 40, "h": 20},
        {"src": "photos/nested/b.png", "alt": "b", "w": 10, "h": 10},
    ]


def test_cli_missing_photos_dir_is_not_fatal(tmp_path):
    code = main(["--root", str(tmp_path), "--quiet"])

    assert code == 0
    assert (tmp_path / "gallery.json").read_text(encoding="utf-8") == "[]\n"


def test_cli_custom_paths(tmp_path):
    write_image(tmp_path / "albums" / "x.jpg")

    code = main(["-r", str(tmp_path), "-p", "albums", "-o", "public/gallery.json", "-q"])

    assert code == 0
    entries = json.loads((tmp_path / "public" / "gallery.json").read_text(encoding="utf-8"))
    assert [e["src"] for e in entries] == ["albums/x.jpg"]


def test_cli_unwritable_manifest_is_fatal(tmp_path):
    write_image(tmp_path / "photos" / "a.jpg")
    (tmp_path / "gallery.json").mkdir()

    assert main(["--root", str(tmp_path), "--quiet"]) == 99


def test_cli_json_output(tmp_path, capsys):
    write_image(tmp_path / "photos" / "a.jpg")

    code = main(["--root", str(tmp_path), "--json"])

    assert code == 0
    result = json.loads(capsys.readouterr().out)
    assert result["results"]["properties"]["totalImages"] == 1
    node_types = {node["type"] for node in result["results"]["nodes"]}
    assert {"imageScan", "metadataExtraction", "manifestWrite"} <= node_types


def test_cli_prints_summary_once(tmp_path, capsys):
    write_image(tmp_path / "photos" / "a.jpg")

    assert main(["--root", str(tmp_path)]) == 0

    out = capsys.readouterr().out
    assert out.count("Generated gallery.json with 1 images") == 1
    assert out.count("Output:") == 1
