import json

import pytest
from PIL import Image

from thumbgen.batch import generate_thumbnails, output_name, render_thumbnail
from thumbgen.errors import InputError
from thumbgen.settings import Settings
from thumbgen.template import Item, resolve_template


@pytest.fixture
def settings(tmp_path):
    templates = tmp_path / "templates"
    templates.mkdir()
    (templates / "default.json").write_text(
        json.dumps({"effects": {"textureSteps": 10}, "defaults": {"footer": "Chan"}}),
        encoding="utf-8",
    )
    return Settings(
        base_dir=tmp_path,
        templates_dir=templates,
        fonts_dir=tmp_path / "fonts",
        output_dir=tmp_path / "out",
        seed=1,
    )


def write_csv(tmp_path, content):
    path = tmp_path / "rows.csv"
    path.write_text(content, encoding="utf-8")
    return path


def test_generates_one_png_per_titled_row(tmp_path, settings, capsys):
    rows = write_csv(tmp_path, "title,badge\nFirst Video,new\n,skipped\nSecond Video,\n")
    outputs = generate_thumbnails(rows, settings=settings)

    assert [p.name for p in outputs] == ["01-first-video.png", "02-second-video.png"]
    for path in outputs:
        assert path.parent == settings.output_dir
        with Image.open(path) as image:
            assert image.format == "PNG"
            assert image.size == (1280, 720)
    out = capsys.readouterr().out
    assert "THUMBNAIL GENERATOR" in out
    assert "Done. 2 thumbnail(s) generated" in out


def test_limit_and_out_dir(tmp_path, settings):
    rows = write_csv(tmp_path, "title\nA\nB\nC\n")
    outputs = generate_thumbnails(rows, out_dir=tmp_path / "custom", limit=2, settings=settings)
    assert len(outputs) == 2
    assert sorted(p.name for p in (tmp_path / "custom").iterdir()) == ["01-a.png", "02-b.png"]


def test_json_input(tmp_path, settings):
    path = tmp_path / "rows.json"
    path.write_text(json.dumps({"items": [{"title": "From JSON"}]}), encoding="utf-8")
    outputs = generate_thumbnails(path, settings=settings)
    assert [p.name for p in outputs] == ["01-from-json.png"]


def test_same_seed_renders_identical_bytes(tmp_path, settings):
    rows = write_csv(tmp_path, "title\nRepeatable\n")
    first = generate_thumbnails(rows, out_dir=tmp_path / "a", seed=5, settings=settings)[0]
    second = generate_thumbnails(rows, out_dir=tmp_path / "b", seed=5, settings=settings)[0]
    assert first.read_bytes() == second.read_bytes()


def test_no_titled_rows_is_an_input_error(tmp_path, settings):
    rows = write_csv(tmp_path, "title,badge\n,new\n")
    with pytest.raises(InputError, match="No valid rows"):
        generate_thumbnails(rows, settings=settings)
    assert not settings.output_dir.exists()


def test_missing_input_and_template(tmp_path, settings):
    with pytest.raises(FileNotFoundError, match="Input file not found"):
        generate_thumbnails(tmp_path / "missing.csv", settings=settings)

    rows = write_csv(tmp_path, "title\nA\n")
    with pytest.raises(FileNotFoundError, match="Template not found"):
        generate_thumbnails(rows, template_name="nope", settings=settings)


def test_output_name_and_render():
    item = Item(id=1, title="Hello World!")
    assert output_name(item, 3) == "03-hello-world.png"
    assert output_name(Item(id=1, title="!!!"), 12) == "12-thumbnail-12.png"

    png = render_thumbnail(item, resolve_template({"effects": {"textureSteps": 0}}))
    assert png.startswith(b"\x89PNG")


def test_cli_reports_errors(tmp_path, monkeypatch, capsys):
    import generate_thumbnails as cli

    monkeypatch.chdir(tmp_path)
    assert cli.main(["--in", "missing.csv"]) == 1
    assert "Error: Input file not found" in capsys.readouterr().err
