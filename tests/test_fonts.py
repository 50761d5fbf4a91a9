import pytest

from thumbgen import fonts
from thumbgen.surface import FontSpec


@pytest.fixture(autouse=True)
def clean_registry():
    fonts.clear_registered_fonts()
    yield
    fonts.clear_registered_fonts()


def test_candidates_follow_family_list_and_weight():
    assert fonts.font_candidates("Montserrat, Arial, sans-serif", 900) == [
        "Montserrat-Black", "Montserrat", "Arial-Black", "Arial",
    ]
    assert fonts.font_candidates("'Open Sans'", 700) == ["Open Sans-Bold", "Open Sans"]
    assert fonts.font_candidates("sans-serif", 400) == []


def test_register_skips_unreadable_fonts(tmp_path, capsys):
    (tmp_path / "Broken-Black.ttf").write_bytes(b"not a font")
    (tmp_path / "readme.txt").write_text("hello", encoding="utf-8")

    assert fonts.register_fonts(tmp_path) == {}
    assert fonts.registered_fonts() == {}
    assert "WARNING: Skipping font Broken-Black.ttf" in capsys.readouterr().out


def test_register_missing_directory(tmp_path):
    assert fonts.register_fonts(tmp_path / "nope") == {}


def test_unknown_family_still_returns_a_usable_font(capsys):
    font = fonts.get_font(FontSpec("Definitely Not A Real Font", 48, 900))
    assert font.getlength("Hello") > 0
    fonts.get_font(FontSpec("Definitely Not A Real Font", 24, 900))
    assert capsys.readouterr().out.count("not found") == 1
