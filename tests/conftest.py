import pytest

from thumbgen.surface import THUMB_HEIGHT, THUMB_WIDTH, FontSpec, RenderSurface


class RecordingSurface(RenderSurface):
    """Fake surface: every character is half the font size wide, calls are recorded."""

    def __init__(self, width=THUMB_WIDTH, height=THUMB_HEIGHT, char_width=0.5):
        super().__init__(width, height)
        self.char_width = char_width
        self.shadow = None
        self.calls = []

    def set_font(self, spec):
        self.font_spec = spec
        self.calls.append(("set_font", spec))

    def measure(self, text):
        return len(text) * self.font_spec.size * self.char_width

    def fill_linear_gradient(self, start, end, stops):
        self.calls.append(("linear", start, end, list(stops)))

    def fill_radial_gradient(self, center, radius, inner, outer):
        self.calls.append(("radial", center, radius, inner, outer))

    def fill_rounded_rect(self, x, y, width, height, radius, color):
        self.calls.append(("rounded_rect", x, y, width, height, radius, color))

    def fill_text(self, text, x, y, color, anchor="ls"):
        self.calls.append(("fill_text", text, x, y, color, anchor, self.shadow))

    def stroke_text(self, text, x, y, color, line_width, anchor="ls"):
        self.calls.append(("stroke_text", text, x, y, color, line_width, anchor))

    def set_shadow(self, shadow):
        self.shadow = shadow

    def blit(self, image, x=0, y=0):
        self.calls.append(("blit", image.size, x, y))

    def encode_png(self):
        return b""

    def named(self, name):
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def sized_surface():
    """10px per character."""
    s = RecordingSurface()
    s.set_font(FontSpec("Test", 20))
    return s
