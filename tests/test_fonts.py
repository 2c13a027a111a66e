from __future__ import annotations

from designrender.fonts import FontCollector, FontInfo, font_link_tags, provider_urls


def test_google_fonts_url_without_italics():
    collector = FontCollector()
    collector.add("Inter", 400, "Regular")
    collector.add("Inter", 700, "Bold")

    assert collector.google_fonts_url() == (
        "https://fonts.googleapis.com/css2?family=Inter:wght@100;200;300;400;500;600;700;800;900&display=swap"
    )


def test_google_fonts_url_keeps_nonstandard_weights_and_family_order():
    collector = FontCollector()
    collector.add("Roboto Mono", 450, "Regular")
    collector.add("Inter", 400, "Regular")

    url = collector.google_fonts_url()

    assert url.index("family=Roboto+Mono") < url.index("family=Inter")
    assert ";450;" in url
    assert len(collector) == 2


def test_empty_collector_has_no_url():
    assert FontCollector().google_fonts_url() is None


def test_font_link_tags_preconnect_then_stylesheets():
    tags = font_link_tags(
        "https://fonts.googleapis.com/css2?family=Inter&display=swap",
        ["https://cdn.example.com/cjk.css"],
    )

    assert tags == [
        '<link rel="preconnect" href="https://fonts.googleapis.com"/>',
        '<link rel="preconnect" href="https://fonts.gstatic.com" crossorigin/>',
        '<link rel="preconnect" href="https://cdn.example.com"/>',
        '<link rel="stylesheet" href="https://fonts.googleapis.com/css2?family=Inter&amp;display=swap"/>',
        '<link rel="stylesheet" href="https://cdn.example.com/cjk.css"/>',
    ]


def test_font_link_tags_without_fonts():
    assert font_link_tags(None) == []


def test_provider_urls_are_optional():
    assert provider_urls([FontInfo("Inter", (400,), ("Regular",))], None) == []


def test_provider_receives_each_font():
    seen = []

    def provider(info):
        seen.append(info.family)
        return [f"https://cdn.example.com/{info.family}.css"]

    fonts = [FontInfo("A", (400,), ()), FontInfo("B", (700,), ())]

    assert provider_urls(fonts, provider) == ["https://cdn.example.com/A.css", "https://cdn.example.com/B.css"]
    assert seen == ["A", "B"]
