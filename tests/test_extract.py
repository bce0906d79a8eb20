import pytest
from bs4 import BeautifulSoup

from core.scraper import ExtractionError, caffeine_level_from_text, parse_tea_page
from core.scraper.extract import (
    extract_caffeine,
    extract_gongfu_parameters,
    extract_steep_times,
    extract_type,
    find_brewing_table,
    product_text,
)

PRODUCT_PAGE = """
<html>
  <head>
    <meta property="og:image" content="https://img.example.com/dragon-well.jpg" />
    <script>var caffeine = "very high caffeine from a script";</script>
  </head>
  <body>
    <h1 class="page-title">
      Dragon Well Green Tea
    </h1>
    <div class="product-info">
      <span class="info-title">Categories:</span>
      <span>Green Tea, Chinese Tea</span>
    </div>
    <p>Low caffeine (about 5% of a cup of coffee).</p>
    <div class="product-description-title">Recommend Brewing Method</div>
    <table>
      <tr><td>Western</td><td>Chinese Gongfu</td></tr>
      <tr><td>Water: 176℉ / 80℃</td><td>185℉ / 85℃</td></tr>
      <tr><td>3g tea per 8oz</td><td>5g Tea</td></tr>
      <tr><td>2-3 minutes</td><td>Steeps: rinse, 20s, 15s, 25s, 30s, 1s, 1200s</td></tr>
    </table>
    <h2>Customer Reviews</h2>
    <p>High caffeine kick, I was up all night!</p>
  </body>
</html>
"""


def soup_of(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def test_parse_tea_page_extracts_everything():
    tea = parse_tea_page(PRODUCT_PAGE, "https://shop.example/dragon-well")
    assert tea == {
        "name": "Dragon Well Green Tea",
        "type": "Green",
        "image": "https://img.example.com/dragon-well.jpg",
        "steepTimes": [15, 20, 25, 30],
        "caffeine": "Low caffeine (about 5% of a cup of coffee)",
        "caffeineLevel": "Low",
        "website": "https://shop.example/dragon-well",
        "brewingTemperature": "185℉ / 85℃",
        "teaWeight": "5g Tea",
    }


def test_parse_tea_page_requires_a_name():
    with pytest.raises(ExtractionError):
        parse_tea_page("<html><body><p>Nothing to see</p></body></html>", "https://shop.example/x")
    with pytest.raises(ExtractionError):
        parse_tea_page("<html><body><h1>Error</h1></body></html>", "https://shop.example/x")


def test_name_falls_back_to_first_h1_and_image_to_gallery():
    html = """
    <html><body>
      <h1>Tie Guan Yin Oolong</h1>
      <img class="gallery-placeholder__image" src="https://img.example.com/tgy.jpg" />
      <p>A classic Oolong from Anxi.</p>
    </body></html>
    """
    tea = parse_tea_page(html, "https://shop.example/tgy")
    assert tea["name"] == "Tie Guan Yin Oolong"
    assert tea["image"] == "https://img.example.com/tgy.jpg"
    assert tea["type"] == "Oolong"
    assert tea["steepTimes"] == []
    assert tea["brewingTemperature"] == ""
    assert tea["caffeine"] == ""
    assert tea["caffeineLevel"] == "Low"


def test_product_text_stops_at_reviews():
    text = product_text(soup_of(PRODUCT_PAGE))
    assert "Chinese Gongfu" in text
    assert "up all night" not in text


def test_type_from_category_block_handles_puer_spelling():
    html = """
    <div><span class="info-title">Categories</span> Ripened Pu-erh Tea, Yunnan</div>
    """
    soup = soup_of(html)
    assert extract_type(soup, soup.get_text(), "Palace Ripe Cake") == "PuEr"


def test_type_needs_name_match_without_category_block():
    soup = soup_of("<p>Pairs well with Black tea or Green tea.</p>")
    assert extract_type(soup, soup.get_text(), "Jasmine Pearls") == ""
    assert extract_type(soup, soup.get_text(), "Golden Black Snail") == "Black"


def test_steep_times_use_first_steeps_cell_only():
    html = """
    <div class="product-description-title">Recommend Brewing</div>
    <table>
      <tr><td>Chinese Gongfu</td><td>Steeps: 10s, 12s</td></tr>
      <tr><td>Steeps: 99s</td></tr>
    </table>
    """
    table = find_brewing_table(soup_of(html))
    assert table is not None
    assert extract_steep_times(table) == [10, 12]
    assert extract_steep_times(None) == []


def test_gongfu_parameters_need_gongfu_in_second_column():
    html = """
    <table>
      <tr><td>Chinese Gongfu</td><td>Western</td></tr>
      <tr><td>185℉ / 85℃</td><td>212℉ / 100℃</td></tr>
    </table>
    """
    table = soup_of(html).find("table")
    assert extract_gongfu_parameters(table) == ("", "")
    assert extract_gongfu_parameters(None) == ("", "")


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Origin: Anhui. Caffeine content: about 20mg per cup.", "content: about 20mg per cup"),
        ("This tea has 40-50 mg caffeine per serving", "40-50 mg caffeine"),
        ("No relevant details at all", ""),
    ],
)
def test_extract_caffeine(text, expected):
    assert extract_caffeine(text) == expected


@pytest.mark.parametrize(
    "text,expected",
    [
        ("less than 10% of coffee", "Low"),
        ("less than 25% of coffee", "Medium"),
        ("less than 30% of coffee", "High"),
        ("about 5% of coffee", "Low"),
        ("about 15%", "Medium"),
        ("roughly 60%", "High"),
        ("high caffeine", "High"),
        ("low caffeine", "Low"),
        ("moderate caffeine", "Medium"),
        ("", "Low"),
    ],
)
def test_caffeine_level_from_text(text, expected):
    assert caffeine_level_from_text(text) == expected
