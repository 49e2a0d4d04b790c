import pytest

from chef_site.utils.text import reading_time, slugify


@pytest.mark.parametrize(
    "title, expected",
    [
        ("Fresh Basil Pesto!", "fresh-basil-pesto"),
        ("  Summer   Menu  2025 ", "summer-menu-2025"),
        ("Braai -- Season", "braai-season"),
        ("Crème Brûlée", "crme-brle"),
        ("!!!", ""),
    ],
)
def test_slugify(title, expected):
    assert slugify(title) == expected


def test_reading_time_rounds_up_at_200_words_per_minute():
    assert reading_time(" ".join(["word"] * 400)) == 2
    assert reading_time(" ".join(["word"] * 401)) == 3


def test_reading_time_is_at_least_one_minute():
    assert reading_time(" ".join(["word"] * 150)) == 1
    assert reading_time("") == 1
