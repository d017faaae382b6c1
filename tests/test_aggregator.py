import pytest

from aggregator import aggregate, length_bucket, round_half_up
from errors import InputError, InvalidInputError

from .conftest import make_page


def test_empty_input_raises():
    with pytest.raises(InvalidInputError):
        aggregate([])
    assert issubclass(InvalidInputError, InputError)


@pytest.mark.parametrize(
    "words, bucket",
    [(0, "short"), (299, "short"), (300, "medium"), (999, "medium"), (1000, "long"), (2499, "long"), (2500, "veryLong")],
)
def test_length_bucket_boundaries(words, bucket):
    assert length_bucket(words) == bucket


def test_buckets_and_status_codes_sum_to_total():
    pages = [
        make_page(word_count=w, status_code=s)
        for w, s in [(10, 200), (350, 200), (1200, 404), (3000, 301), (50, 200), (999, 500)]
    ]
    report = aggregate(pages)
    assert report["totalPages"] == 6
    assert sum(report["contentLengthDistribution"].values()) == 6
    assert sum(report["statusCodeDistribution"].values()) == 6
    assert report["statusCodeDistribution"] == {200: 3, 404: 1, 301: 1, 500: 1}
    assert report["contentLengthDistribution"] == {"short": 2, "medium": 2, "long": 1, "veryLong": 1}


def test_four_short_pages_out_of_ten():
    pages = [make_page(word_count=100) for _ in range(4)] + [make_page(word_count=600) for _ in range(6)]
    assert aggregate(pages)["contentLengthDistribution"]["short"] == 4


def test_averages_skip_missing_titles_and_descriptions():
    pages = [
        make_page(title="abcd", meta_description="", word_count=1),
        make_page(title="  ", meta_description="123456", word_count=2),
        make_page(title="ab", meta_description=" ", word_count=2),
    ]
    report = aggregate(pages)
    assert report["pagesWithMissingTitles"] == 1
    assert report["pagesWithMissingDescriptions"] == 2
    assert report["avgTitleLength"] == 3
    assert report["avgDescriptionLength"] == 6
    assert report["avgWordCount"] == 2


def test_no_valid_titles_averages_to_zero():
    report = aggregate([make_page(title="", meta_description="")])
    assert report["avgTitleLength"] == 0
    assert report["avgDescriptionLength"] == 0
    assert report["pagesWithMissingTitles"] == 1


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(37.5) == 38
    assert round_half_up(2.4999) == 2
