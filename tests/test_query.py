from __future__ import annotations

import pytest

from lattice.io.reader import parse_lattice
from lattice.query import density, format_hits, sorted_hits, unique_words_at_time


@pytest.fixture
def zero_span(make_lattice):
    # nodes 1, 2 and 3 all sit at t=1.0
    return make_lattice(
        [
            (0, 1, "a", 0, 0),
            (1, 2, "uh", 0, 0),
            (1, 3, "uh", 0, 0),
            (2, 3, "um", 0, 0),
            (3, 4, "b", 0, 0),
        ],
        times=[0.0, 1.0, 1.0, 1.0, 2.0],
    )


def test_words_at_time_are_deduplicated(zero_span):
    assert unique_words_at_time(zero_span, 1.0) == {"uh", "um"}


def test_words_at_time_requires_both_endpoints_at_t(zero_span):
    # edges 0->1 and 3->4 touch t=1.0 with one endpoint only
    assert "a" not in unique_words_at_time(zero_span, 1.0)
    assert "b" not in unique_words_at_time(zero_span, 1.0)


def test_words_at_unknown_time_is_empty(zero_span):
    assert unique_words_at_time(zero_span, 0.5) == set()
    assert unique_words_at_time(zero_span, 7.0) == set()


def test_sorted_hits(sample_text):
    lat = parse_lattice(sample_text)
    assert list(sorted_hits(lat, "the")) == pytest.approx([0.25, 0.75])
    assert format_hits(sorted_hits(lat, "the")) == "0.25 0.75"
    assert format_hits(sorted_hits(lat, "cat_sat")) == "1.50"


def test_hits_are_sorted_by_midpoint_not_edge_order(make_lattice):
    lat = make_lattice(
        [(0, 3, "x", 0, 0), (1, 2, "x", 0, 0), (0, 1, "y", 0, 0), (2, 3, "y", 0, 0)],
        times=[0.0, 0.2, 0.4, 3.0],
    )
    assert format_hits(sorted_hits(lat, "x")) == "0.30 1.50"


def test_missing_word_has_no_hits(sample_text):
    lat = parse_lattice(sample_text)
    assert len(sorted_hits(lat, "dog")) == 0
    assert format_hits(sorted_hits(lat, "dog")) == ""


def test_density_counts_non_silence_edges(make_lattice):
    lat = make_lattice(
        [
            (0, 1, "-silence-", 0, 0),
            (1, 2, "one", 0, 0),
            (2, 3, "two_words", 0, 0),
            (1, 3, "three", 0, 0),
        ],
        times=[0.0, 1.0, 3.0, 5.0],
    )
    assert density(lat) == pytest.approx(0.6)


def test_density_with_custom_silence_token(make_lattice):
    lat = make_lattice([(0, 1, "<sil>", 0, 0), (1, 2, "-silence-", 0, 0)], times=[0.0, 1.0, 2.0])
    assert density(lat, silence_token="<sil>") == pytest.approx(0.5)


def test_density_rejects_non_positive_duration(make_lattice):
    lat = make_lattice([(0, 1, "a", 0, 0)], times=[1.0, 1.0])
    with pytest.raises(ValueError, match="undefined"):
        density(lat)
