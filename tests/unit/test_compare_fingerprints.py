# tests/unit/test_compare_fingerprints.py

import pytest

from rivalwatch.core.normalize.compare import compare_fingerprints, text_similarity
from tests.utils import make_fingerprint, pricing_pair


def test_identical_hash_means_unchanged():
    fp = make_fingerprint(prices=("29",))
    other = make_fingerprint(prices=("99",), cleaned_text="something else entirely")
    diff = compare_fingerprints(fp, other)
    assert diff.has_changed is False
    assert diff.pricing_added == () and diff.text_similarity == 1.0


def test_price_change_on_same_plan_is_modified_not_removed():
    old, new = pricing_pair()
    diff = compare_fingerprints(old, new)
    assert diff.has_changed
    assert {p.price for p in diff.pricing_added} == {"39", "99"}
    assert {p.price for p in diff.pricing_modified} >= {"39", "99"}
    # plan names are all "Unknown Plan", so nothing counts as removed
    assert diff.pricing_removed == ()


def test_feature_and_headline_deltas_are_case_insensitive():
    old = make_fingerprint(content_hash="1" * 64, features=("Team Chat", "Exports"), headlines=("Built for teams",))
    new = make_fingerprint(
        content_hash="2" * 64,
        features=("team chat", "AI Insights"),
        headlines=("BUILT FOR TEAMS", "Now with AI"),
    )
    diff = compare_fingerprints(old, new)
    assert [f.title for f in diff.features_added] == ["AI Insights"]
    assert [f.title for f in diff.features_removed] == ["Exports"]
    assert diff.headlines_added == ("Now with AI",)
    assert diff.headlines_removed == ()


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ("", "", 1.0),
        ("a b", "", 0.0),
        ("a b c d", "A B C D", 1.0),
        ("a b c d", "a b x y", 2 / 6),
    ],
)
def test_text_similarity_is_jaccard(a, b, expected):
    assert text_similarity(a, b) == pytest.approx(expected)
