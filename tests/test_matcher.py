"""Tests for fuzzy title matching and ranking."""

from calledout.core.matcher import fuzzy_match, rank, search
from calledout.core.model import Block, Callout, Range


def _callout(title: str, type_: str = "note", doc_id: str = "d") -> Callout:
    return Callout(
        doc_id=doc_id,
        type=type_,
        title=title,
        block=Block(kind="callout", range=Range(0, 1), start_line=0, end_line=0),
    )


def test_subsequence_match():
    """Characters must appear in order, not necessarily together."""
    score, positions = fuzzy_match("rmb", "Remember")
    assert positions == (0, 4, 5)
    assert score[0] == 0


def test_no_match():
    """Out-of-order or missing characters do not match."""
    assert fuzzy_match("xyz", "Remember") is None
    assert fuzzy_match("mer", "Mr") is None


def test_case_insensitive():
    """Matching ignores case."""
    assert fuzzy_match("REM", "remember") is not None


def test_prefix_outranks_later_occurrence():
    """The same substring scores higher at index 0 than further in."""
    at_start, _ = fuzzy_match("rem", "Remember")
    later, _ = fuzzy_match("rem", "I remember")
    assert at_start > later


def test_contiguous_outranks_gaps():
    """Same start, tighter match wins."""
    tight, _ = fuzzy_match("abc", "abcxx")
    loose, _ = fuzzy_match("abc", "axbxc")
    assert tight > loose


def test_exact_case_breaks_ties():
    """With equal position and gaps, matching case wins."""
    exact, _ = fuzzy_match("Rem", "Remember")
    folded, _ = fuzzy_match("Rem", "remember")
    assert exact > folded


def test_empty_query_returns_first_items_in_order():
    """No query: the first `limit` items, untouched."""
    items = [_callout(t) for t in ["Zeta", "alpha", "Mid"]]
    assert search(items, "", limit=2) == items[:2]


def test_ranking_order():
    """Better matches come first and non-matches are dropped."""
    items = [
        _callout("I remember"),
        _callout("Unrelated"),
        _callout("Remember this"),
        _callout("r-e-m"),
    ]
    titles = [c.title for c in search(items, "rem")]
    assert titles == ["Remember this", "r-e-m", "I remember"]


def test_ties_keep_input_order():
    """Identical scores keep first-seen-first."""
    items = [_callout("Plan", doc_id="a"), _callout("Plan", doc_id="b"), _callout("Plan", doc_id="c")]
    assert [c.doc_id for c in search(items, "pl")] == ["a", "b", "c"]


def test_limit_truncates_after_ranking():
    """The best item survives truncation even if it came last."""
    items = [_callout(f"x rem {i}") for i in range(12)] + [_callout("rem first")]
    results = search(items, "rem", limit=3)
    assert len(results) == 3
    assert results[0].title == "rem first"


def test_default_limit_is_ten():
    """Without a limit at most ten results come back."""
    items = [_callout(f"Note {i}") for i in range(25)]
    assert len(search(items, "note")) == 10


def test_type_is_not_searched():
    """Only the title is searchable."""
    items = [_callout("Foo", type_="warning")]
    assert search(items, "warn") == []


def test_input_not_mutated():
    """Searching leaves the input list as it was."""
    items = [_callout("b"), _callout("ab"), _callout("a")]
    before = list(items)
    search(items, "a")
    assert items == before


def test_rank_reports_positions():
    """Results carry matched positions for highlighting."""
    results = rank([_callout("Remember this")], "rt")
    assert results[0].positions == (0, 9)


def test_fewest_gaps_alignment():
    """Among equally tight alignments, the one with fewer gaps is reported."""
    score, positions = fuzzy_match("abcd", "ab_cbcd")
    assert score == (0, -3, -1, 4)
    assert positions == (0, 1, 5, 6)


def test_alignment_prefers_exact_case():
    """With equal gaps, positions that match case are chosen."""
    score, positions = fuzzy_match("aBc", "abBc")
    assert positions == (0, 2, 3)
    assert score == (0, -1, -1, 3)
