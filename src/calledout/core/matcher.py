"""
Fuzzy subsequence matching over callout titles.

A title matches when every query character appears in it, in order,
case-insensitively. Scores compare as tuples, higher first:

    (-start, -gap_total, -gap_count, case_hits)

so an earlier first match wins, then tighter matches, then fewer separate
gaps, then exact-case ones. The reported positions are the alignment that
scores best, not just the leftmost one.
"""

from collections.abc import Sequence

from .model import Callout, MatchResult

DEFAULT_LIMIT = 10

NO_QUERY_SCORE: tuple[int, ...] = (0, 0, 0, 0)


def _align(
    query: str, text: str, folded: list[str], wanted: list[str], start: int, last: int
) -> tuple[int, ...]:
    """
    Positions from ``start`` to ``last`` with the fewest gaps, then the most
    exact-case hits.

    Every such alignment spans the same characters, so the total gap is fixed.
    """
    # best[j] for the current query prefix ending at text[j]: (gaps, -case_hits, positions)
    best: dict[int, tuple[int, int, tuple[int, ...]]] = {
        start: (0, -int(text[start] == query[0]), (start,))
    }
    for i in range(1, len(wanted)):
        step: dict[int, tuple[int, int, tuple[int, ...]]] = {}
        for j in range(start + i, last + 1):
            if folded[j] != wanted[i]:
                continue
            hit = int(text[j] == query[i])
            for k, (gaps, neg_hits, positions) in best.items():
                if k >= j:
                    break
                cand = (gaps + (j - k > 1), neg_hits - hit, positions + (j,))
                # first-seen wins ties, keeping the leftmost alignment
                if j not in step or cand[:2] < step[j][:2]:
                    step[j] = cand
        best = step
    return best[last][2]


def fuzzy_match(query: str, text: str) -> tuple[tuple[int, ...], tuple[int, ...]] | None:
    """
    Match ``query`` against ``text``.

    Returns (score, matched positions) or None when the query is not a
    subsequence of the text.
    """
    if not query:
        return NO_QUERY_SCORE, ()

    folded = [c.lower() for c in text]
    wanted = [c.lower() for c in query]

    # The earliest occurrence of the first character is the only start worth
    # trying: if the greedy walk fails from there it fails from any later one.
    try:
        start = folded.index(wanted[0])
    except ValueError:
        return None

    # The greedy walk finds the earliest possible end, hence the smallest span.
    i = start + 1
    last = start
    for ch in wanted[1:]:
        while i < len(folded) and folded[i] != ch:
            i += 1
        if i == len(folded):
            return None
        last = i
        i += 1

    positions = _align(query, text, folded, wanted, start, last)

    gap_total = 0
    gap_count = 0
    for prev, cur in zip(positions, positions[1:]):
        if cur - prev > 1:
            gap_total += cur - prev - 1
            gap_count += 1

    case_hits = sum(1 for q, p in zip(query, positions) if text[p] == q)

    return (-start, -gap_total, -gap_count, case_hits), tuple(positions)


def rank(items: Sequence[Callout], query: str) -> list[MatchResult]:
    """All matching items, best first; equal scores keep input order."""
    results: list[MatchResult] = []
    for item in items:
        m = fuzzy_match(query, item.title)
        if m is None:
            continue
        score, positions = m
        results.append(MatchResult(callout=item, score=score, positions=positions))
    if query:
        # sorted() is stable, also with reverse=True
        results = sorted(results, key=lambda r: r.score, reverse=True)
    return results


def search(items: Sequence[Callout], query: str, limit: int = DEFAULT_LIMIT) -> list[Callout]:
    """Best ``limit`` callouts for ``query``."""
    if limit <= 0:
        return []
    return [r.callout for r in rank(items, query)[:limit]]
