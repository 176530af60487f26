from services.candidates import CandidateCriteria, filter_candidates, DAY_MS

from tests.fakes import make_pair

NOW = 1_750_000_000_000


def addresses(pairs):
    return [p.base_address for p in pairs]


def test_liquidity_boundary():
    pairs = [
        make_pair("thin", liquidity_usd=499.0, pair_created_at=NOW),
        make_pair("ok", liquidity_usd=500.0, pair_created_at=NOW),
    ]

    result = filter_candidates(pairs, now=NOW)

    assert addresses(result) == ["ok"]


def test_volume_boundary():
    pairs = [
        make_pair("quiet", volume_24h=999.0, pair_created_at=NOW),
        make_pair("busy", volume_24h=1000.0, pair_created_at=NOW),
    ]

    result = filter_candidates(pairs, now=NOW)

    assert addresses(result) == ["busy"]


def test_age_boundary_is_inclusive():
    pairs = [
        make_pair("stale", pair_created_at=NOW - 7 * DAY_MS - 1),
        make_pair("edge", pair_created_at=NOW - 7 * DAY_MS),
        make_pair("fresh", pair_created_at=NOW - 1000),
    ]

    result = filter_candidates(pairs, now=NOW)

    assert addresses(result) == ["edge", "fresh"]


def test_missing_metrics_are_dropped_but_missing_age_is_kept():
    pairs = [
        make_pair("noliq", liquidity_usd=None, pair_created_at=NOW),
        make_pair("novol", volume_24h=None, pair_created_at=NOW),
        make_pair("noage", pair_created_at=None),
    ]

    result = filter_candidates(pairs, now=NOW)

    assert addresses(result) == ["noage"]


def test_other_chains_are_dropped():
    pairs = [make_pair("eth", chain_id="ethereum", pair_created_at=NOW), make_pair("sol", pair_created_at=NOW)]

    assert addresses(filter_candidates(pairs, now=NOW)) == ["sol"]


def test_dedupe_keeps_first_occurrence():
    first = make_pair("dup", pair_address="pair-one", pair_created_at=NOW)
    second = make_pair("dup", pair_address="pair-two", pair_created_at=NOW)

    result = filter_candidates([first, second], now=NOW)

    assert len(result) == 1
    assert result[0].pair_address == "pair-one"


def test_dedupe_ignores_pairs_that_failed_the_filter():
    rejected = make_pair("dup", pair_address="pair-thin", liquidity_usd=10.0, pair_created_at=NOW)
    accepted = make_pair("dup", pair_address="pair-deep", pair_created_at=NOW)

    result = filter_candidates([rejected, accepted], now=NOW)

    assert [p.pair_address for p in result] == ["pair-deep"]


def test_result_is_capped_at_30_in_order():
    pairs = [make_pair(f"t{i}", pair_created_at=NOW) for i in range(40)]

    result = filter_candidates(pairs, now=NOW)

    assert addresses(result) == [f"t{i}" for i in range(30)]


def test_custom_criteria():
    criteria = CandidateCriteria(min_liquidity_usd=10_000, max_candidates=1)
    pairs = [
        make_pair("a", liquidity_usd=9_999.0, pair_created_at=NOW),
        make_pair("b", liquidity_usd=20_000.0, pair_created_at=NOW),
        make_pair("c", liquidity_usd=30_000.0, pair_created_at=NOW),
    ]

    assert addresses(filter_candidates(pairs, criteria, now=NOW)) == ["b"]
