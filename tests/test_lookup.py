from datetime import datetime

import pytest

from services.dexscreener import DexScreenerAPI
from services.errors import InvalidAddressError, NoTradingPairError, TokenNotFoundError
from services.lookup import TokenLookup
from services.schemas import RiskReport

from tests.fakes import FakeResponse, FakeRiskClient, FakeSession, pair_payload

ADDRESS = "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU"


def make_lookup(db, handler, risk=None):
    session = FakeSession(handler)
    dex = DexScreenerAPI(base_url="https://dex.test", session=session)
    return TokenLookup(db_manager=db, dex_client=dex, risk_client=risk or FakeRiskClient()), session


def pairs_response(*pairs):
    return lambda url: FakeResponse(payload={"pairs": list(pairs)})


def assert_nothing_written(db):
    assert db.get_verified_tokens()["total"] == 0
    assert db.get_failed_tokens() == []
    assert db.get_scan_logs() == []


def test_stored_token_is_returned_without_recomputing(db):
    db.create_verified_token({
        "contract_address": ADDRESS,
        "token_name": "Stored",
        "token_symbol": "STR",
        "launch_time": datetime(2026, 10, 1),
        "safety_score": 75,
    })
    risk = FakeRiskClient()
    lookup, session = make_lookup(db, pairs_response(), risk=risk)

    result = lookup.lookup(ADDRESS)

    assert result.source == "database"
    assert result.token["safety_score"] == 75
    assert session.calls == []
    assert risk.calls == []


def test_live_lookup_scores_without_writing(db):
    risky = RiskReport.from_dict({
        "mintAuthority": "Auth1",
        "freezeAuthority": None,
        "markets": [{"lp": {"lpLockedPct": 20}}],
        "risks": [{"name": "Honeypot", "level": "danger", "description": "sell disabled"}],
    })
    lookup, session = make_lookup(db, pairs_response(pair_payload(ADDRESS)), risk=FakeRiskClient(default=risky))

    result = lookup.lookup(ADDRESS)

    assert result.source == "live"
    token = result.token
    assert token["contract_address"] == ADDRESS
    assert token["safety_score"] == 25
    assert token["risk_warnings"] == [
        "Mint authority not renounced - supply can be inflated",
        "Only 20% liquidity locked - high rug risk",
        "Honeypot: sell disabled",
    ]
    assert token["chain"] == "solana"
    assert isinstance(token["launch_time"], str)
    assert session.calls == [f"https://dex.test/latest/dex/tokens/{ADDRESS}"]
    assert_nothing_written(db)


def test_live_lookup_of_passing_token_still_does_not_write(db):
    lookup, _ = make_lookup(db, pairs_response(pair_payload(ADDRESS)))

    result = lookup.lookup(ADDRESS)

    assert result.token["safety_score"] == 100
    assert result.to_dict()["source"] == "live"
    assert_nothing_written(db)


def test_solana_pair_is_preferred_over_first_pair(db):
    eth = pair_payload(ADDRESS, chain="ethereum", liquidity=999999)
    sol = pair_payload(ADDRESS, chain="solana", liquidity=4321)
    lookup, _ = make_lookup(db, pairs_response(eth, sol))

    token = lookup.lookup(ADDRESS).token

    assert token["chain"] == "solana"
    assert token["liquidity_usd"] == 4321


def test_falls_back_to_first_pair_on_other_chains(db):
    first = pair_payload(ADDRESS, chain="bsc", liquidity=111)
    second = pair_payload(ADDRESS, chain="ethereum", liquidity=222)
    lookup, _ = make_lookup(db, pairs_response(first, second))

    token = lookup.lookup(ADDRESS).token

    assert token["chain"] == "bsc"
    assert token["liquidity_usd"] == 111


def test_failed_request_is_not_found(db):
    lookup, _ = make_lookup(db, lambda url: FakeResponse(status_code=502))

    with pytest.raises(TokenNotFoundError):
        lookup.lookup(ADDRESS)


def test_no_pairs_is_distinct_from_not_found(db):
    lookup, _ = make_lookup(db, lambda url: FakeResponse(payload={"schemaVersion": "1.0.0", "pairs": None}))

    with pytest.raises(NoTradingPairError):
        lookup.lookup(ADDRESS)


@pytest.mark.parametrize("address", ["", "   ", "not-an-address", "0" * 44, "So1"])
def test_invalid_addresses_are_rejected_before_any_request(db, address):
    lookup, session = make_lookup(db, pairs_response())

    with pytest.raises(InvalidAddressError):
        lookup.lookup(address)

    assert session.calls == []
