import pytest
import requests

from services.dexscreener import DexScreenerAPI, chunked

from tests.fakes import FakeResponse, FakeSession, pair_payload

BASE = "https://dex.test"


def make_api(handler):
    session = FakeSession(handler)
    return DexScreenerAPI(base_url=BASE, session=session), session


def pair_batches(session):
    return [
        url.rsplit("/", 1)[1].split(",")
        for url in session.calls
        if "/latest/dex/tokens/" in url
    ]


def test_chunked():
    assert chunked(list("abcde"), 2) == [["a", "b"], ["c", "d"], ["e"]]
    assert chunked([], 30) == []


def test_discovery_filters_chain_caps_each_feed_and_dedupes():
    profiles = [{"chainId": "ethereum", "tokenAddress": f"e{i}"} for i in range(3)]
    profiles += [{"chainId": "solana", "tokenAddress": f"p{i}"} for i in range(55)]
    boosts = [{"chainId": "solana", "tokenAddress": "p0"}]
    boosts += [{"chainId": "solana", "tokenAddress": f"b{i}"} for i in range(35)]

    def handler(url):
        if url.endswith("/token-profiles/latest/v1"):
            return FakeResponse(payload=profiles)
        if url.endswith("/token-boosts/latest/v1"):
            return FakeResponse(payload=boosts)
        raise AssertionError(url)

    api, _ = make_api(handler)
    result = api.fetch_discovery_candidates()

    assert result[:50] == [f"p{i}" for i in range(50)]
    assert result[50:] == [f"b{i}" for i in range(29)]
    assert len(result) == len(set(result))


def test_discovery_survives_one_feed_failing():
    def handler(url):
        if "token-profiles" in url:
            return requests.exceptions.ConnectionError("boom")
        return FakeResponse(payload=[{"chainId": "solana", "tokenAddress": "b1"}])

    api, _ = make_api(handler)

    assert api.fetch_discovery_candidates() == ["b1"]


def test_fetch_pairs_chunks_65_addresses_into_30_30_5():
    addresses = [f"addr{i}" for i in range(65)]

    def handler(url):
        batch = url.rsplit("/", 1)[1].split(",")
        return FakeResponse(payload={"pairs": [pair_payload(a) for a in batch]})

    api, session = make_api(handler)
    pairs = api.fetch_pairs(addresses)

    assert [len(b) for b in pair_batches(session)] == [30, 30, 5]
    assert [p.base_address for p in pairs] == addresses


def test_failed_batch_degrades_to_empty():
    addresses = [f"addr{i}" for i in range(35)]

    def handler(url):
        batch = url.rsplit("/", 1)[1].split(",")
        if "addr0" in batch:
            return FakeResponse(status_code=500)
        return FakeResponse(payload={"pairs": [pair_payload(a) for a in batch]})

    api, _ = make_api(handler)
    pairs = api.fetch_pairs(addresses)

    assert [p.base_address for p in pairs] == [f"addr{i}" for i in range(30, 35)]


def test_get_pairs_rejects_oversized_batch():
    api, _ = make_api(lambda url: FakeResponse(payload={"pairs": []}))

    with pytest.raises(ValueError):
        api.get_pairs([f"a{i}" for i in range(31)])


def test_get_pairs_handles_null_pairs_and_bad_json():
    api, _ = make_api(lambda url: FakeResponse(payload={"schemaVersion": "1.0.0", "pairs": None}))
    assert api.get_pairs(["x"]) == []

    api, _ = make_api(lambda url: FakeResponse(bad_json=True))
    assert api.get_pairs(["x"]) == []


def test_parse_pair_data():
    api, _ = make_api(lambda url: FakeResponse())
    raw = pair_payload(
        "Mint1",
        info={
            "imageUrl": "https://img.test/mint1.png",
            "websites": [{"label": "Website", "url": "https://mint1.io"}],
            "socials": [
                {"type": "telegram", "url": "https://t.me/mint1"},
                {"type": "twitter", "url": "https://x.com/mint1"},
            ],
        },
    )

    pair = api.parse_pair_data(raw)

    assert pair.base_address == "Mint1"
    assert pair.chain_id == "solana"
    assert pair.price_usd == "0.0012"
    assert pair.liquidity_usd == 5000.0
    assert pair.volume_24h == 10000.0
    assert pair.fdv == 120000.0
    assert pair.price_change_24h == -3.25
    assert pair.image_url == "https://img.test/mint1.png"
    assert pair.website_url == "https://mint1.io"
    assert pair.twitter_url == "https://x.com/mint1"
    assert pair.telegram_url == "https://t.me/mint1"


def test_parse_pair_data_tolerates_missing_sections():
    api, _ = make_api(lambda url: FakeResponse())
    raw = {"chainId": "solana", "baseToken": {"address": "Bare"}}

    pair = api.parse_pair_data(raw)

    assert pair.base_address == "Bare"
    assert pair.liquidity_usd is None
    assert pair.volume_24h is None
    assert pair.pair_created_at is None
    assert pair.base_symbol is None
    assert api.parse_pair_data({"chainId": "solana", "baseToken": {}}) is None
