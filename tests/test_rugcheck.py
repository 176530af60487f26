import requests

from services.rugcheck import RugCheckAPI

from tests.fakes import FakeResponse, FakeSession, SAFE_REPORT_DATA


def make_api(handler):
    session = FakeSession(handler)
    return RugCheckAPI(base_url="https://rug.test/v1", session=session), session


def test_report_is_parsed():
    data = dict(SAFE_REPORT_DATA, risks=[{"name": "Mutable metadata", "level": "WARN", "description": "x"}])
    api, session = make_api(lambda url: FakeResponse(payload=data))

    report = api.get_report("Mint1")

    assert session.calls == ["https://rug.test/v1/tokens/Mint1/report"]
    assert not report.is_empty
    assert report.authority_known
    assert report.mint_authority is None
    assert report.lp_locked_pct == 90
    assert report.markets[0].lp.locked_usd == 4500
    assert report.risks[0].level == "warn"


def test_non_2xx_returns_empty_report():
    api, _ = make_api(lambda url: FakeResponse(status_code=404))

    assert api.get_report("Mint1").is_empty


def test_network_error_returns_empty_report():
    api, _ = make_api(lambda url: requests.exceptions.Timeout("slow"))

    assert api.get_report("Mint1").is_empty


def test_malformed_body_returns_empty_report():
    api, _ = make_api(lambda url: FakeResponse(bad_json=True))
    assert api.get_report("Mint1").is_empty

    api, _ = make_api(lambda url: FakeResponse(payload=["not", "a", "report"]))
    assert api.get_report("Mint1").is_empty


def test_authority_strings_are_kept():
    api, _ = make_api(lambda url: FakeResponse(payload={"mintAuthority": "Auth1", "freezeAuthority": None}))

    report = api.get_report("Mint1")

    assert report.authority_known
    assert report.mint_authority == "Auth1"
    assert report.freeze_authority is None
    assert report.risks is None
    assert report.lp_locked_pct is None
