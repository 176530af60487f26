from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import IntegrityError


def token_data(address, launched=None, **extra):
    data = {
        "contract_address": address,
        "token_name": f"{address} Coin",
        "token_symbol": "TKN",
        "launch_time": launched or datetime(2026, 10, 1, 12, 0),
        "current_price": "0.001",
        "safety_score": 90,
        "safety_reasons": ["Mint and freeze authority renounced"],
    }
    data.update(extra)
    return data


def test_create_and_get_verified_token(db):
    created = db.create_verified_token(token_data("Mint1"))

    fetched = db.get_verified_token("Mint1")

    assert fetched == created
    assert fetched["chain"] == "solana"
    assert fetched["safety_reasons"] == ["Mint and freeze authority renounced"]
    assert db.get_verified_token("Missing") is None


def test_contract_address_is_unique(db):
    db.create_verified_token(token_data("Mint1"))

    with pytest.raises(IntegrityError):
        db.create_verified_token(token_data("Mint1"))

    assert db.get_verified_tokens()["total"] == 1


def test_update_verified_token(db):
    db.create_verified_token(token_data("Mint1"))

    updated = db.update_verified_token("Mint1", {"current_price": "0.002", "liquidity_usd": 7000.0})

    assert updated["current_price"] == "0.002"
    assert updated["liquidity_usd"] == 7000.0
    assert updated["safety_score"] == 90
    assert db.update_verified_token("Missing", {"current_price": "1"}) is None


def test_verified_tokens_are_paginated_newest_launch_first(db):
    base = datetime(2026, 10, 1)
    for i in range(5):
        db.create_verified_token(token_data(f"Mint{i}", launched=base + timedelta(hours=i)))

    first = db.get_verified_tokens(page=1, limit=2)
    third = db.get_verified_tokens(page=3, limit=2)

    assert first["total"] == 5
    assert [t["contract_address"] for t in first["tokens"]] == ["Mint4", "Mint3"]
    assert [t["contract_address"] for t in third["tokens"]] == ["Mint0"]


def test_failed_tokens_are_append_only(db):
    db.create_failed_token({"contract_address": "Bad1", "failure_reasons": ["Safety score 25% below threshold"]})
    db.create_failed_token({"contract_address": "Bad1", "failure_reasons": ["Safety score 40% below threshold"]})

    failed = db.get_failed_tokens()

    assert len(failed) == 2
    assert failed[0]["failure_reasons"] == ["Safety score 40% below threshold"]


def test_scan_logs_newest_first(db):
    db.create_scan_log({"scan_type": "manual", "tokens_scanned": 3, "tokens_passed": 1, "tokens_failed": 2})
    db.create_scan_log({"scan_type": "scheduled", "tokens_scanned": 0, "error_message": "boom"})

    logs = db.get_scan_logs(10)

    assert [log["scan_type"] for log in logs] == ["scheduled", "manual"]
    assert logs[0]["error_message"] == "boom"
    assert logs[1]["tokens_failed"] == 2
