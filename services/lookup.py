"""
单代币查询：先查数据库，没有则实时评分（不写入数据库）
"""

import logging
import re
from dataclasses import dataclass
from typing import Dict, Any, Optional

from config import TARGET_CHAIN
from database import DatabaseManager
from services.dexscreener import dex_api
from services.errors import InvalidAddressError, TokenNotFoundError, NoTradingPairError
from services.records import build_token_record
from services.rugcheck import rugcheck_api
from services.safety import score_token

logger = logging.getLogger(__name__)

SOURCE_DATABASE = "database"
SOURCE_LIVE = "live"

# Solana 地址为 32~44 位 base58
ADDRESS_PATTERN = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")


@dataclass
class LookupResult:
    token: Dict[str, Any]
    source: str

    def to_dict(self) -> Dict[str, Any]:
        return {"token": self.token, "source": self.source}


class TokenLookup:
    """代币查询服务"""

    def __init__(self, db_manager: Optional[DatabaseManager] = None, dex_client=None, risk_client=None):
        self.db = db_manager or DatabaseManager()
        self.dex = dex_client or dex_api
        self.rugcheck = risk_client or rugcheck_api

    def lookup(self, contract_address: str) -> LookupResult:
        address = (contract_address or "").strip()
        if not address:
            raise InvalidAddressError("Contract address required")
        if not ADDRESS_PATTERN.match(address):
            raise InvalidAddressError(f"Invalid Solana address: {address}")

        existing = self.db.get_verified_token(address)
        if existing:
            return LookupResult(token=existing, source=SOURCE_DATABASE)

        data = self.dex.get_pairs_response([address])
        if not data:
            raise TokenNotFoundError("Token not found on DEX")

        raw_pairs = [p for p in (data.get("pairs") or []) if isinstance(p, dict)]
        if not raw_pairs:
            raise NoTradingPairError("No trading pair found - token may not have liquidity yet")

        chosen = next((p for p in raw_pairs if p.get("chainId") == TARGET_CHAIN), raw_pairs[0])
        pair = self.dex.parse_pair_data(chosen)
        if pair is None:
            raise NoTradingPairError("No trading pair found - token may not have liquidity yet")

        report = self.rugcheck.get_report(address)
        safety = score_token(pair, report)
        logger.info(f"实时查询 {pair.base_symbol or address}: 评分 {safety.score}")

        token = build_token_record(pair, safety, contract_address=address, chain=pair.chain_id, strict=False)
        token["launch_time"] = token["launch_time"].isoformat() if token["launch_time"] else None
        return LookupResult(token=token, source=SOURCE_LIVE)
