"""
交易对 + 评分结果 -> 已验证代币记录
"""

from datetime import datetime, timezone
from typing import Dict, Any, Optional

from config import TARGET_CHAIN
from services.errors import MalformedPairError
from services.safety import SafetyResult
from services.schemas import TradingPair


def solscan_url(address: str) -> str:
    return f"https://solscan.io/token/{address}"


def rugcheck_url(address: str) -> str:
    return f"https://rugcheck.xyz/tokens/{address}"


def launch_time(pair: TradingPair) -> Optional[datetime]:
    if pair.pair_created_at is None:
        return None
    return datetime.fromtimestamp(pair.pair_created_at / 1000, tz=timezone.utc).replace(tzinfo=None)


def validate_pair(pair: TradingPair):
    """入库前检查必要字段"""
    missing = [
        name for name, value in (
            ("name", pair.base_name),
            ("symbol", pair.base_symbol),
            ("pairCreatedAt", pair.pair_created_at),
        )
        if value is None
    ]
    if missing:
        raise MalformedPairError(f"交易对 {pair.base_address} 缺少字段: {', '.join(missing)}")


def build_token_record(
    pair: TradingPair,
    result: SafetyResult,
    contract_address: Optional[str] = None,
    chain: Optional[str] = None,
    strict: bool = True,
) -> Dict[str, Any]:
    """生成 VerifiedToken 字段

    strict 用于入库：缺少必要字段抛出 MalformedPairError，风险提示只在查询结果中返回
    """
    if strict:
        validate_pair(pair)
    address = contract_address or pair.base_address
    return {
        "contract_address": address,
        "token_name": pair.base_name,
        "token_symbol": pair.base_symbol,
        "chain": chain or TARGET_CHAIN,
        "launch_time": launch_time(pair),
        "current_price": pair.price_usd,
        "market_cap": pair.fdv,
        "liquidity_usd": pair.liquidity_usd,
        "volume_24h": pair.volume_24h,
        "price_change_24h": pair.price_change_24h,
        "liquidity_locked": result.liquidity_locked,
        "liquidity_lock_duration_months": result.lock_duration_months,
        "ownership_renounced": result.ownership_renounced,
        "contract_verified": result.contract_verified,
        "honeypot_safe": result.honeypot_safe,
        "buy_tax": str(result.buy_tax),
        "sell_tax": str(result.sell_tax),
        "safety_score": result.score,
        "safety_reasons": list(result.reasons),
        "risk_warnings": [] if strict else list(result.warnings),
        "image_url": pair.image_url,
        "dexscreener_url": pair.url,
        "solscan_url": solscan_url(address),
        "rugcheck_url": rugcheck_url(address),
        "twitter_url": pair.twitter_url,
        "telegram_url": pair.telegram_url,
        "website_url": pair.website_url,
    }


def market_update(pair: TradingPair, existing: Dict[str, Any]) -> Dict[str, Any]:
    """重复发现时只刷新行情字段，评分和安全标记保持首次结果"""
    data = {
        "current_price": pair.price_usd,
        "market_cap": pair.fdv,
        "liquidity_usd": pair.liquidity_usd,
        "volume_24h": pair.volume_24h,
        "price_change_24h": pair.price_change_24h,
    }
    if not existing.get("image_url") and pair.image_url:
        data["image_url"] = pair.image_url
    return data
