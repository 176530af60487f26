"""
外部 API 数据结构
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional


def to_float(value) -> Optional[float]:
    """宽松转换为浮点数，失败返回 None"""
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class TradingPair:
    """DEXScreener 交易对快照"""

    chain_id: str
    base_address: str
    base_name: Optional[str] = None
    base_symbol: Optional[str] = None
    pair_address: Optional[str] = None
    price_usd: Optional[str] = None
    liquidity_usd: Optional[float] = None
    volume_24h: Optional[float] = None
    fdv: Optional[float] = None
    pair_created_at: Optional[int] = None
    url: Optional[str] = None
    image_url: Optional[str] = None
    website_url: Optional[str] = None
    twitter_url: Optional[str] = None
    telegram_url: Optional[str] = None
    price_change_24h: Optional[float] = None


@dataclass(frozen=True)
class Risk:
    name: str
    level: str
    description: str = ""


@dataclass(frozen=True)
class LiquidityPool:
    locked_pct: Optional[float] = None
    locked_usd: Optional[float] = None


@dataclass(frozen=True)
class Market:
    lp: Optional[LiquidityPool] = None


@dataclass(frozen=True)
class RiskReport:
    """
    RugCheck 风险报告

    字段缺失表示"未知"：authority_known 标记 mintAuthority / freezeAuthority
    两个键是否都出现在报告中，risks 为 None 表示报告里没有风险列表。
    键存在且值为 null 表示权限已放弃。
    """

    score: Optional[float] = None
    risks: Optional[List[Risk]] = None
    mint_authority: Optional[str] = None
    freeze_authority: Optional[str] = None
    authority_known: bool = False
    markets: List[Market] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return (
            self.score is None
            and self.risks is None
            and not self.authority_known
            and self.mint_authority is None
            and self.freeze_authority is None
            and not self.markets
        )

    @property
    def lp_locked_pct(self) -> Optional[float]:
        """第一个市场的 LP 锁仓比例"""
        if not self.markets or self.markets[0].lp is None:
            return None
        return self.markets[0].lp.locked_pct

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RiskReport":
        """解析 RugCheck 报告，格式不对的部分按未知处理"""
        if not isinstance(data, dict):
            return cls()

        risks = None
        raw_risks = data.get("risks")
        if isinstance(raw_risks, list):
            risks = [
                Risk(
                    name=str(r.get("name", "")),
                    level=str(r.get("level", "")).lower(),
                    description=str(r.get("description", "") or ""),
                )
                for r in raw_risks
                if isinstance(r, dict)
            ]

        markets = []
        for m in data.get("markets") or []:
            if not isinstance(m, dict):
                continue
            lp = m.get("lp")
            if isinstance(lp, dict):
                markets.append(Market(lp=LiquidityPool(
                    locked_pct=to_float(lp.get("lpLockedPct")),
                    locked_usd=to_float(lp.get("lpLockedUSD")),
                )))
            else:
                markets.append(Market())

        return cls(
            score=to_float(data.get("score")),
            risks=risks,
            mint_authority=data.get("mintAuthority") or None,
            freeze_authority=data.get("freezeAuthority") or None,
            authority_known="mintAuthority" in data and "freezeAuthority" in data,
            markets=markets,
        )
