"""
代币安全评分

固定权重，满分 100：
    权限放弃      25
    LP 锁仓       25
    无高风险项    25
    可见性/流动性 15（流动性 <= 1000 时为 5）
    税率          10（目前没有税率数据，固定通过）

评分 >= 50 视为通过。报告字段缺失按"未知"处理，对应项不得分。
"""

from dataclasses import dataclass, field
from typing import List, Optional

from config import SAFETY_THRESHOLD
from services.schemas import TradingPair, RiskReport

OWNERSHIP_POINTS = 25
LIQUIDITY_LOCK_POINTS = 25
RISK_FLAG_POINTS = 25
VISIBILITY_POINTS = 15
LOW_VISIBILITY_POINTS = 5
TAX_POINTS = 10

LOCKED_PCT_THRESHOLD = 80
HIGH_RUG_RISK_PCT = 50
VISIBILITY_LIQUIDITY_USD = 1000
MAX_ACCEPTABLE_TAX = 10
HIGH_RISK_LEVELS = ("high", "danger")

# 锁仓时长没有数据来源，锁仓时按 6 个月记录
ASSUMED_LOCK_MONTHS = 6


@dataclass
class SafetyResult:
    """评分结果"""
    score: int
    reasons: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    ownership_renounced: bool = False
    liquidity_locked: bool = False
    locked_pct: Optional[float] = None
    honeypot_safe: bool = False
    has_high_risks: bool = False
    contract_verified: bool = True
    buy_tax: float = 0
    sell_tax: float = 0

    @property
    def passed(self) -> bool:
        return self.score >= SAFETY_THRESHOLD

    @property
    def lock_duration_months(self) -> Optional[int]:
        return ASSUMED_LOCK_MONTHS if self.liquidity_locked else None

    def failure_reasons(self) -> List[str]:
        reasons = [f"Safety score {self.score}% below threshold"]
        if self.has_high_risks:
            reasons.append("High-risk indicators found")
        return reasons


def format_pct(value: float) -> str:
    """90.0 -> '90'，95.5 -> '95.5'"""
    value = float(value)
    return str(int(value)) if value.is_integer() else str(value)


def score_token(pair: TradingPair, report: RiskReport) -> SafetyResult:
    """根据交易对和风险报告计算安全评分（纯函数）"""
    score = 0
    reasons = []
    warnings = []
    report_missing = report.is_empty
    if report_missing:
        warnings.append("Risk report unavailable - on-chain checks could not be verified")

    # 1. 铸币/冻结权限
    ownership_renounced = (
        report.authority_known
        and report.mint_authority is None
        and report.freeze_authority is None
    )
    if ownership_renounced:
        score += OWNERSHIP_POINTS
        reasons.append("Mint and freeze authority renounced")
    else:
        if report.mint_authority is not None:
            warnings.append("Mint authority not renounced - supply can be inflated")
        if report.freeze_authority is not None:
            warnings.append("Freeze authority not renounced - holder wallets can be frozen")

    # 2. LP 锁仓
    locked_pct = report.lp_locked_pct
    liquidity_locked = locked_pct is not None and locked_pct >= LOCKED_PCT_THRESHOLD
    if liquidity_locked:
        score += LIQUIDITY_LOCK_POINTS
        reasons.append(f"{format_pct(locked_pct)}% liquidity locked")
    elif locked_pct is not None:
        risk = "high rug risk" if locked_pct < HIGH_RUG_RISK_PCT else "moderate risk"
        warnings.append(f"Only {format_pct(locked_pct)}% liquidity locked - {risk}")
    elif not report_missing:
        warnings.append("Liquidity lock status unknown")

    # 3. 高风险项
    high_risks = [r for r in (report.risks or []) if r.level in HIGH_RISK_LEVELS]
    has_high_risks = bool(high_risks)
    honeypot_safe = report.risks is not None and not has_high_risks
    if honeypot_safe:
        score += RISK_FLAG_POINTS
        reasons.append("No high-risk indicators detected")
    for r in high_risks:
        warnings.append(f"{r.name}: {r.description}")

    # 4. 可见性（能在 DEXScreener 查到即视为可见，低流动性只给少量分数）
    if pair.liquidity_usd is not None and pair.liquidity_usd > VISIBILITY_LIQUIDITY_USD:
        score += VISIBILITY_POINTS
        reasons.append("Contract visible on Dexscreener")
    else:
        score += LOW_VISIBILITY_POINTS
        warnings.append("Very low liquidity - high slippage risk")

    # 5. 税率（暂无数据，固定为 0）
    buy_tax = 0
    sell_tax = 0
    if buy_tax < MAX_ACCEPTABLE_TAX and sell_tax < MAX_ACCEPTABLE_TAX:
        score += TAX_POINTS
        reasons.append("Taxes within acceptable range")

    return SafetyResult(
        score=max(0, min(100, score)),
        reasons=reasons,
        warnings=warnings,
        ownership_renounced=ownership_renounced,
        liquidity_locked=liquidity_locked,
        locked_pct=locked_pct,
        honeypot_safe=honeypot_safe,
        has_high_risks=has_high_risks,
        contract_verified=True,
        buy_tax=buy_tax,
        sell_tax=sell_tax,
    )
