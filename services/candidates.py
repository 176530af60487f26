"""
候选代币筛选

规则按顺序执行：
1. 只保留目标链
2. 流动性 >= 500 USD
3. 24h 成交量 >= 1000 USD
4. 交易对创建时间在 7 天内（缺少创建时间的保留，后续按数据不完整处理）
5. 按基础代币地址去重，先出现的优先
6. 每轮最多 30 个
"""

import logging
import time
from dataclasses import dataclass
from typing import List, Optional, Iterable

from config import TARGET_CHAIN, MIN_LIQUIDITY_USD, MIN_VOLUME_24H, MAX_PAIR_AGE_DAYS, MAX_CANDIDATES
from services.schemas import TradingPair

logger = logging.getLogger(__name__)

DAY_MS = 24 * 60 * 60 * 1000


@dataclass
class CandidateCriteria:
    """筛选条件"""
    chain: str = TARGET_CHAIN
    min_liquidity_usd: float = MIN_LIQUIDITY_USD
    min_volume_24h: float = MIN_VOLUME_24H
    max_age_days: float = MAX_PAIR_AGE_DAYS
    max_candidates: int = MAX_CANDIDATES


def now_ms() -> int:
    return int(time.time() * 1000)


def _passes(pair: TradingPair, criteria: CandidateCriteria, oldest_ms: float) -> bool:
    if pair.chain_id != criteria.chain:
        return False
    if pair.liquidity_usd is None or pair.liquidity_usd < criteria.min_liquidity_usd:
        return False
    if pair.volume_24h is None or pair.volume_24h < criteria.min_volume_24h:
        return False
    if pair.pair_created_at is not None and pair.pair_created_at < oldest_ms:
        return False
    return True


def filter_candidates(
    pairs: Iterable[TradingPair],
    criteria: Optional[CandidateCriteria] = None,
    now: Optional[int] = None,
) -> List[TradingPair]:
    """筛选、去重并截断候选交易对"""
    criteria = criteria or CandidateCriteria()
    now = now_ms() if now is None else now
    oldest_ms = now - criteria.max_age_days * DAY_MS

    candidates = []
    seen = set()
    for pair in pairs:
        if not _passes(pair, criteria, oldest_ms):
            continue
        if pair.base_address in seen:
            continue
        seen.add(pair.base_address)
        candidates.append(pair)

    logger.info(f"{len(candidates)} 个交易对符合筛选条件")
    return candidates[:criteria.max_candidates]
