"""
DEXScreener API 封装
"""

import logging
from typing import List, Dict, Any, Optional, Sequence

import requests

from config import (
    DEXSCREENER_BASE_URL,
    REQUEST_TIMEOUT,
    PROXIES,
    TARGET_CHAIN,
    PROFILE_LIMIT,
    BOOST_LIMIT,
    PAIR_BATCH_SIZE,
)
from services.schemas import TradingPair, to_float

logger = logging.getLogger(__name__)


def chunked(items: Sequence[str], size: int) -> List[List[str]]:
    """按固定大小切分列表"""
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


class DexScreenerAPI:
    """DEXScreener API 客户端"""

    def __init__(self, base_url: str = DEXSCREENER_BASE_URL, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.proxies = PROXIES
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    def _request(self, endpoint: str, params: Optional[Dict] = None):
        """发送 API 请求，失败返回空字典"""
        url = f"{self.base_url}{endpoint}"
        try:
            response = self.session.get(url, params=params, timeout=REQUEST_TIMEOUT, proxies=self.proxies)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            logger.warning(f"DEXScreener 请求失败: {url}, 状态码: {status}")
            return {}
        except requests.exceptions.RequestException as e:
            logger.warning(f"DEXScreener 请求失败: {url}, 错误: {e}")
            return {}
        except ValueError:
            logger.warning(f"DEXScreener 返回内容无法解析: {url}")
            return {}

    # ==================== 代币发现 ====================

    def _latest_addresses(self, endpoint: str, chain: str, limit: int) -> List[str]:
        data = self._request(endpoint)
        if not isinstance(data, list):
            return []
        addresses = [
            item.get("tokenAddress")
            for item in data
            if isinstance(item, dict) and item.get("chainId") == chain and item.get("tokenAddress")
        ]
        return addresses[:limit]

    def get_latest_profiles(self, chain: str = TARGET_CHAIN, limit: int = PROFILE_LIMIT) -> List[str]:
        """最新代币资料"""
        return self._latest_addresses("/token-profiles/latest/v1", chain, limit)

    def get_latest_boosts(self, chain: str = TARGET_CHAIN, limit: int = BOOST_LIMIT) -> List[str]:
        """最新推广代币"""
        return self._latest_addresses("/token-boosts/latest/v1", chain, limit)

    def fetch_discovery_candidates(self, chain: str = TARGET_CHAIN) -> List[str]:
        """合并两个发现源并去重，保持首次出现的顺序"""
        profiles = self.get_latest_profiles(chain)
        logger.info(f"发现 {len(profiles)} 个 {chain} 代币资料")
        boosts = self.get_latest_boosts(chain)
        logger.info(f"发现 {len(boosts)} 个 {chain} 推广代币")

        addresses = list(dict.fromkeys(profiles + boosts))
        logger.info(f"去重后共 {len(addresses)} 个待检查代币")
        return addresses

    # ==================== 交易对 ====================

    def get_pairs_response(self, addresses: Sequence[str]) -> Dict[str, Any]:
        """单批查询交易对的原始响应，最多 30 个地址"""
        if len(addresses) > PAIR_BATCH_SIZE:
            raise ValueError(f"一次最多查询 {PAIR_BATCH_SIZE} 个地址，收到 {len(addresses)} 个")
        if not addresses:
            return {}
        data = self._request(f"/latest/dex/tokens/{','.join(addresses)}")
        return data if isinstance(data, dict) else {}

    def get_pairs(self, addresses: Sequence[str]) -> List[TradingPair]:
        """单批查询交易对"""
        data = self.get_pairs_response(addresses)
        pairs = []
        for raw in data.get("pairs") or []:
            pair = self.parse_pair_data(raw)
            if pair is not None:
                pairs.append(pair)
        return pairs

    def fetch_pairs(self, addresses: Sequence[str]) -> List[TradingPair]:
        """按 30 个一批查询全部地址的交易对"""
        all_pairs = []
        for batch in chunked(addresses, PAIR_BATCH_SIZE):
            all_pairs.extend(self.get_pairs(batch))
        logger.info(f"获取到 {len(all_pairs)} 个交易对")
        return all_pairs

    def parse_pair_data(self, pair: Dict[str, Any]) -> Optional[TradingPair]:
        """解析交易对数据，缺少基础代币地址时返回 None"""
        if not isinstance(pair, dict):
            return None

        base_token = pair.get("baseToken") or {}
        address = base_token.get("address")
        if not address:
            logger.debug(f"跳过缺少基础代币地址的交易对: {pair.get('pairAddress')}")
            return None

        liquidity = pair.get("liquidity") or {}
        volume = pair.get("volume") or {}
        price_change = pair.get("priceChange") or {}
        info = pair.get("info") or {}
        socials = info.get("socials") or []
        websites = info.get("websites") or []

        def social(kind):
            for s in socials:
                if isinstance(s, dict) and s.get("type") == kind and s.get("url"):
                    return s["url"]
            return None

        created_at = pair.get("pairCreatedAt")
        price = pair.get("priceUsd")

        return TradingPair(
            chain_id=pair.get("chainId", ""),
            base_address=address,
            base_name=base_token.get("name") or None,
            base_symbol=base_token.get("symbol") or None,
            pair_address=pair.get("pairAddress"),
            price_usd=str(price) if price not in (None, "") else None,
            liquidity_usd=to_float(liquidity.get("usd")),
            volume_24h=to_float(volume.get("h24")),
            fdv=to_float(pair.get("fdv")),
            pair_created_at=int(to_float(created_at)) if to_float(created_at) is not None else None,
            url=pair.get("url"),
            image_url=info.get("imageUrl"),
            website_url=websites[0].get("url") if websites and isinstance(websites[0], dict) else None,
            twitter_url=social("twitter"),
            telegram_url=social("telegram"),
            price_change_24h=to_float(price_change.get("h24")),
        )


dex_api = DexScreenerAPI()
