"""
数据模型定义
"""

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, JSON
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _iso(value):
    return value.isoformat() if value else None


class VerifiedToken(Base):
    """通过安全评分的代币"""

    __tablename__ = "verified_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    contract_address = Column(String(64), unique=True, nullable=False, index=True)
    token_name = Column(String(255), nullable=False)
    token_symbol = Column(String(50), nullable=False)
    chain = Column(String(50), nullable=False, default="solana")
    launch_time = Column(DateTime, nullable=False, index=True)
    current_price = Column(String(64))
    market_cap = Column(Float)
    liquidity_usd = Column(Float)
    volume_24h = Column(Float)
    price_change_24h = Column(Float)
    liquidity_locked = Column(Boolean, default=False)
    liquidity_lock_duration_months = Column(Integer)
    ownership_renounced = Column(Boolean, default=False)
    contract_verified = Column(Boolean, default=False)
    honeypot_safe = Column(Boolean, default=False)
    buy_tax = Column(String(16))
    sell_tax = Column(String(16))
    safety_score = Column(Integer, default=0)
    safety_reasons = Column(JSON, default=list)
    risk_warnings = Column(JSON, default=list)
    image_url = Column(String(1024))
    dexscreener_url = Column(String(1024))
    solscan_url = Column(String(1024))
    rugcheck_url = Column(String(1024))
    twitter_url = Column(String(1024))
    telegram_url = Column(String(1024))
    website_url = Column(String(1024))
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "contract_address": self.contract_address,
            "token_name": self.token_name,
            "token_symbol": self.token_symbol,
            "chain": self.chain,
            "launch_time": _iso(self.launch_time),
            "current_price": self.current_price,
            "market_cap": self.market_cap,
            "liquidity_usd": self.liquidity_usd,
            "volume_24h": self.volume_24h,
            "price_change_24h": self.price_change_24h,
            "liquidity_locked": self.liquidity_locked,
            "liquidity_lock_duration_months": self.liquidity_lock_duration_months,
            "ownership_renounced": self.ownership_renounced,
            "contract_verified": self.contract_verified,
            "honeypot_safe": self.honeypot_safe,
            "buy_tax": self.buy_tax,
            "sell_tax": self.sell_tax,
            "safety_score": self.safety_score,
            "safety_reasons": list(self.safety_reasons or []),
            "risk_warnings": list(self.risk_warnings or []),
            "image_url": self.image_url,
            "dexscreener_url": self.dexscreener_url,
            "solscan_url": self.solscan_url,
            "rugcheck_url": self.rugcheck_url,
            "twitter_url": self.twitter_url,
            "telegram_url": self.telegram_url,
            "website_url": self.website_url,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


class FailedToken(Base):
    """未通过评分的代币（仅审计用）"""

    __tablename__ = "failed_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    contract_address = Column(String(64), nullable=False, index=True)
    token_name = Column(String(255))
    token_symbol = Column(String(50))
    failure_reasons = Column(JSON, default=list)
    created_at = Column(DateTime, default=utcnow, index=True)

    def to_dict(self):
        return {
            "id": self.id,
            "contract_address": self.contract_address,
            "token_name": self.token_name,
            "token_symbol": self.token_symbol,
            "failure_reasons": list(self.failure_reasons or []),
            "created_at": _iso(self.created_at),
        }


class ScanLog(Base):
    """扫描记录模型"""

    __tablename__ = "scan_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    scan_type = Column(String(32), nullable=False)
    tokens_scanned = Column(Integer, default=0)
    tokens_passed = Column(Integer, default=0)
    tokens_failed = Column(Integer, default=0)
    error_message = Column(String(1024))
    created_at = Column(DateTime, default=utcnow, index=True)

    def to_dict(self):
        return {
            "id": self.id,
            "scan_type": self.scan_type,
            "tokens_scanned": self.tokens_scanned,
            "tokens_passed": self.tokens_passed,
            "tokens_failed": self.tokens_failed,
            "error_message": self.error_message,
            "created_at": _iso(self.created_at),
        }
