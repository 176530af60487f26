"""
Telegram 频道通知
"""

import logging
from datetime import datetime
from typing import Dict, Any, Optional

import requests

from config import TELEGRAM_BOT_TOKEN, TELEGRAM_CHANNEL_ID, REQUEST_TIMEOUT, PROXIES

logger = logging.getLogger(__name__)


def format_number(num) -> str:
    """格式化金额"""
    try:
        n = float(num)
    except (TypeError, ValueError):
        return "N/A"
    if not n:
        return "N/A"
    if n >= 1_000_000_000:
        return f"${n / 1_000_000_000:.2f}B"
    if n >= 1_000_000:
        return f"${n / 1_000_000:.2f}M"
    if n >= 1_000:
        return f"${n / 1_000:.2f}K"
    return f"${n:.2f}"


def format_price(price) -> str:
    try:
        p = float(price)
    except (TypeError, ValueError):
        return "N/A"
    if not p:
        return "N/A"
    if p < 0.0001:
        return f"${p:.2e}"
    return f"${p:.6f}"


def format_token_alert(token: Dict[str, Any]) -> str:
    """新代币通知文本（Markdown）"""
    score = token.get("safety_score") or 0
    if score >= 75:
        indicator = "[SAFE]"
    elif score >= 50:
        indicator = "[CAUTION]"
    else:
        indicator = "[RISK]"

    change = token.get("price_change_24h")
    if change is not None:
        change = float(change)
        change_str = f"{'[UP]' if change >= 0 else '[DOWN]'} {'+' if change >= 0 else ''}{change:.2f}%"
    else:
        change_str = "N/A"

    lines = [
        "--- NEW TOKEN VERIFIED ---",
        "",
        f"*{token.get('token_symbol')}* - {token.get('token_name')}",
        "",
        f"{indicator} Safety Score: *{score}%*",
        "",
        f"Price: {format_price(token.get('current_price'))} {change_str}",
        f"Market Cap: {format_number(token.get('market_cap'))}",
        f"Liquidity: {format_number(token.get('liquidity_usd'))}",
        f"24h Volume: {format_number(token.get('volume_24h'))}",
        "",
        "*Safety Analysis:*",
    ]
    lines.extend(f"[OK] {reason}" for reason in token.get("safety_reasons") or [])
    lines += ["", "*Contract:*", f"`{token.get('contract_address')}`", "", "*Links:*"]

    links = []
    for label, key in (
        ("Dexscreener", "dexscreener_url"),
        ("Solscan", "solscan_url"),
        ("RugCheck", "rugcheck_url"),
        ("Twitter", "twitter_url"),
        ("Telegram", "telegram_url"),
        ("Website", "website_url"),
    ):
        if token.get(key):
            links.append(f"[{label}]({token[key]})")
    lines.append(" | ".join(links))
    lines += ["", "_Powered by Solana Scanner_"]
    return "\n".join(lines)


class TelegramNotifier:
    """Telegram 通知，未配置 token 或频道时不发送"""

    def __init__(
        self,
        bot_token: str = TELEGRAM_BOT_TOKEN,
        channel_id: str = TELEGRAM_CHANNEL_ID,
        session: Optional[requests.Session] = None,
    ):
        self.bot_token = bot_token
        self.channel_id = channel_id
        self.session = session or requests.Session()
        if not self.enabled:
            logger.info("未配置 Telegram bot token 或频道，通知已关闭")

    @property
    def enabled(self) -> bool:
        return bool(self.bot_token and self.channel_id)

    def _call(self, method: str, payload: Dict[str, Any]) -> bool:
        url = f"https://api.telegram.org/bot{self.bot_token}/{method}"
        try:
            response = self.session.post(url, json=payload, timeout=REQUEST_TIMEOUT, proxies=PROXIES)
            response.raise_for_status()
            return True
        except requests.exceptions.RequestException as e:
            logger.error(f"Telegram {method} 失败: {e}")
            return False

    def notify_new_verified_token(self, token: Dict[str, Any]) -> bool:
        """发送新代币通知，有图片时发图片消息"""
        if not self.enabled:
            return False

        message = format_token_alert(token)
        if token.get("image_url"):
            ok = self._call("sendPhoto", {
                "chat_id": self.channel_id,
                "photo": token["image_url"],
                "caption": message,
                "parse_mode": "Markdown",
            })
        else:
            ok = self._call("sendMessage", {
                "chat_id": self.channel_id,
                "text": message,
                "parse_mode": "Markdown",
                "disable_web_page_preview": False,
            })
        if ok:
            logger.info(f"已发送 {token.get('token_symbol')} 的 Telegram 通知")
        return ok

    def send_scan_summary(self, scanned: int, passed: int, failed: int) -> bool:
        if not self.enabled:
            return False
        message = (
            "--- Scan Complete ---\n\n"
            f"Tokens Scanned: {scanned}\n"
            f"Passed: {passed}\n"
            f"Failed: {failed}\n\n"
            f"_{datetime.now().strftime('%Y-%m-%d %H:%M:%S')}_"
        )
        return self._call("sendMessage", {
            "chat_id": self.channel_id,
            "text": message,
            "parse_mode": "Markdown",
        })

    def test_connection(self) -> bool:
        if not self.enabled:
            return False
        return self._call("sendMessage", {
            "chat_id": self.channel_id,
            "text": "*Solana Scanner Bot Connected*\n\nYou will receive real-time token alerts here.",
            "parse_mode": "Markdown",
        })
