"""
Solana 代币扫描系统配置文件
"""

import os

# 数据库配置
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///token_scanner.db")

# DEXScreener API 配置
DEXSCREENER_BASE_URL = os.getenv("DEXSCREENER_BASE_URL", "https://api.dexscreener.com")

# RugCheck API 配置
RUGCHECK_BASE_URL = os.getenv("RUGCHECK_BASE_URL", "https://api.rugcheck.xyz/v1")

# 请求超时
REQUEST_TIMEOUT = int(os.getenv("REQUEST_TIMEOUT", "30"))

# 代理配置（如需要代理，设置为 {"http": "http://127.0.0.1:7890", "https": "http://127.0.0.1:7890"}）
PROXIES = None

# 目标链
TARGET_CHAIN = "solana"

# 发现源上限（先按链过滤，再截断）
PROFILE_LIMIT = 50
BOOST_LIMIT = 30

# DEXScreener 每次最多查询 30 个地址
PAIR_BATCH_SIZE = 30

# 候选筛选条件
MIN_LIQUIDITY_USD = 500
MIN_VOLUME_24H = 1000
MAX_PAIR_AGE_DAYS = 7
MAX_CANDIDATES = 30

# 安全评分及格线
SAFETY_THRESHOLD = 50

# 定时扫描间隔（秒）
SCAN_INTERVAL_SECONDS = int(os.getenv("SCAN_INTERVAL_SECONDS", "300"))

# 并发拉取风险报告的线程数，1 表示顺序处理
SCAN_MAX_WORKERS = int(os.getenv("SCAN_MAX_WORKERS", "1"))

# Telegram 通知
TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN", "")
TELEGRAM_CHANNEL_ID = os.getenv("TELEGRAM_CHANNEL_ID", "")
TELEGRAM_SCAN_SUMMARY = os.getenv("TELEGRAM_SCAN_SUMMARY", "").lower() in ("1", "true", "yes")

# 管理员密码的 SHA-256 十六进制摘要，未设置时后台操作全部拒绝
ADMIN_PASSWORD_SHA256 = os.getenv("ADMIN_PASSWORD_SHA256", "")

# 日志级别
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
