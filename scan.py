"""
命令行入口

    python scan.py run                # 立即扫描一轮
    python scan.py lookup <地址>      # 查询单个代币
    python scan.py schedule           # 定时扫描
    python scan.py tokens --page 1    # 已验证代币列表
    python scan.py notify-test        # 测试 Telegram 推送
"""

import argparse
import json
import logging
import sys
import time

from config import LOG_LEVEL, SCAN_INTERVAL_SECONDS
from database import DatabaseManager
from services.errors import ScannerError, ScanFailedError, TokenLookupError, InvalidAddressError, NoTradingPairError
from services.lookup import TokenLookup
from services.scanner import TokenScanner
from services.scheduler import ScanScheduler
from services.telegram import TelegramNotifier

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _print(data):
    print(json.dumps(data, ensure_ascii=False, indent=2, default=str))


def cmd_run(args, db):
    try:
        result = TokenScanner(db_manager=db).run_scan("manual")
    except ScanFailedError as e:
        _print({"error": str(e), **e.counts})
        return 1
    _print({"success": True, **result.to_dict()})
    return 0


def cmd_lookup(args, db):
    try:
        result = TokenLookup(db_manager=db).lookup(args.address)
    except InvalidAddressError as e:
        _print({"error": str(e), "code": "invalid_address"})
        return 2
    except NoTradingPairError as e:
        _print({"error": str(e), "code": "no_pair"})
        return 2
    except TokenLookupError as e:
        _print({"error": str(e), "code": "not_found"})
        return 2
    _print(result.to_dict())
    return 0


def cmd_schedule(args, db):
    scheduler = ScanScheduler(TokenScanner(db_manager=db), interval=args.interval)
    scheduler.start()
    try:
        while scheduler.running:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("收到中断信号，正在停止...")
    finally:
        scheduler.stop(timeout=60)
    return 0


def cmd_tokens(args, db):
    _print(db.get_verified_tokens(args.page, args.limit))
    return 0


def cmd_notify_test(args, db):
    notifier = TelegramNotifier()
    if not notifier.enabled:
        _print({"error": "Telegram bot token or channel not configured"})
        return 1
    ok = notifier.test_connection()
    _print({"success": ok})
    return 0 if ok else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Solana 代币安全扫描")
    parser.add_argument("--db", default=None, help="数据库 URL，默认使用配置文件")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("run", help="立即扫描一轮").set_defaults(func=cmd_run)

    p = sub.add_parser("lookup", help="查询单个代币")
    p.add_argument("address")
    p.set_defaults(func=cmd_lookup)

    p = sub.add_parser("schedule", help="定时扫描")
    p.add_argument("--interval", type=float, default=SCAN_INTERVAL_SECONDS)
    p.set_defaults(func=cmd_schedule)

    p = sub.add_parser("tokens", help="已验证代币列表")
    p.add_argument("--page", type=int, default=1)
    p.add_argument("--limit", type=int, default=100)
    p.set_defaults(func=cmd_tokens)

    sub.add_parser("notify-test", help="发送 Telegram 测试消息").set_defaults(func=cmd_notify_test)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    db = DatabaseManager(args.db) if args.db else DatabaseManager()
    try:
        return args.func(args, db)
    except ScannerError as e:
        _print({"error": str(e)})
        return 1


if __name__ == "__main__":
    sys.exit(main())
