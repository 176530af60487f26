"""
代币扫描流程

每一轮：
1. 从 DEXScreener 两个发现源获取代币地址
2. 按 30 个一批获取交易对数据
3. 筛选候选交易对
4. 逐个处理：已存在的只刷新行情；新代币拉取 RugCheck 报告并评分，
   通过的写入 verified_tokens 并发送通知，未通过的写入 failed_tokens
5. 无论成功与否都写入一条 scan_logs

单个代币出错只计为失败，不影响其他代币；数据库连接失败会中止整轮扫描。
同一时间只允许一轮扫描。
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import List, Dict, Any, Optional

from sqlalchemy.exc import IntegrityError, OperationalError, InterfaceError

from config import SCAN_MAX_WORKERS, TELEGRAM_SCAN_SUMMARY
from database import DatabaseManager
from services.candidates import CandidateCriteria, filter_candidates
from services.dexscreener import dex_api
from services.errors import ScanInProgressError, ScanFailedError
from services.records import build_token_record, market_update, validate_pair
from services.rugcheck import rugcheck_api
from services.safety import score_token
from services.schemas import TradingPair
from services.telegram import TelegramNotifier

logger = logging.getLogger(__name__)

PASSED = "passed"
FAILED = "failed"
UPDATED = "updated"
SKIPPED = "skipped"

# 数据库不可用，整轮中止
FATAL_ERRORS = (OperationalError, InterfaceError)


@dataclass
class ScanResult:
    """一轮扫描的统计"""
    scanned: int = 0
    passed: int = 0
    failed: int = 0
    cancelled: bool = False

    def record(self, outcome: str):
        self.scanned += 1
        if outcome == PASSED:
            self.passed += 1
        elif outcome == FAILED:
            self.failed += 1

    def record_aborted(self):
        """致命错误中止的候选只计入扫描数"""
        self.scanned += 1

    def counts(self) -> Dict[str, int]:
        return {"scanned": self.scanned, "passed": self.passed, "failed": self.failed}

    def to_dict(self) -> Dict[str, Any]:
        return {**self.counts(), "cancelled": self.cancelled}


class TokenScanner:
    """代币扫描器"""

    def __init__(
        self,
        db_manager: Optional[DatabaseManager] = None,
        dex_client=None,
        risk_client=None,
        notifier=None,
        criteria: Optional[CandidateCriteria] = None,
        max_workers: int = SCAN_MAX_WORKERS,
        send_summary: bool = TELEGRAM_SCAN_SUMMARY,
    ):
        self.db = db_manager or DatabaseManager()
        self.dex = dex_client or dex_api
        self.rugcheck = risk_client or rugcheck_api
        self.notifier = notifier if notifier is not None else TelegramNotifier()
        self.criteria = criteria or CandidateCriteria()
        self.max_workers = max(1, max_workers)
        self.send_summary = send_summary
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    def run_scan(self, scan_type: str = "manual", cancel_event: Optional[threading.Event] = None) -> ScanResult:
        """执行一轮扫描，已有扫描在运行时抛出 ScanInProgressError"""
        if not self._lock.acquire(blocking=False):
            raise ScanInProgressError()
        try:
            return self._run_cycle(scan_type, cancel_event or threading.Event())
        finally:
            self._lock.release()

    def _run_cycle(self, scan_type: str, cancel_event: threading.Event) -> ScanResult:
        result = ScanResult()
        logger.info(f"开始扫描 ({scan_type})...")

        try:
            addresses = self.dex.fetch_discovery_candidates()
            pairs = self.dex.fetch_pairs(addresses)
            candidates = filter_candidates(pairs, self.criteria)

            if self.max_workers > 1:
                self._process_parallel(candidates, result, cancel_event)
            else:
                self._process_sequential(candidates, result, cancel_event)
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.error(f"扫描中止: {message}")
            self._save_failed_log(scan_type, result, message)
            raise ScanFailedError(message, result.counts()) from e

        error_message = "Scan cancelled" if result.cancelled else None
        try:
            self.db.create_scan_log(self._log_data(scan_type, result, error_message))
        except Exception as e:
            logger.error(f"扫描记录写入失败: {e}")
            raise ScanFailedError(f"Failed to write scan log: {e}", result.counts()) from e

        logger.info(f"扫描完成: 扫描 {result.scanned} 个, 通过 {result.passed} 个, 失败 {result.failed} 个")
        if self.send_summary:
            self._send_summary(result)
        return result

    # ==================== 候选处理 ====================

    def _process_sequential(self, candidates: List[TradingPair], result: ScanResult, cancel_event: threading.Event):
        for pair in candidates:
            if cancel_event.is_set():
                logger.warning("扫描已取消，跳过剩余代币")
                result.cancelled = True
                break
            try:
                outcome = self._handle_candidate(pair)
            except FATAL_ERRORS:
                result.record_aborted()
                raise
            result.record(outcome)

    def _process_parallel(self, candidates: List[TradingPair], result: ScanResult, cancel_event: threading.Event):
        aborted = threading.Event()

        def guarded(pair):
            if cancel_event.is_set() or aborted.is_set():
                return SKIPPED
            return self._handle_candidate(pair)

        fatal = None
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [executor.submit(guarded, pair) for pair in candidates]
            # 出现致命错误后不再开始新的候选，已在处理的候选照常计数
            for future in as_completed(futures):
                try:
                    outcome = future.result()
                except FATAL_ERRORS as e:
                    result.record_aborted()
                    if fatal is None:
                        fatal = e
                        aborted.set()
                    continue
                if outcome == SKIPPED:
                    if not aborted.is_set():
                        result.cancelled = True
                    continue
                result.record(outcome)

        if fatal is not None:
            raise fatal
        if result.cancelled:
            logger.warning("扫描已取消，跳过剩余代币")

    def _handle_candidate(self, pair: TradingPair) -> str:
        """处理单个候选，非致命错误计为失败"""
        try:
            return self._process_candidate(pair)
        except FATAL_ERRORS:
            raise
        except Exception as e:
            logger.error(f"处理 {pair.base_symbol or pair.base_address} 出错: {e}")
            return FAILED

    def _process_candidate(self, pair: TradingPair) -> str:
        address = pair.base_address
        symbol = pair.base_symbol or address

        existing = self.db.get_verified_token(address)
        if existing:
            logger.info(f"{symbol} 已存在，刷新行情数据")
            self.db.update_verified_token(address, market_update(pair, existing))
            return UPDATED

        validate_pair(pair)
        logger.info(f"正在分析 {symbol} ({address})...")
        report = self.rugcheck.get_report(address)
        safety = score_token(pair, report)

        if not safety.passed:
            logger.info(f"{symbol} 未通过, 评分 {safety.score}")
            self.db.create_failed_token({
                "contract_address": address,
                "token_name": pair.base_name,
                "token_symbol": pair.base_symbol,
                "failure_reasons": safety.failure_reasons(),
            })
            return FAILED

        try:
            token = self.db.create_verified_token(build_token_record(pair, safety))
        except IntegrityError:
            # 并发写入时已被其他流程插入
            logger.info(f"{symbol} 已被写入，改为刷新行情数据")
            existing = self.db.get_verified_token(address) or {}
            self.db.update_verified_token(address, market_update(pair, existing))
            return UPDATED

        logger.info(f"{symbol} 通过, 评分 {safety.score}")
        self._notify(token)
        return PASSED

    # ==================== 记录与通知 ====================

    @staticmethod
    def _log_data(scan_type: str, result: ScanResult, error_message: Optional[str]) -> Dict[str, Any]:
        return {
            "scan_type": scan_type,
            "tokens_scanned": result.scanned,
            "tokens_passed": result.passed,
            "tokens_failed": result.failed,
            "error_message": error_message,
        }

    def _save_failed_log(self, scan_type: str, result: ScanResult, message: str):
        try:
            self.db.create_scan_log(self._log_data(scan_type, result, message))
        except Exception as e:
            logger.error(f"扫描记录写入失败: {e}")

    def _notify(self, token: Dict[str, Any]):
        try:
            self.notifier.notify_new_verified_token(token)
        except Exception as e:
            logger.warning(f"发送通知失败: {e}")

    def _send_summary(self, result: ScanResult):
        try:
            self.notifier.send_scan_summary(result.scanned, result.passed, result.failed)
        except Exception as e:
            logger.warning(f"发送扫描汇总失败: {e}")
