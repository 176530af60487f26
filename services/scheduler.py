"""
定时扫描
"""

import logging
import threading
from typing import Optional

from config import SCAN_INTERVAL_SECONDS
from services.errors import ScanInProgressError, ScanFailedError

logger = logging.getLogger(__name__)


class ScanScheduler:
    """后台线程按固定间隔触发扫描，与手动扫描共用扫描器的锁"""

    def __init__(self, scanner, interval: float = SCAN_INTERVAL_SECONDS):
        self.scanner = scanner
        self.interval = interval
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self):
        """触发一次定时扫描，返回 ScanResult；跳过或失败时返回 None"""
        try:
            return self.scanner.run_scan("scheduled", cancel_event=self._stop)
        except ScanInProgressError:
            logger.info("已有扫描在运行，跳过本次定时扫描")
        except ScanFailedError as e:
            logger.error(f"定时扫描失败: {e} (已处理 {e.counts})")
        return None

    def _loop(self, run_immediately: bool):
        if run_immediately:
            self.run_once()
        while not self._stop.wait(self.interval):
            self.run_once()

    def start(self, run_immediately: bool = True):
        if self.running:
            if self._stop.is_set():
                logger.warning("上一轮定时扫描尚未退出，暂不重新启动")
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, args=(run_immediately,), name="scan-scheduler", daemon=True)
        self._thread.start()
        logger.info(f"定时扫描已启动，间隔 {self.interval} 秒")

    def stop(self, timeout: Optional[float] = None):
        """停止调度，同时取消正在进行的扫描"""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning("定时扫描线程仍在运行，等待当前扫描结束")
                return
        self._thread = None
        logger.info("定时扫描已停止")
