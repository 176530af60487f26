"""
扫描系统异常定义
"""

from typing import Optional


class ScannerError(Exception):
    """扫描系统异常基类"""


class ScanInProgressError(ScannerError):
    """已有扫描在运行"""

    def __init__(self, message: str = "Scan already in progress"):
        super().__init__(message)


class ScanFailedError(ScannerError):
    """整轮扫描中止，counts 为中止前的进度"""

    def __init__(self, message: str, counts: Optional[dict] = None):
        super().__init__(message)
        self.counts = counts or {"scanned": 0, "passed": 0, "failed": 0}


class MalformedPairError(ScannerError):
    """交易对缺少必要字段"""


class TokenLookupError(ScannerError):
    """单代币查询失败基类"""


class InvalidAddressError(TokenLookupError):
    """地址为空或格式不合法"""


class TokenNotFoundError(TokenLookupError):
    """DEXScreener 查询失败"""


class NoTradingPairError(TokenLookupError):
    """地址有效但尚无交易对"""
