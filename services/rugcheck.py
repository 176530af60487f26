"""
RugCheck API 封装
"""

import logging
from typing import Optional

import requests

from config import RUGCHECK_BASE_URL, REQUEST_TIMEOUT, PROXIES
from services.schemas import RiskReport

logger = logging.getLogger(__name__)


class RugCheckAPI:
    """RugCheck API 客户端"""

    def __init__(self, base_url: str = RUGCHECK_BASE_URL, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.proxies = PROXIES
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    def get_report(self, address: str) -> RiskReport:
        """获取代币风险报告，任何失败都返回空报告"""
        url = f"{self.base_url}/tokens/{address}/report"
        try:
            response = self.session.get(url, timeout=REQUEST_TIMEOUT, proxies=self.proxies)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            logger.warning(f"RugCheck 请求失败: {address}, 错误: {e}")
            return RiskReport()
        except ValueError:
            logger.warning(f"RugCheck 返回内容无法解析: {address}")
            return RiskReport()

        if not isinstance(data, dict):
            logger.warning(f"RugCheck 返回格式异常: {address}")
            return RiskReport()
        return RiskReport.from_dict(data)


rugcheck_api = RugCheckAPI()
