"""
数据库操作函数
"""

from contextlib import contextmanager
from typing import List, Optional, Dict, Any

from sqlalchemy import create_engine, func
from sqlalchemy.orm import sessionmaker, Session

from config import DATABASE_URL
from .models import Base, VerifiedToken, FailedToken, ScanLog, utcnow


class DatabaseManager:
    """数据库管理器"""

    def __init__(self, db_url: str = DATABASE_URL):
        # 扫描可能在线程池中访问数据库
        connect_args = {"check_same_thread": False} if db_url.startswith("sqlite") else {}
        self.engine = create_engine(db_url, echo=False, connect_args=connect_args)
        self.SessionLocal = sessionmaker(bind=self.engine)
        self._ensure_tables()

    def _ensure_tables(self):
        """确保数据库表已创建"""
        Base.metadata.create_all(self.engine)

    @contextmanager
    def get_session(self) -> Session:
        """获取数据库会话"""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # ==================== 已验证代币 ====================

    def get_verified_token(self, contract_address: str) -> Optional[Dict[str, Any]]:
        """按合约地址获取已验证代币"""
        with self.get_session() as session:
            token = (
                session.query(VerifiedToken)
                .filter(VerifiedToken.contract_address == contract_address)
                .first()
            )
            return token.to_dict() if token else None

    def create_verified_token(self, token_data: Dict[str, Any]) -> Dict[str, Any]:
        """新增已验证代币，合约地址重复时抛出 IntegrityError"""
        with self.get_session() as session:
            token = VerifiedToken(**token_data)
            session.add(token)
            session.flush()
            session.refresh(token)
            return token.to_dict()

    def update_verified_token(self, contract_address: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """更新已验证代币的部分字段"""
        with self.get_session() as session:
            token = (
                session.query(VerifiedToken)
                .filter(VerifiedToken.contract_address == contract_address)
                .first()
            )
            if not token:
                return None
            for key, value in data.items():
                if hasattr(token, key):
                    setattr(token, key, value)
            token.updated_at = utcnow()
            session.flush()
            session.refresh(token)
            return token.to_dict()

    def get_verified_tokens(self, page: int = 1, limit: int = 100) -> Dict[str, Any]:
        """分页获取已验证代币，按上线时间倒序"""
        page = max(page, 1)
        limit = max(limit, 1)
        with self.get_session() as session:
            total = session.query(func.count(VerifiedToken.id)).scalar() or 0
            tokens = (
                session.query(VerifiedToken)
                .order_by(VerifiedToken.launch_time.desc(), VerifiedToken.id.desc())
                .offset((page - 1) * limit)
                .limit(limit)
                .all()
            )
            return {"tokens": [t.to_dict() for t in tokens], "total": int(total)}

    # ==================== 失败代币 ====================

    def create_failed_token(self, token_data: Dict[str, Any]) -> Dict[str, Any]:
        """记录未通过的代币"""
        with self.get_session() as session:
            token = FailedToken(**token_data)
            session.add(token)
            session.flush()
            session.refresh(token)
            return token.to_dict()

    def get_failed_tokens(self, limit: int = 50) -> List[Dict[str, Any]]:
        with self.get_session() as session:
            tokens = (
                session.query(FailedToken)
                .order_by(FailedToken.created_at.desc(), FailedToken.id.desc())
                .limit(limit)
                .all()
            )
            return [t.to_dict() for t in tokens]

    # ==================== 扫描记录 ====================

    def create_scan_log(self, log_data: Dict[str, Any]) -> Dict[str, Any]:
        """追加一条扫描记录"""
        with self.get_session() as session:
            log = ScanLog(**log_data)
            session.add(log)
            session.flush()
            session.refresh(log)
            return log.to_dict()

    def get_scan_logs(self, limit: int = 20) -> List[Dict[str, Any]]:
        """获取最近的扫描记录"""
        with self.get_session() as session:
            logs = (
                session.query(ScanLog)
                .order_by(ScanLog.created_at.desc(), ScanLog.id.desc())
                .limit(limit)
                .all()
            )
            return [log.to_dict() for log in logs]
