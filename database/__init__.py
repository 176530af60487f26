from .models import Base, VerifiedToken, FailedToken, ScanLog
from .operations import DatabaseManager

__all__ = ["Base", "VerifiedToken", "FailedToken", "ScanLog", "DatabaseManager"]
