# efbmonitor package
# -*- coding: utf-8 -*-

"""
efbmonitor - 금융감독원 FINE 포털 전자금융업 등록/말소 현황 조회
"""

__version__ = "1.0.0"

from efbmonitor.models import (
    BusinessType,
    CompanyStatus,
    CompanyRecord,
    DatasetSnapshot,
)
from efbmonitor.client import FinePortalClient, extract_excel_download_url
from efbmonitor.excel_service import parse_excel_data
from efbmonitor.cache import SnapshotCache
from efbmonitor.service import EFinanceService
from efbmonitor.exceptions import (
    EfbMonitorError,
    InvalidArgumentError,
    ConfigurationError,
    PortalUnavailableError,
    DownloadFailedError,
    StructureChangedError,
    LinkNotFoundError,
    UntrustedDownloadPathError,
    UnparseableDocumentError,
    InternalError
)

__all__ = [
    "BusinessType",
    "CompanyStatus",
    "CompanyRecord",
    "DatasetSnapshot",
    "FinePortalClient",
    "extract_excel_download_url",
    "parse_excel_data",
    "SnapshotCache",
    "EFinanceService",
    "EfbMonitorError",
    "InvalidArgumentError",
    "ConfigurationError",
    "PortalUnavailableError",
    "DownloadFailedError",
    "StructureChangedError",
    "LinkNotFoundError",
    "UntrustedDownloadPathError",
    "UnparseableDocumentError",
    "InternalError",
    "__version__"
]
