# service.py
# -*- coding: utf-8 -*-

"""
search / statistics 진입점.
FinePortalClient, 링크 추출, 엑셀 파싱을 SnapshotCache로 묶는다.
"""

import logging
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Any, Callable, Optional

from efbmonitor.cache import SnapshotCache, utc_now
from efbmonitor.client import FinePortalClient, extract_excel_download_url
from efbmonitor.excel_service import parse_excel_data
from efbmonitor.exceptions import EfbMonitorError, InternalError
from efbmonitor.formatters import filter_companies, format_search_result, format_statistics
from efbmonitor.models import DatasetSnapshot
from efbmonitor.utils import validate_search_args

logger = logging.getLogger(__name__)


class EFinanceService:
    """
    전자금융업 등록/말소 현황 조회 service.
    프로세스당 하나만 만들어 cache를 공유한다.
    """

    def __init__(
        self,
        client: Optional[FinePortalClient] = None,
        ttl: timedelta = None,
        clock: Callable[[], datetime] = None
    ):
        self.client = client or FinePortalClient()
        self._clock = clock or utc_now
        self.cache = SnapshotCache(loader=self.load_snapshot, ttl=ttl, clock=self._clock)

    def load_snapshot(self) -> DatasetSnapshot:
        """
        pipeline 1회 실행: 페이지 HTML -> 다운로드 링크 -> 엑셀 다운로드 -> 파싱.

        Raises:
            PortalUnavailableError, LinkNotFoundError, UntrustedDownloadPathError,
            DownloadFailedError, UnparseableDocumentError
        """
        html = self.client.fetch_announcement_html()
        url, file_name = extract_excel_download_url(html)
        logger.info(f"Excel file: {file_name}")

        content = self.client.download_file(url)
        snapshot = parse_excel_data(content, file_name)
        return replace(snapshot, fetched_at=self._clock())

    def get_snapshot(self, force_refresh: bool = False) -> DatasetSnapshot:
        return self.cache.get(force_refresh=force_refresh)

    def search(self, **args: Any) -> str:
        """
        업체 검색 보고서.

        Args:
            company_name: 업체명 (부분 일치, 100자 이내)
            business_type: 선불/직불/PG/ESCROW/EBPP/전체
            status: 등록/말소/전체
            refresh: True면 cache 무시

        Raises:
            InvalidArgumentError: 입력값 오류
            EfbMonitorError: pipeline 오류 (그대로 전달)
            InternalError: 그 외 예상치 못한 오류
        """
        try:
            query = validate_search_args(args)
            snapshot = self.get_snapshot(query.refresh)
            companies = filter_companies(
                snapshot,
                company_name=query.company_name,
                business_type=query.business_type,
                status=query.status
            )
            return format_search_result(companies, snapshot)
        except EfbMonitorError:
            raise
        except Exception as e:
            logger.exception("Unexpected error in search")
            raise InternalError(original_error=e) from e

    def statistics(self, refresh: Any = False) -> str:
        """
        업종별 등록/말소 통계 보고서.

        Raises:
            EfbMonitorError: pipeline 오류 (그대로 전달)
            InternalError: 그 외 예상치 못한 오류
        """
        try:
            snapshot = self.get_snapshot(refresh is True)
            return format_statistics(snapshot)
        except EfbMonitorError:
            raise
        except Exception as e:
            logger.exception("Unexpected error in statistics")
            raise InternalError(original_error=e) from e
