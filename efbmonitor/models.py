# models.py
# -*- coding: utf-8 -*-

"""
Data models: 업종/상태 enum, 업체 record, snapshot, 검색 조건.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple


class BusinessType(Enum):
    """전자금융업 업종 (value는 포털 엑셀/보고서에서 쓰는 표기)"""
    PREPAID_PAYMENT = "선불"
    DEBIT_PAYMENT = "직불"
    PAYMENT_GATEWAY = "PG"
    ESCROW = "ESCROW"
    EBPP = "EBPP"


class CompanyStatus(Enum):
    REGISTERED = "등록"
    CANCELLED = "말소"


@dataclass(frozen=True)
class CompanyRecord:
    """
    등록/말소 현황의 한 행.

    status에 따라 registered_date 또는 cancelled_date 중 하나만 채워진다.
    sequence_number는 등록/말소 시트별로 따로 매겨지므로 unique하지 않다.
    """
    sequence_number: int
    company_name: str
    business_types: Tuple[BusinessType, ...]
    status: CompanyStatus
    registered_date: str = ""
    cancelled_date: str = ""
    remark: str = ""


@dataclass(frozen=True)
class DatasetSnapshot:
    """한 번의 파싱 결과 전체. 갱신 시 통째로 교체된다."""
    registered: Tuple[CompanyRecord, ...]
    cancelled: Tuple[CompanyRecord, ...]
    data_date: str
    file_name: str
    fetched_at: datetime

    def all_companies(self) -> List[CompanyRecord]:
        return [*self.registered, *self.cancelled]


@dataclass(frozen=True)
class SearchQuery:
    """검증이 끝난 search 입력. None인 필터는 '전체'를 의미한다."""
    company_name: Optional[str] = None
    business_type: Optional[BusinessType] = None
    status: Optional[CompanyStatus] = None
    refresh: bool = False
