# utils.py
# -*- coding: utf-8 -*-

"""
입력 검증 utility
"""

import re
from typing import Any, Dict, Optional

from efbmonitor.exceptions import ConfigurationError, InvalidArgumentError
from efbmonitor.models import BusinessType, CompanyStatus, SearchQuery
from efbmonitor.constants import (
    ALL_FILTER,
    MAX_COMPANY_NAME_LENGTH,
    ERR_COMPANY_NAME_TOO_LONG,
    ERR_INVALID_BUSINESS_TYPE,
    ERR_INVALID_STATUS,
    ERR_INVALID_PAGE_ID,
)

PAGE_ID_PATTERN = re.compile(r"^\d{1,10}$", re.ASCII)

# 영문 enum 이름도 허용 (보고서/오류 메시지에는 한글 표기를 사용)
BUSINESS_TYPE_ALIASES = {
    "PrepaidPayment": BusinessType.PREPAID_PAYMENT,
    "DebitPayment": BusinessType.DEBIT_PAYMENT,
    "PaymentGateway": BusinessType.PAYMENT_GATEWAY,
    "Escrow": BusinessType.ESCROW,
    "ElectronicBillPresentmentPayment": BusinessType.EBPP,
}

STATUS_ALIASES = {
    "Registered": CompanyStatus.REGISTERED,
    "Cancelled": CompanyStatus.CANCELLED,
}

ALL_ALIASES = (ALL_FILTER, "All")


def validate_page_id(value: Any) -> str:
    """
    FINE 게시글 ID(nttId) 검증.

    Args:
        value: 환경 변수 등에서 읽은 값

    Returns:
        검증된 문자열 ID

    Raises:
        ConfigurationError: 1~10자리 숫자가 아닌 경우
    """
    if not isinstance(value, str) or not PAGE_ID_PATTERN.fullmatch(value):
        raise ConfigurationError(ERR_INVALID_PAGE_ID.format(value=value), field="FINE_PAGE_NTT_ID")
    return value


def allowed_business_types() -> list:
    return [t.value for t in BusinessType] + [ALL_FILTER]


def allowed_statuses() -> list:
    return [s.value for s in CompanyStatus] + [ALL_FILTER]


def parse_business_type(value: Any) -> Optional[BusinessType]:
    """
    업종 필터 값 파싱. '전체'(All) 또는 None이면 None(필터 없음)을 반환.

    Raises:
        InvalidArgumentError: 허용되지 않은 값
    """
    if value is None:
        return None
    text = str(value)
    if text in ALL_ALIASES:
        return None
    for business_type in BusinessType:
        if text == business_type.value:
            return business_type
    if text in BUSINESS_TYPE_ALIASES:
        return BUSINESS_TYPE_ALIASES[text]
    allowed = allowed_business_types()
    raise InvalidArgumentError(
        ERR_INVALID_BUSINESS_TYPE.format(value=text, allowed=", ".join(allowed)),
        field="business_type",
        value=text,
        allowed=allowed
    )


def parse_status(value: Any) -> Optional[CompanyStatus]:
    """
    상태 필터 값 파싱. '전체'(All) 또는 None이면 None을 반환.

    Raises:
        InvalidArgumentError: 허용되지 않은 값
    """
    if value is None:
        return None
    text = str(value)
    if text in ALL_ALIASES:
        return None
    for status in CompanyStatus:
        if text == status.value:
            return status
    if text in STATUS_ALIASES:
        return STATUS_ALIASES[text]
    allowed = allowed_statuses()
    raise InvalidArgumentError(
        ERR_INVALID_STATUS.format(value=text, allowed=", ".join(allowed)),
        field="status",
        value=text,
        allowed=allowed
    )


def sanitize_company_name(value: Any) -> Optional[str]:
    """
    업체명 검색어 정리. 비어 있으면 None(필터 없음).

    Raises:
        InvalidArgumentError: MAX_COMPANY_NAME_LENGTH 초과
    """
    if value is None:
        return None
    text = str(value)
    if len(text) > MAX_COMPANY_NAME_LENGTH:
        raise InvalidArgumentError(
            ERR_COMPANY_NAME_TOO_LONG.format(max_length=MAX_COMPANY_NAME_LENGTH),
            field="company_name",
            value=text
        )
    text = text.strip()
    return text or None


def validate_search_args(args: Dict[str, Any]) -> SearchQuery:
    """
    search 호출 인자(dict)를 검증해 SearchQuery로 변환.

    Args:
        args: company_name, business_type, status, refresh 키를 가질 수 있는 dict

    Returns:
        SearchQuery

    Raises:
        InvalidArgumentError: 값이 허용 범위를 벗어난 경우
    """
    return SearchQuery(
        company_name=sanitize_company_name(args.get("company_name")),
        business_type=parse_business_type(args.get("business_type")),
        status=parse_status(args.get("status")),
        refresh=args.get("refresh") is True
    )
