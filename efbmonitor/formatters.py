# formatters.py
# -*- coding: utf-8 -*-

"""
검색 결과/통계 필터링 및 보고서 텍스트 생성.
"""

from typing import Dict, List, Optional

from efbmonitor.models import BusinessType, CompanyRecord, CompanyStatus, DatasetSnapshot
from efbmonitor.constants import (
    MAX_DISPLAY,
    SEARCH_TITLE,
    SEARCH_SUMMARY,
    SEARCH_NO_RESULT,
    SEARCH_MORE,
    STATS_TITLE,
    STATS_DATA_DATE,
    STATS_OVERVIEW_TITLE,
    STATS_REGISTERED_LINE,
    STATS_CANCELLED_LINE,
    STATS_BY_TYPE_TITLE,
)


def filter_companies(
    snapshot: DatasetSnapshot,
    company_name: Optional[str] = None,
    business_type: Optional[BusinessType] = None,
    status: Optional[CompanyStatus] = None
) -> List[CompanyRecord]:
    """
    등록+말소 전체에서 조건에 맞는 업체만 반환. None인 조건은 적용하지 않는다.

    Args:
        snapshot: 조회 대상 데이터
        company_name: 업체명 부분 일치 (대소문자 무시)
        business_type: 업종
        status: 등록/말소 상태

    Returns:
        순서를 유지한 CompanyRecord 목록
    """
    result = snapshot.all_companies()

    if company_name:
        keyword = company_name.lower()
        result = [c for c in result if keyword in c.company_name.lower()]

    if business_type is not None:
        result = [c for c in result if business_type in c.business_types]

    if status is not None:
        result = [c for c in result if c.status is status]

    return result


def format_business_types(business_types) -> str:
    if not business_types:
        return "-"
    return ", ".join(t.value for t in business_types)


def format_company(idx: int, company: CompanyRecord) -> List[str]:
    lines = [
        f"[{idx}] {company.company_name}",
        f"    상태: {company.status.value}",
        f"    업종: {format_business_types(company.business_types)}",
    ]
    if company.registered_date:
        lines.append(f"    등록일: {company.registered_date}")
    if company.cancelled_date:
        lines.append(f"    말소일: {company.cancelled_date}")
    return lines


def format_search_result(companies: List[CompanyRecord], snapshot: DatasetSnapshot) -> str:
    """
    검색 결과 보고서. 최대 MAX_DISPLAY건까지만 나열하고 나머지는 건수만 표시.
    """
    lines = [
        SEARCH_TITLE,
        SEARCH_SUMMARY.format(data_date=snapshot.data_date, count=len(companies)),
    ]

    if not companies:
        lines.append("")
        lines.append(SEARCH_NO_RESULT)
        return "\n".join(lines)

    for idx, company in enumerate(companies[:MAX_DISPLAY], 1):
        lines.append("")
        lines.extend(format_company(idx, company))

    if len(companies) > MAX_DISPLAY:
        lines.append("")
        lines.append(SEARCH_MORE.format(remaining=len(companies) - MAX_DISPLAY))

    return "\n".join(lines)


def count_by_type(companies) -> Dict[BusinessType, int]:
    """업종별 건수. 업종이 여러 개인 업체는 각 업종에 한 번씩 집계된다."""
    counts = {business_type: 0 for business_type in BusinessType}
    for company in companies:
        for business_type in company.business_types:
            counts[business_type] += 1
    return counts


def format_statistics(snapshot: DatasetSnapshot) -> str:
    reg_by_type = count_by_type(snapshot.registered)
    can_by_type = count_by_type(snapshot.cancelled)

    lines = [
        STATS_TITLE,
        STATS_DATA_DATE.format(data_date=snapshot.data_date),
        "",
        STATS_OVERVIEW_TITLE,
        STATS_REGISTERED_LINE.format(
            companies=len(snapshot.registered),
            types=sum(reg_by_type.values())
        ),
        STATS_CANCELLED_LINE.format(
            companies=len(snapshot.cancelled),
            types=sum(can_by_type.values())
        ),
        "",
        STATS_BY_TYPE_TITLE,
        "| 업종 | 등록 | 말소 |",
        "|------|------|------|",
    ]
    for business_type in BusinessType:
        lines.append(
            f"| {business_type.value} | {reg_by_type[business_type]}건 | {can_by_type[business_type]}건 |"
        )

    return "\n".join(lines) + "\n"
