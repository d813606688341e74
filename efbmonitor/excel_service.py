# excel_service.py
# -*- coding: utf-8 -*-

"""
FINE 포털 엑셀 파일 파싱.
등록/말소 시트를 읽어 CompanyRecord 목록과 기준일을 가진 DatasetSnapshot을 만든다.
"""

import logging
import math
import re
from datetime import date, datetime, timedelta, timezone
from io import BytesIO
from typing import Any, List, Optional, Sequence, Tuple
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from efbmonitor.exceptions import UnparseableDocumentError
from efbmonitor.models import BusinessType, CompanyRecord, CompanyStatus, DatasetSnapshot
from efbmonitor.constants import (
    DATA_START_ROW,
    REG_COL_NO,
    REG_COL_DATE,
    REG_COL_NAME,
    REG_COL_TYPE_START,
    CAN_COL_NO,
    CAN_COL_DATE,
    CAN_COL_NAME,
    CAN_COL_TYPE_START,
    REGISTERED_SHEET_KEYWORDS,
    CANCELLED_SHEET_KEYWORDS,
    REGISTERED_MARKERS,
    CANCELLED_MARKERS,
    EXCEL_EPOCH_OFFSET_DAYS,
    UNKNOWN_DATA_DATE,
)

logger = logging.getLogger(__name__)

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
DATA_DATE_PATTERN = re.compile(r"\d{8}")


def excel_date_to_string(serial: float) -> str:
    """
    엑셀 날짜 serial(1900 date system)을 'YYYY-MM-DD'로 변환.

    Args:
        serial: 엑셀 셀의 숫자 값 (예: 45306 -> '2024-01-15')

    Returns:
        날짜 문자열. serial이 1 미만이거나 날짜 범위(9999-12-31)를 넘으면 ""
    """
    if not serial or math.isnan(serial) or math.isinf(serial) or serial < 1:
        return ""
    utc_days = math.floor(serial - EXCEL_EPOCH_OFFSET_DAYS)
    try:
        converted = UNIX_EPOCH + timedelta(days=utc_days)
    except OverflowError:
        logger.debug(f"Date serial out of range: {serial}")
        return ""
    return converted.date().isoformat()


def extract_data_date(file_name: str) -> str:
    """
    파일명에서 처음 나오는 8자리 숫자(YYYYMMDD)를 'YYYY-MM-DD'로 변환.
    없으면 UNKNOWN_DATA_DATE.
    """
    match = DATA_DATE_PATTERN.search(file_name or "")
    if not match:
        return UNKNOWN_DATA_DATE
    digits = match.group(0)
    return f"{digits[:4]}-{digits[4:6]}-{digits[6:]}"


def _cell(row: Sequence[Any], idx: int) -> Any:
    if idx < len(row):
        return row[idx]
    return None


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _parse_sequence_number(value: Any) -> Optional[int]:
    """번호 셀 파싱. 없음/숫자 아님/1 미만이면 None."""
    if _is_number(value):
        number = float(value)
    else:
        text = _cell_text(value)
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if math.isnan(number) or math.isinf(number) or number < 1:
        return None
    return int(number)


def _parse_date_cell(value: Any) -> str:
    if _is_number(value):
        return excel_date_to_string(float(value))
    # openpyxl은 날짜 서식 셀을 datetime으로 돌려준다
    if isinstance(value, (datetime, date)):
        return value.strftime("%Y-%m-%d")
    return _cell_text(value)


def _parse_business_types(
    row: Sequence[Any],
    type_start: int,
    markers: Tuple[str, ...]
) -> Tuple[BusinessType, ...]:
    types: List[BusinessType] = []
    for offset, business_type in enumerate(BusinessType):
        text = _cell_text(_cell(row, type_start + offset))
        if any(marker in text for marker in markers):
            types.append(business_type)
    return tuple(types)


def _parse_rows(
    rows: Sequence[Sequence[Any]],
    col_no: int,
    col_date: int,
    col_name: int,
    type_start: int,
    markers: Tuple[str, ...],
    status: CompanyStatus
) -> List[CompanyRecord]:
    companies: List[CompanyRecord] = []

    for row_idx, row in enumerate(rows):
        if row_idx < DATA_START_ROW or not row:
            continue

        number = _parse_sequence_number(_cell(row, col_no))
        if number is None:
            continue

        name = _cell_text(_cell(row, col_name))
        if not name:
            logger.debug(f"Row {row_idx + 1}: empty company name, skipped")
            continue

        date_str = _parse_date_cell(_cell(row, col_date))
        business_types = _parse_business_types(row, type_start, markers)

        if status is CompanyStatus.REGISTERED:
            record = CompanyRecord(
                sequence_number=number,
                company_name=name,
                business_types=business_types,
                status=status,
                registered_date=date_str
            )
        else:
            record = CompanyRecord(
                sequence_number=number,
                company_name=name,
                business_types=business_types,
                status=status,
                cancelled_date=date_str
            )
        companies.append(record)

    return companies


def parse_registered_sheet(rows: Sequence[Sequence[Any]]) -> List[CompanyRecord]:
    """
    등록 시트 파싱.

    Args:
        rows: 시트의 모든 행 (values_only, 헤더 포함)

    Returns:
        status=REGISTERED인 CompanyRecord 목록. 업종 셀에 ● 또는 ○가 있으면 해당 업종.
    """
    return _parse_rows(
        rows,
        col_no=REG_COL_NO,
        col_date=REG_COL_DATE,
        col_name=REG_COL_NAME,
        type_start=REG_COL_TYPE_START,
        markers=REGISTERED_MARKERS,
        status=CompanyStatus.REGISTERED
    )


def parse_cancelled_sheet(rows: Sequence[Sequence[Any]]) -> List[CompanyRecord]:
    """
    말소 시트 파싱.

    Args:
        rows: 시트의 모든 행 (values_only, 헤더 포함)

    Returns:
        status=CANCELLED인 CompanyRecord 목록. 업종 셀에 '말소'/'취소'가 있으면 해당 업종.
    """
    return _parse_rows(
        rows,
        col_no=CAN_COL_NO,
        col_date=CAN_COL_DATE,
        col_name=CAN_COL_NAME,
        type_start=CAN_COL_TYPE_START,
        markers=CANCELLED_MARKERS,
        status=CompanyStatus.CANCELLED
    )


def parse_excel_data(
    content: bytes,
    file_name: str,
    fetched_at: Optional[datetime] = None
) -> DatasetSnapshot:
    """
    다운로드한 엑셀 파일 전체를 파싱.

    시트 이름에 '말소'/'취소'가 있으면 말소 시트, '등록'이 있으면 등록 시트로 읽고
    나머지 시트는 무시한다 (둘 다 해당하면 말소 우선).

    Args:
        content: xlsx 파일 bytes
        file_name: 포털에 표시된 파일명 (기준일 추출에 사용)
        fetched_at: snapshot 시각. None이면 파싱 완료 시각(UTC)

    Returns:
        DatasetSnapshot

    Raises:
        UnparseableDocumentError: 파일을 열 수 없거나 등록/말소 모두 0건인 경우
    """
    try:
        wb = load_workbook(BytesIO(content), data_only=True)
    except (InvalidFileException, BadZipFile, KeyError, ValueError, OverflowError, OSError, TypeError) as e:
        logger.warning(f"Cannot open Excel file {file_name}: {e}")
        raise UnparseableDocumentError(file_name=file_name, original_error=e) from e

    registered: List[CompanyRecord] = []
    cancelled: List[CompanyRecord] = []

    for ws in wb.worksheets:
        sheet_name = ws.title
        logger.debug(f"Sheet: '{sheet_name}'")

        if any(keyword in sheet_name for keyword in CANCELLED_SHEET_KEYWORDS):
            cancelled = parse_cancelled_sheet(list(ws.iter_rows(values_only=True)))
            logger.info(f"Sheet '{sheet_name}': 말소/취소 {len(cancelled)}건")
        elif any(keyword in sheet_name for keyword in REGISTERED_SHEET_KEYWORDS):
            registered = parse_registered_sheet(list(ws.iter_rows(values_only=True)))
            logger.info(f"Sheet '{sheet_name}': 등록 {len(registered)}건")

    if not registered and not cancelled:
        raise UnparseableDocumentError(file_name=file_name)

    return DatasetSnapshot(
        registered=tuple(registered),
        cancelled=tuple(cancelled),
        data_date=extract_data_date(file_name),
        file_name=file_name,
        fetched_at=fetched_at or datetime.now(timezone.utc)
    )
