# -*- coding: utf-8 -*-

"""
Shared fixtures: in-memory workbooks and snapshot factories.
"""

from datetime import datetime, timezone
from io import BytesIO

import pytest
from openpyxl import Workbook

from efbmonitor.constants import DATA_START_ROW
from efbmonitor.models import BusinessType, CompanyRecord, CompanyStatus, DatasetSnapshot

FETCHED_AT = datetime(2024, 6, 1, tzinfo=timezone.utc)

TYPE_ORDER = [t.value for t in BusinessType]


def header_rows():
    return [[f"header-{i}"] for i in range(DATA_START_ROW)]


def registered_row(no, date, name, types=None):
    """[skip, NO, DATE, NAME, 선불, 직불, PG, ESCROW, EBPP]"""
    types = types or {}
    return ["", no, date, name] + [types.get(t, "") for t in TYPE_ORDER]


def cancelled_row(no, date, name, types=None):
    """[NO, DATE, NAME, 선불, 직불, PG, ESCROW, EBPP]"""
    types = types or {}
    return [no, date, name] + [types.get(t, "") for t in TYPE_ORDER]


def make_workbook_bytes(sheets):
    """
    sheets: list of (sheet_name, rows) tuples, rows written from A1.
    """
    wb = Workbook()
    wb.remove(wb.active)
    for sheet_name, rows in sheets:
        ws = wb.create_sheet(title=sheet_name)
        for row in rows:
            ws.append(row)
    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()


def make_company(**overrides):
    data = {
        "sequence_number": 1,
        "company_name": "테스트업체",
        "business_types": (BusinessType.PAYMENT_GATEWAY,),
        "status": CompanyStatus.REGISTERED,
        "registered_date": "2024-01-01",
        "cancelled_date": "",
    }
    data.update(overrides)
    return CompanyRecord(**data)


def make_snapshot(registered=(), cancelled=(), **overrides):
    data = {
        "registered": tuple(registered),
        "cancelled": tuple(cancelled),
        "data_date": "2024-06-01",
        "file_name": "전자금융업_등록현황_20240601.xlsx",
        "fetched_at": FETCHED_AT,
    }
    data.update(overrides)
    return DatasetSnapshot(**data)


@pytest.fixture
def sample_workbook():
    registered = header_rows() + [
        registered_row(1, 45306, "카카오페이", {"선불": "●", "PG": "●"}),
        registered_row(2, 45000, "네이버파이낸셜", {"PG": "○", "EBPP": "●"}),
        registered_row(3, "2023-03-01", "토스페이먼츠", {"PG": "●", "ESCROW": "●"}),
    ]
    cancelled = header_rows() + [
        cancelled_row(1, 44000, "옛날결제", {"PG": "말소"}),
        cancelled_row(2, 44500, "취소된회사", {"선불": "등록취소", "직불": "말소"}),
    ]
    return make_workbook_bytes([
        ("등록현황", registered),
        ("말소현황", cancelled),
    ])


@pytest.fixture
def sample_html():
    return """
    <html><body>
      <ul class="file">
        <li>
          <a href="/fine/cmmn/file/fileDown.do?atchFileId=FILE_000001&amp;fileSn=1"
             class="link">전자금융업_등록현황_20240601.xlsx</a>
        </li>
      </ul>
    </body></html>
    """
