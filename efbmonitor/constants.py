# constants.py
# -*- coding: utf-8 -*-

"""
efbmonitor에서 사용하는 상수 (메시지, 입력 제한, 엑셀 포맷 계약)
"""

# Validation
MAX_COMPANY_NAME_LENGTH = 100
MAX_DISPLAY = 50

ALL_FILTER = "전체"

# 엑셀 포맷 (게시 기관이 정한 고정 레이아웃, 0-indexed)
DATA_START_ROW = 5

REG_COL_NO = 1
REG_COL_DATE = 2
REG_COL_NAME = 3
REG_COL_TYPE_START = 4

CAN_COL_NO = 0
CAN_COL_DATE = 1
CAN_COL_NAME = 2
CAN_COL_TYPE_START = 3

REGISTERED_SHEET_KEYWORDS = ("등록",)
CANCELLED_SHEET_KEYWORDS = ("말소", "취소")

REGISTERED_MARKERS = ("●", "○")
CANCELLED_MARKERS = ("말소", "취소")

# 1900 date system serial -> Unix epoch
EXCEL_EPOCH_OFFSET_DAYS = 25569

UNKNOWN_DATA_DATE = "알 수 없음"

# Link extraction
LINK_KEYWORD = "전자금융업"
LINK_EXTENSION = ".xlsx"

# Report
SEARCH_TITLE = "## 전자금융업 등록/말소 현황 검색 결과"
SEARCH_SUMMARY = "기준일: {data_date} | 검색 결과: {count}건"
SEARCH_NO_RESULT = "검색 조건에 맞는 업체가 없습니다."
SEARCH_MORE = "... 외 {remaining}건 (검색 조건을 좁혀주세요)"

STATS_TITLE = "## 전자금융업 등록/말소 현황 통계"
STATS_DATA_DATE = "기준일: {data_date}"
STATS_OVERVIEW_TITLE = "### 전체 현황"
STATS_REGISTERED_LINE = "- 등록: {companies}개사 ({types}개 업종)"
STATS_CANCELLED_LINE = "- 말소/취소: {companies}개사 ({types}개 업종)"
STATS_BY_TYPE_TITLE = "### 업종별 현황"

# Error Messages
ERR_COMPANY_NAME_TOO_LONG = "업체명은 {max_length}자 이내로 입력해주세요."
ERR_INVALID_BUSINESS_TYPE = '유효하지 않은 업종: "{value}". 허용 값: {allowed}'
ERR_INVALID_STATUS = '유효하지 않은 상태: "{value}". 허용 값: {allowed}'
ERR_INVALID_PAGE_ID = '유효하지 않은 FINE_PAGE_NTT_ID: "{value}" (숫자만 허용)'
