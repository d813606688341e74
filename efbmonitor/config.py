# config.py
# -*- coding: utf-8 -*-

"""
FINE 포털 접속 및 캐시 설정
"""

import os

from efbmonitor.utils import validate_page_id

BASE_URL = "https://fine.fss.or.kr"
PAGE_PATH = "/fine/bbs/B0000392/view.do"
ALLOWED_PATH_PREFIX = "/fine/cmmn/file/fileDown.do"
PAGE_MENU_NO = "900495"

USER_AGENT = "Mozilla/5.0 (compatible; efbmonitor/1.0.0)"

REQUEST_TIMEOUT = 30

CACHE_TTL_HOURS = 6

DEFAULT_PAGE_NTT_ID = "63573"
FINE_PAGE_NTT_ID = validate_page_id(os.environ.get("FINE_PAGE_NTT_ID") or DEFAULT_PAGE_NTT_ID)


def build_page_url(page_id: str = FINE_PAGE_NTT_ID) -> str:
    """공지 게시글 URL 생성 (page_id는 검증 후 사용)"""
    page_id = validate_page_id(page_id)
    return f"{BASE_URL}{PAGE_PATH}?nttId={page_id}&menuNo={PAGE_MENU_NO}&pageIndex=1"
