# client.py
# -*- coding: utf-8 -*-

import logging
import re
import time
from typing import Optional, Tuple

import requests
from bs4 import BeautifulSoup
from bs4.exceptions import ParserRejectedMarkup

from efbmonitor.config import (
    BASE_URL,
    ALLOWED_PATH_PREFIX,
    FINE_PAGE_NTT_ID,
    REQUEST_TIMEOUT,
    USER_AGENT,
    build_page_url,
)
from efbmonitor.constants import LINK_KEYWORD, LINK_EXTENSION
from efbmonitor.exceptions import (
    PortalUnavailableError,
    DownloadFailedError,
    LinkNotFoundError,
    UntrustedDownloadPathError,
)

logger = logging.getLogger(__name__)

# href 후보: 다운로드 endpoint + query string (대소문자 무시)
DOWNLOAD_HREF_PATTERN = re.compile(
    r"^" + re.escape(ALLOWED_PATH_PREFIX) + r"\?.+",
    re.I | re.S
)

# 링크 텍스트: '전자금융업'을 포함하고 .xlsx로 끝나는 부분
FILE_NAME_PATTERN = re.compile(
    r".*" + re.escape(LINK_KEYWORD) + r".*" + re.escape(LINK_EXTENSION),
    re.I | re.S
)

HTML_SNIPPET_LENGTH = 200
CHUNK_SIZE = 64 * 1024


def extract_excel_download_url(html: str) -> Tuple[str, str]:
    """
    공지 페이지 HTML에서 엑셀 다운로드 URL과 파일명을 추출.

    href가 다운로드 endpoint 패턴과 맞고, 링크 텍스트에 '전자금융업'이 있으며
    '.xlsx'로 끝나는 첫 번째 <a>를 사용한다. 추출한 경로는 '&amp;'를 한 번 더
    풀어준 뒤 ALLOWED_PATH_PREFIX로 시작하는지 다시 확인한다.

    Args:
        html: 페이지 HTML (형식이 깨져 있어도 됨)

    Returns:
        (절대 URL, 파일명) tuple. URL의 host는 항상 BASE_URL.

    Raises:
        LinkNotFoundError: 조건에 맞는 링크가 없는 경우
        UntrustedDownloadPathError: 경로가 허용된 prefix로 시작하지 않는 경우
    """
    if not html or not isinstance(html, str):
        raise LinkNotFoundError(html_snippet="")

    try:
        soup = BeautifulSoup(html, "html.parser")
    except ParserRejectedMarkup as e:
        logger.warning(f"HTML parser rejected page markup: {e}")
        raise LinkNotFoundError(html_snippet=html[:HTML_SNIPPET_LENGTH]) from e

    for anchor in soup.find_all("a", href=True):
        href = anchor.get("href")
        if not isinstance(href, str):
            continue
        href = href.strip()
        if not DOWNLOAD_HREF_PATTERN.match(href):
            continue

        text = anchor.get_text(" ", strip=True)
        name_match = FILE_NAME_PATTERN.search(text)
        if not name_match:
            continue

        # 포털 페이지는 query 구분자를 이중 escape하는 경우가 있음
        path = href.replace("&amp;", "&")
        file_name = name_match.group(0).strip()

        if not path.startswith(ALLOWED_PATH_PREFIX):
            logger.warning(f"Download path outside allowed prefix: {path}")
            raise UntrustedDownloadPathError(path=path)

        logger.debug(f"Found download link: {path} ({file_name})")
        return f"{BASE_URL}{path}", file_name

    raise LinkNotFoundError(html_snippet=html[:HTML_SNIPPET_LENGTH])


class FinePortalClient:
    """
    FINE 포털(fine.fss.or.kr) 통신 client.
    redirect는 따라가지 않으며 모든 요청은 timeout으로 제한된다. retry 없음.
    """

    def __init__(
        self,
        page_id: str = None,
        timeout: int = None,
        session: Optional[requests.Session] = None
    ):
        self.page_url = build_page_url(page_id or FINE_PAGE_NTT_ID)
        self.timeout = timeout or REQUEST_TIMEOUT
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})

    def _get(self, url: str, headers: dict = None) -> Tuple[requests.Response, bytes]:
        """
        GET 요청 (redirect 비허용). 2xx가 아니면 HTTPError.

        requests의 timeout은 연결과 각 read에만 걸리므로 body는 stream으로 읽으면서
        요청 시작부터 self.timeout초가 지나면 중단한다.

        Returns:
            (response, body bytes)

        Raises:
            requests.RequestException: 네트워크 오류, timeout, 2xx 이외 응답
        """
        deadline = time.monotonic() + self.timeout
        resp = self.session.get(
            url,
            headers=headers,
            timeout=self.timeout,
            allow_redirects=False,
            verify=True,
            stream=True
        )
        try:
            if not 200 <= resp.status_code < 300:
                raise requests.HTTPError(
                    f"Unexpected HTTP {resp.status_code} for {url}",
                    response=resp
                )
            chunks = []
            for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                if time.monotonic() >= deadline:
                    raise requests.Timeout(f"Request to {url} exceeded {self.timeout}s")
                chunks.append(chunk)
        finally:
            resp.close()
        return resp, b"".join(chunks)

    def fetch_announcement_html(self) -> str:
        """
        공지 페이지 HTML 요청.

        Raises:
            PortalUnavailableError: 요청 실패 또는 2xx 이외 응답 (redirect 포함)
        """
        logger.info(f"Fetching FINE page: {self.page_url}")
        try:
            resp, body = self._get(self.page_url, headers={"Accept": "text/html"})
        except requests.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            logger.warning(f"HTTP error {status_code} for {self.page_url}")
            raise PortalUnavailableError(
                url=self.page_url,
                status_code=status_code,
                original_error=e
            ) from e
        except requests.RequestException as e:
            logger.warning(f"Request error for {self.page_url}: {e}")
            raise PortalUnavailableError(url=self.page_url, original_error=e) from e
        return body.decode(resp.encoding or "utf-8", errors="replace")

    def download_file(self, url: str) -> bytes:
        """
        엑셀 파일 다운로드. url은 extract_excel_download_url()로 검증된 값이어야 한다.

        Raises:
            DownloadFailedError: 요청 실패 또는 2xx 이외 응답 (redirect 포함)
        """
        logger.info(f"Downloading Excel file: {url}")
        try:
            _, content = self._get(url)
        except requests.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            logger.warning(f"HTTP error {status_code} while downloading {url}")
            raise DownloadFailedError(url=url, status_code=status_code, original_error=e) from e
        except requests.RequestException as e:
            logger.warning(f"Request error while downloading {url}: {e}")
            raise DownloadFailedError(url=url, original_error=e) from e
        logger.info(f"Downloaded {len(content)} bytes")
        return content

    def close(self) -> None:
        self.session.close()
