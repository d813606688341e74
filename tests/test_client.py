# -*- coding: utf-8 -*-

from unittest.mock import MagicMock, patch

import pytest
import requests

from efbmonitor.client import FinePortalClient, extract_excel_download_url
from efbmonitor.config import BASE_URL, REQUEST_TIMEOUT, USER_AGENT
from efbmonitor.exceptions import (
    ConfigurationError,
    DownloadFailedError,
    LinkNotFoundError,
    PortalUnavailableError,
    StructureChangedError,
    UntrustedDownloadPathError,
)

FILE_URL = "https://fine.fss.or.kr/fine/cmmn/file/fileDown.do?atchFileId=FILE_000001&fileSn=1"


class TestExtractExcelDownloadUrl:
    def test_valid_html(self, sample_html):
        url, file_name = extract_excel_download_url(sample_html)
        assert url == FILE_URL
        assert file_name == "전자금융업_등록현황_20240601.xlsx"

    def test_amp_is_decoded(self):
        html = '<a href="/fine/cmmn/file/fileDown.do?a=1&amp;b=2&amp;c=3">전자금융업_test.xlsx</a>'
        url, _ = extract_excel_download_url(html)
        assert url.endswith("a=1&b=2&c=3")
        assert "&amp;" not in url

    def test_double_encoded_amp_is_decoded(self):
        html = '<a href="/fine/cmmn/file/fileDown.do?a=1&amp;amp;b=2">전자금융업_test.xlsx</a>'
        url, _ = extract_excel_download_url(html)
        assert url == f"{BASE_URL}/fine/cmmn/file/fileDown.do?a=1&b=2"

    def test_file_name_is_trimmed(self):
        html = '<a href="/fine/cmmn/file/fileDown.do?id=1">  전자금융업_등록현황_20240601.xlsx  </a>'
        _, file_name = extract_excel_download_url(html)
        assert file_name == "전자금융업_등록현황_20240601.xlsx"

    def test_nested_markup_in_anchor(self):
        html = (
            '<a href="/fine/cmmn/file/fileDown.do?id=1">\n'
            '  <img src="/icon.png"/> <span>전자금융업_20240601.XLSX</span>\n'
            '</a>'
        )
        url, file_name = extract_excel_download_url(html)
        assert url == f"{BASE_URL}/fine/cmmn/file/fileDown.do?id=1"
        assert file_name == "전자금융업_20240601.XLSX"

    def test_skips_unrelated_links(self):
        html = """
        <a href="/fine/cmmn/file/fileDown.do?id=1">공지사항.hwp</a>
        <a href="/other/page.do">전자금융업_목록.xlsx</a>
        <a href="/fine/cmmn/file/fileDown.do?id=3">전자금융업_20240601.xlsx</a>
        """
        url, _ = extract_excel_download_url(html)
        assert url == f"{BASE_URL}/fine/cmmn/file/fileDown.do?id=3"

    def test_no_link(self):
        with pytest.raises(LinkNotFoundError):
            extract_excel_download_url("<html>no link</html>")

    def test_non_xlsx_link(self):
        html = '<a href="/fine/cmmn/file/fileDown.do?id=1">전자금융업_문서.pdf</a>'
        with pytest.raises(LinkNotFoundError):
            extract_excel_download_url(html)

    def test_missing_keyword(self):
        html = '<a href="/fine/cmmn/file/fileDown.do?id=1">보험업_현황.xlsx</a>'
        with pytest.raises(LinkNotFoundError):
            extract_excel_download_url(html)

    def test_path_outside_prefix_is_not_matched(self):
        html = '<a href="/evil/path/fileDown.do?id=1">전자금융업_test.xlsx</a>'
        with pytest.raises(LinkNotFoundError):
            extract_excel_download_url(html)

    def test_absolute_foreign_url_is_not_matched(self):
        html = '<a href="https://evil.example.com/fine/cmmn/file/fileDown.do?id=1">전자금융업_test.xlsx</a>'
        with pytest.raises(LinkNotFoundError):
            extract_excel_download_url(html)

    def test_case_mismatched_prefix_is_untrusted(self):
        html = '<a href="/FINE/CMMN/FILE/fileDown.do?id=1">전자금융업_test.xlsx</a>'
        with pytest.raises(UntrustedDownloadPathError) as exc_info:
            extract_excel_download_url(html)
        assert exc_info.value.path == "/FINE/CMMN/FILE/fileDown.do?id=1"
        assert isinstance(exc_info.value, StructureChangedError)

    @pytest.mark.parametrize("html", ["", None, 123, "<<<a href='", "<a href=>전자금융업.xlsx", "\x00\xff<a", "<![foo bar]>"])
    def test_malformed_input_never_crashes(self, html):
        with pytest.raises(LinkNotFoundError):
            extract_excel_download_url(html)


def make_response(status_code=200, content=b"", encoding="utf-8", chunks=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.encoding = encoding
    resp.iter_content.return_value = iter(chunks if chunks is not None else [content])
    return resp


@pytest.fixture
def session():
    mock_session = MagicMock()
    mock_session.headers = {}
    return mock_session


class TestFinePortalClient:
    def test_init_sets_user_agent_and_page_url(self, session):
        client = FinePortalClient(page_id="12345", session=session)
        assert session.headers["User-Agent"] == USER_AGENT
        assert "nttId=12345" in client.page_url
        assert client.page_url.startswith(BASE_URL)
        assert client.timeout == REQUEST_TIMEOUT

    def test_invalid_page_id(self, session):
        with pytest.raises(ConfigurationError):
            FinePortalClient(page_id="12a45", session=session)

    def test_fetch_announcement_html(self, session):
        session.get.return_value = make_response(200, content="<html>확인</html>".encode("utf-8"))
        client = FinePortalClient(session=session)

        assert client.fetch_announcement_html() == "<html>확인</html>"
        args, kwargs = session.get.call_args
        assert args[0] == client.page_url
        assert kwargs["headers"] == {"Accept": "text/html"}
        assert kwargs["allow_redirects"] is False
        assert kwargs["timeout"] == 30
        assert kwargs["stream"] is True
        session.get.return_value.close.assert_called_once()

    @pytest.mark.parametrize("status_code", [301, 302, 404, 500])
    def test_fetch_non_2xx(self, session, status_code):
        session.get.return_value = make_response(status_code)
        client = FinePortalClient(session=session)

        with pytest.raises(PortalUnavailableError) as exc_info:
            client.fetch_announcement_html()
        assert exc_info.value.status_code == status_code
        assert exc_info.value.url == client.page_url

    def test_fetch_timeout(self, session):
        session.get.side_effect = requests.Timeout("timed out")
        client = FinePortalClient(session=session)

        with pytest.raises(PortalUnavailableError) as exc_info:
            client.fetch_announcement_html()
        assert isinstance(exc_info.value.original_error, requests.Timeout)

    def test_download_file(self, session):
        session.get.return_value = make_response(200, content=b"PK\x03\x04data")
        client = FinePortalClient(session=session)

        assert client.download_file(FILE_URL) == b"PK\x03\x04data"
        args, kwargs = session.get.call_args
        assert args[0] == FILE_URL
        assert kwargs["headers"] is None
        assert kwargs["allow_redirects"] is False
        assert kwargs["timeout"] == 30

    @pytest.mark.parametrize("status_code", [302, 403, 503])
    def test_download_non_2xx(self, session, status_code):
        session.get.return_value = make_response(status_code)
        client = FinePortalClient(session=session)

        with pytest.raises(DownloadFailedError) as exc_info:
            client.download_file(FILE_URL)
        assert exc_info.value.status_code == status_code

    def test_download_connection_error(self, session):
        session.get.side_effect = requests.ConnectionError("refused")
        client = FinePortalClient(session=session)

        with pytest.raises(DownloadFailedError) as exc_info:
            client.download_file(FILE_URL)
        assert exc_info.value.status_code is None

    def test_download_joins_chunks(self, session):
        session.get.return_value = make_response(200, chunks=[b"PK", b"\x03\x04", b"data"])
        client = FinePortalClient(session=session)
        assert client.download_file(FILE_URL) == b"PK\x03\x04data"

    def test_fetch_without_encoding_defaults_to_utf8(self, session):
        session.get.return_value = make_response(200, content="전자금융업".encode("utf-8"), encoding=None)
        client = FinePortalClient(session=session)
        assert client.fetch_announcement_html() == "전자금융업"

    def test_non_2xx_response_is_closed(self, session):
        resp = make_response(302)
        session.get.return_value = resp
        client = FinePortalClient(session=session)

        with pytest.raises(PortalUnavailableError):
            client.fetch_announcement_html()
        resp.close.assert_called_once()
        resp.iter_content.assert_not_called()


class TestOverallDeadline:
    """body를 조금씩 보내는 서버도 timeout 이후에는 실패해야 한다."""

    @pytest.fixture
    def clock(self):
        # 요청 시작 0초, 이후 chunk마다 29초씩 경과
        with patch("efbmonitor.client.time") as mock_time:
            mock_time.monotonic.side_effect = [0.0, 29.0, 58.0, 87.0]
            yield mock_time

    def test_slow_download_is_aborted(self, session, clock):
        resp = make_response(200, chunks=[b"a", b"b", b"c"])
        session.get.return_value = resp
        client = FinePortalClient(session=session)

        with pytest.raises(DownloadFailedError) as exc_info:
            client.download_file(FILE_URL)
        assert isinstance(exc_info.value.original_error, requests.Timeout)
        assert exc_info.value.status_code is None
        resp.close.assert_called_once()

    def test_slow_page_is_aborted(self, session, clock):
        session.get.return_value = make_response(200, chunks=[b"<html>", b"</html>"])
        client = FinePortalClient(session=session)

        with pytest.raises(PortalUnavailableError) as exc_info:
            client.fetch_announcement_html()
        assert isinstance(exc_info.value.original_error, requests.Timeout)

    def test_body_within_deadline_is_returned(self, session):
        with patch("efbmonitor.client.time") as mock_time:
            mock_time.monotonic.side_effect = [0.0, 10.0, 20.0]
            session.get.return_value = make_response(200, chunks=[b"PK", b"data"])
            client = FinePortalClient(session=session)
            assert client.download_file(FILE_URL) == b"PKdata"
