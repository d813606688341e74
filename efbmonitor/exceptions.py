# exceptions.py
# -*- coding: utf-8 -*-

"""
efbmonitor custom exceptions
"""


class EfbMonitorError(Exception):
    """efbmonitor의 모든 예외에 대한 base exception"""
    pass


class InvalidArgumentError(EfbMonitorError):
    """search/statistics 입력 파라미터가 허용 범위를 벗어난 경우"""

    def __init__(self, message: str = None, field: str = None, value=None, allowed=None):
        """
        Args:
            message: 오류 메시지
            field: 문제가 된 파라미터 이름
            value: 호출자가 전달한 값
            allowed: 허용되는 값 목록 (있는 경우)
        """
        self.message = message or "입력값이 올바르지 않습니다."
        self.field = field
        self.value = value
        self.allowed = list(allowed) if allowed else []
        super().__init__(self.message)


class ConfigurationError(EfbMonitorError):
    """환경 변수 설정값이 올바르지 않은 경우"""

    def __init__(self, message: str = None, field: str = None):
        self.message = message or "설정값이 올바르지 않습니다."
        self.field = field
        super().__init__(self.message)


class PortalUnavailableError(EfbMonitorError):
    """FINE 포털 공지 페이지를 가져오지 못한 경우"""

    def __init__(
        self,
        message: str = None,
        url: str = None,
        status_code: int = None,
        original_error: Exception = None
    ):
        self.message = message or "FINE 포털 페이지 요청에 실패했습니다."
        self.url = url
        self.status_code = status_code
        self.original_error = original_error
        super().__init__(self.message)


class DownloadFailedError(EfbMonitorError):
    """엑셀 파일 다운로드 실패"""

    def __init__(
        self,
        message: str = None,
        url: str = None,
        status_code: int = None,
        original_error: Exception = None
    ):
        self.message = message or "엑셀 파일 다운로드에 실패했습니다."
        self.url = url
        self.status_code = status_code
        self.original_error = original_error
        super().__init__(self.message)


class StructureChangedError(EfbMonitorError):
    """
    포털 측 페이지/파일 구조 변경으로 발생하는 오류의 base.
    호출자는 이 class 하나로 공통 안내 문구(hint)를 한 번 보여준다.
    """
    hint = "페이지 또는 파일 구조가 변경되었을 수 있습니다."


class LinkNotFoundError(StructureChangedError):
    """HTML에서 엑셀 다운로드 링크를 찾지 못한 경우"""

    def __init__(self, message: str = None, html_snippet: str = None):
        self.message = message or "FINE 포털 페이지에서 엑셀 파일 다운로드 링크를 찾을 수 없습니다."
        self.html_snippet = html_snippet
        super().__init__(self.message)


class UntrustedDownloadPathError(StructureChangedError):
    """다운로드 경로가 허용된 prefix 밖에 있는 경우"""

    def __init__(self, message: str = None, path: str = None):
        self.message = message or "추출된 다운로드 경로가 허용된 패턴과 일치하지 않습니다."
        self.path = path
        super().__init__(self.message)


class UnparseableDocumentError(StructureChangedError):
    """엑셀 파일이 예상한 시트/컬럼 구조와 맞지 않는 경우"""

    def __init__(self, message: str = None, file_name: str = None, original_error: Exception = None):
        self.message = message or "엑셀 파일에서 데이터를 추출할 수 없습니다."
        self.file_name = file_name
        self.original_error = original_error
        super().__init__(self.message)


class InternalError(EfbMonitorError):
    """dispatch 단계의 예상치 못한 오류 (내부 정보는 노출하지 않음)"""

    def __init__(self, message: str = None, original_error: Exception = None):
        self.message = message or "도구 실행 중 오류가 발생했습니다."
        self.original_error = original_error
        super().__init__(self.message)
