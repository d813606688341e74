# efbmonitor/cli.py
# -*- coding: utf-8 -*-

"""
efbmonitor command-line interface
"""

import argparse
import logging
import sys

from efbmonitor.service import EFinanceService
from efbmonitor.exceptions import (
    EfbMonitorError,
    InvalidArgumentError,
    StructureChangedError,
)
from efbmonitor.utils import allowed_business_types, allowed_statuses


def setup_logging(verbose: bool = False):
    """CLI logging 설정 (stderr)"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr
    )


def _report_error(e: EfbMonitorError) -> int:
    if isinstance(e, InvalidArgumentError):
        print(f"❌ 입력값 오류: {e}")
    elif isinstance(e, StructureChangedError):
        print(f"⚠️  {e}")
        print(f"   {e.hint}")
    else:
        print(f"❌ 오류: {e}")
    return 1


def search_command(
    service: EFinanceService,
    name: str = None,
    business_type: str = None,
    status: str = None,
    refresh: bool = False
) -> int:
    """
    업체 검색

    Returns:
        0 성공, 1 오류
    """
    try:
        report = service.search(
            company_name=name,
            business_type=business_type,
            status=status,
            refresh=refresh
        )
    except EfbMonitorError as e:
        return _report_error(e)
    print(report)
    return 0


def stats_command(service: EFinanceService, refresh: bool = False) -> int:
    """
    업종별 통계

    Returns:
        0 성공, 1 오류
    """
    try:
        report = service.statistics(refresh=refresh)
    except EfbMonitorError as e:
        return _report_error(e)
    print(report)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="전자금융업 등록/말소 현황 조회 (금융감독원 FINE 포털)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
예시:
  %(prog)s search --name 카카오
  %(prog)s search --type PG --status 등록
  %(prog)s stats --refresh
        """
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='상세 로그 출력'
    )

    subparsers = parser.add_subparsers(dest='command', help='실행할 명령')

    search_parser = subparsers.add_parser('search', help='업체 검색')
    search_parser.add_argument(
        '--name', '-n',
        default=None,
        help='업체명 (부분 일치)'
    )
    search_parser.add_argument(
        '--type', '-t',
        dest='business_type',
        default=None,
        help=f"업종 필터: {', '.join(allowed_business_types())} (기본값: 전체)"
    )
    search_parser.add_argument(
        '--status', '-s',
        default=None,
        help=f"상태 필터: {', '.join(allowed_statuses())} (기본값: 전체)"
    )
    search_parser.add_argument(
        '--refresh',
        action='store_true',
        help='cache를 무시하고 최신 데이터를 다시 가져옴'
    )

    stats_parser = subparsers.add_parser('stats', help='업종별 등록/말소 통계')
    stats_parser.add_argument(
        '--refresh',
        action='store_true',
        help='cache를 무시하고 최신 데이터를 다시 가져옴'
    )

    return parser


def main(argv=None):
    """CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(args.verbose)

    service = EFinanceService()

    try:
        if args.command == 'search':
            return search_command(
                service,
                name=args.name,
                business_type=args.business_type,
                status=args.status,
                refresh=args.refresh
            )
        elif args.command == 'stats':
            return stats_command(service, refresh=args.refresh)
        else:
            parser.print_help()
            return 1
    finally:
        service.client.close()


if __name__ == "__main__":
    sys.exit(main())
