# cache.py
# -*- coding: utf-8 -*-

"""
In-memory snapshot cache (slot 1개, TTL 기반).
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from efbmonitor.config import CACHE_TTL_HOURS
from efbmonitor.models import DatasetSnapshot

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SnapshotCache:
    """
    DatasetSnapshot 하나를 TTL 동안 보관하는 cache.

    loader는 fetch -> extract -> download -> parse pipeline 전체를 실행하는 callable.
    cache는 loader의 예외를 그대로 전달하며, 실패 시 기존 snapshot을 유지한다.
    lock은 없다: 동시에 만료를 감지한 호출은 각자 pipeline을 실행하고 마지막 결과가 남는다.
    """

    def __init__(
        self,
        loader: Callable[[], DatasetSnapshot],
        ttl: timedelta = None,
        clock: Callable[[], datetime] = None
    ):
        """
        Args:
            loader: 새 snapshot을 만드는 callable
            ttl: 유효 기간 (기본 CACHE_TTL_HOURS)
            clock: 현재 시각 함수 (테스트에서 주입)
        """
        self._loader = loader
        self.ttl = ttl if ttl is not None else timedelta(hours=CACHE_TTL_HOURS)
        self._clock = clock or utc_now
        self._snapshot: Optional[DatasetSnapshot] = None

    @property
    def snapshot(self) -> Optional[DatasetSnapshot]:
        return self._snapshot

    def is_valid(self, now: datetime = None) -> bool:
        if self._snapshot is None:
            return False
        now = now or self._clock()
        return now - self._snapshot.fetched_at < self.ttl

    def get(self, force_refresh: bool = False, now: datetime = None) -> DatasetSnapshot:
        """
        snapshot 반환. 비어 있거나 만료됐거나 force_refresh면 loader를 실행한다.

        Args:
            force_refresh: True면 TTL과 무관하게 새로 가져옴
            now: 기준 시각 (None이면 clock())

        Returns:
            DatasetSnapshot

        Raises:
            loader가 발생시킨 예외 그대로
        """
        if not force_refresh and self.is_valid(now):
            logger.info("Using cached snapshot (within TTL)")
            return self._snapshot

        logger.info("Fetching data from FINE portal...")
        snapshot = self._loader()
        self._snapshot = snapshot
        logger.info(
            f"Cached snapshot: 등록 {len(snapshot.registered)}건, "
            f"말소 {len(snapshot.cancelled)}건 (기준일 {snapshot.data_date})"
        )
        return snapshot
