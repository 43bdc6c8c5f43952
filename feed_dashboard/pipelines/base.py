"""Pipeline 抽象基底類別（抽取 → 轉換，含計時與錯誤保護）。

儀表板不落地任何彙總結果，因此只有 extract / transform 兩段，run() 直接回傳轉換結果。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar
import time
import traceback

from feed_dashboard.utils.logging import get_logger

logger = get_logger(__name__)

RawT = TypeVar("RawT")
OutT = TypeVar("OutT")


class BasePipeline(ABC, Generic[RawT, OutT]):
    """所有 Pipeline 的共同介面。"""

    name: str = "base-pipeline"

    @abstractmethod
    def extract(self) -> RawT:
        """實作資料抽取邏輯。"""

    @abstractmethod
    def transform(self, raw_items: RawT) -> OutT:
        """實作資料轉換邏輯。"""

    def run(self) -> OutT:
        """執行 Pipeline 全流程。"""
        start_ts = time.time()
        logger.info("開始執行 Pipeline：%s", self.name)
        try:
            raw_items = self.extract()
            logger.info("[%s] 抽取完成（%.2fs）", self.name, time.time() - start_ts)

            t0 = time.time()
            result = self.transform(raw_items)
            logger.info("[%s] 轉換完成（%.2fs）", self.name, time.time() - t0)

            logger.info("Pipeline 完成：%s（總耗時 %.2fs）", self.name, time.time() - start_ts)
            return result
        except Exception as e:
            logger.error("Pipeline 失敗：%s | %s", self.name, e)
            logger.debug("Traceback:\n%s", traceback.format_exc())
            raise
