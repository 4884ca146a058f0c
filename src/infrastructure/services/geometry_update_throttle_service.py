#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ジオメトリ更新スロットリングサービス

ドラッグ / リサイズ中の途中更新の頻度を制御する独立したサービス
"""
from typing import Dict, Any
from collections import deque

import logging
logger = logging.getLogger(__name__)


class GeometryUpdateThrottleService:
    """ジオメトリ更新のスロットリングサービス

    イベント時刻を基準に、前回反映から最小間隔が経過した更新のみ通す。
    間引かれた更新の反映（ジェスチャー終了時）は呼び出し側の責務。
    """

    def __init__(self, updates_per_second: float = 60.0):
        """初期化

        Args:
            updates_per_second: 最大更新頻度（0で無制限）
        """
        self._min_interval_ms = 0.0
        self._updates_per_second = 0.0
        self._last_update_ms: float = None
        self.set_rate_limit(updates_per_second)

        # パフォーマンス統計
        self._intervals = deque(maxlen=100)
        self._dropped_updates = 0
        self._total_updates = 0

    def should_update(self, timestamp_ms: float) -> bool:
        """途中更新を反映すべきかを判定

        Args:
            timestamp_ms: イベント時刻（ミリ秒）

        Returns:
            反映すべきならTrue
        """
        self._total_updates += 1

        if self._last_update_ms is None or self._min_interval_ms <= 0:
            self._last_update_ms = timestamp_ms
            return True

        elapsed = timestamp_ms - self._last_update_ms
        if elapsed >= self._min_interval_ms:
            self._last_update_ms = timestamp_ms
            self._intervals.append(elapsed)
            return True

        self._dropped_updates += 1
        return False

    def reset(self) -> None:
        """次の更新を必ず通す"""
        self._last_update_ms = None

    def set_rate_limit(self, updates_per_second: float) -> None:
        """更新頻度の上限を設定

        Args:
            updates_per_second: 最大更新頻度（0で無制限）
        """
        if updates_per_second < 0:
            raise ValueError(f"Update rate must be non-negative, got {updates_per_second}")

        self._updates_per_second = updates_per_second
        self._min_interval_ms = 1000.0 / updates_per_second if updates_per_second > 0 else 0.0
        logger.debug(f"Geometry update limit set to {updates_per_second}/s ({self._min_interval_ms:.1f}ms interval)")

    def get_performance_stats(self) -> Dict[str, Any]:
        """パフォーマンス統計を取得

        Returns:
            統計情報の辞書
        """
        avg_interval = sum(self._intervals) / len(self._intervals) if self._intervals else 0
        drop_rate = self._dropped_updates / self._total_updates if self._total_updates > 0 else 0

        return {
            "updates_per_second": self._updates_per_second,
            "avg_interval_ms": avg_interval,
            "dropped_updates": self._dropped_updates,
            "total_updates": self._total_updates,
            "drop_rate": drop_rate,
        }

    def reset_stats(self) -> None:
        """統計をリセット"""
        self._intervals.clear()
        self._dropped_updates = 0
        self._total_updates = 0
