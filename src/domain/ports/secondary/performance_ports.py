#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
パフォーマンス最適化ポート

ドラッグ / リサイズ中のジオメトリ更新頻度を制御するインターフェース。
Hexagonal Architectureに従い、実装の詳細から独立したプロトコルを提供。
"""
from typing import Protocol, Dict, Any


class IGeometryUpdateThrottle(Protocol):
    """ジオメトリ更新スロットリングサービスのインターフェース

    途中更新を間引く。ジェスチャー終了時の最終ジオメトリは
    呼び出し側が必ず反映するため、間引きは確定結果に影響しない。
    """

    def should_update(self, timestamp_ms: float) -> bool:
        """途中更新を反映すべきかを判定

        Args:
            timestamp_ms: イベント時刻（ミリ秒）

        Returns:
            反映すべきならTrue
        """
        ...

    def reset(self) -> None:
        """ジェスチャー開始時に呼び、次の更新を必ず通す"""
        ...

    def set_rate_limit(self, updates_per_second: float) -> None:
        """更新頻度の上限を設定（0で無制限）"""
        ...

    def get_performance_stats(self) -> Dict[str, Any]:
        """統計情報を取得"""
        ...
