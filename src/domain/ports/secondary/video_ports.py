#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ビデオ処理ポート定義

動画から静止フレームを抽出するインターフェース。
"""
from typing import Protocol, Optional, List, Callable, Union
from pathlib import Path

from domain.dto.frame_dto import FrameAssetDTO


ProgressCallback = Callable[[int], None]


class IFrameExtractor(Protocol):
    """フレーム抽出インターフェース"""

    def extract_frames(
        self,
        path: Union[str, Path],
        progress: Optional[ProgressCallback] = None
    ) -> List[FrameAssetDTO]:
        """
        動画から均等間隔で静止フレームを抽出

        Args:
            path: 動画ファイルパス
            progress: 進捗コールバック（0〜100の整数）

        Returns:
            抽出したフレーム（時刻順、すべてテスト対象）

        Raises:
            ValueError: ファイルサイズが上限を超える場合
            IOError: 動画を読み込めない場合
        """
        ...
