#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
解像度Value Object

フレーム画像のネイティブ解像度を表現する不変オブジェクト。
パーセント⇄ピクセル変換と、表示領域へのレターボックス配置に使用する。
"""
from dataclasses import dataclass

from .box_geometry import SurfaceRect


@dataclass(frozen=True)
class Resolution:
    """
    解像度値オブジェクト

    ビデオから抽出したフレームの幅と高さ（px）。
    """

    width: int
    height: int

    def __post_init__(self):
        """検証"""
        if self.width <= 0:
            raise ValueError(f"Width must be positive, got {self.width}")

        if self.height <= 0:
            raise ValueError(f"Height must be positive, got {self.height}")

    def fit_into(self, left: float, top: float, width: float, height: float) -> SurfaceRect:
        """
        アスペクト比を保ちながら表示領域の中央に収まる描画面を計算

        Args:
            left: 表示領域の左端
            top: 表示領域の上端
            width: 表示領域の幅
            height: 表示領域の高さ

        Returns:
            フレーム画像を描画する矩形
        """
        scale = min(width / self.width, height / self.height)
        draw_w = max(1.0, self.width * scale)
        draw_h = max(1.0, self.height * scale)
        return SurfaceRect(
            left=left + (width - draw_w) / 2,
            top=top + (height - draw_h) / 2,
            width=draw_w,
            height=draw_h,
        )

    def __str__(self) -> str:
        """文字列表現"""
        return f"{self.width}x{self.height}"
