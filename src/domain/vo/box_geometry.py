#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ボックス座標Value Object

フレーム上の矩形をパーセント正規化座標で表現する不変オブジェクトと、
ピクセル座標との相互変換・クランプ処理を提供する。
すべての関数は状態を持たない純粋関数。
"""
from dataclasses import dataclass
from typing import Optional, Tuple


# パーセント座標の全域
FULL_PERCENT = 100.0


@dataclass(frozen=True)
class PercentRect:
    """
    パーセント正規化矩形

    x, w はフレーム幅に対する割合、y, h はフレーム高さに対する割合（0〜100）。
    """

    x: float
    y: float
    w: float
    h: float

    def __post_init__(self):
        """検証"""
        for name in ("x", "y", "w", "h"):
            value = getattr(self, name)
            if value != value:  # NaN
                raise ValueError(f"{name} must be a number, got NaN")

    @property
    def right(self) -> float:
        """右端"""
        return self.x + self.w

    @property
    def bottom(self) -> float:
        """下端"""
        return self.y + self.h

    @property
    def center(self) -> Tuple[float, float]:
        """中心座標"""
        return (self.x + self.w / 2, self.y + self.h / 2)

    def contains_point(self, px: float, py: float) -> bool:
        """指定パーセント座標が矩形内にあるか判定"""
        return self.x <= px <= self.right and self.y <= py <= self.bottom

    def is_within_frame(self, tolerance: float = 1e-9) -> bool:
        """矩形がフレーム内に収まっているか"""
        return (
            -tolerance <= self.x
            and -tolerance <= self.y
            and self.w >= 0
            and self.h >= 0
            and self.right <= FULL_PERCENT + tolerance
            and self.bottom <= FULL_PERCENT + tolerance
        )

    def moved_to(self, x: float, y: float) -> "PercentRect":
        """位置のみ変更した矩形を返す"""
        return PercentRect(x=x, y=y, w=self.w, h=self.h)

    def to_dict(self) -> dict:
        """辞書形式に変換"""
        return {"x": self.x, "y": self.y, "w": self.w, "h": self.h}

    @classmethod
    def from_dict(cls, data: dict) -> "PercentRect":
        """辞書から生成"""
        return cls(x=float(data["x"]), y=float(data["y"]),
                   w=float(data["w"]), h=float(data["h"]))

    @classmethod
    def from_corners(cls, x1: float, y1: float, x2: float, y2: float) -> "PercentRect":
        """2点（順不同）から矩形を生成"""
        left, right = min(x1, x2), max(x1, x2)
        top, bottom = min(y1, y2), max(y1, y2)
        return cls(x=left, y=top, w=right - left, h=bottom - top)


@dataclass(frozen=True)
class PixelRect:
    """
    ピクセル矩形

    フレームのネイティブ解像度上の整数ピクセル座標。
    """

    x: int
    y: int
    w: int
    h: int

    def to_dict(self) -> dict:
        """辞書形式に変換"""
        return {"x": self.x, "y": self.y, "w": self.w, "h": self.h}


@dataclass(frozen=True)
class SurfaceRect:
    """
    描画面の矩形

    ポインタイベントと同じ座標系（ビューポート座標）での
    フレーム画像の表示位置とサイズ。表示サイズはウィンドウ操作で変化する。
    """

    left: float
    top: float
    width: float
    height: float

    def __post_init__(self):
        """検証"""
        if self.width <= 0:
            raise ValueError(f"Surface width must be positive, got {self.width}")

        if self.height <= 0:
            raise ValueError(f"Surface height must be positive, got {self.height}")

    def to_local(self, client_x: float, client_y: float) -> Tuple[float, float]:
        """ビューポート座標を描画面ローカルのピクセル座標に変換"""
        return (client_x - self.left, client_y - self.top)

    def to_percent_point(self, client_x: float, client_y: float) -> Tuple[float, float]:
        """ビューポート座標を描画面上のパーセント座標に変換（クランプなし）"""
        local_x, local_y = self.to_local(client_x, client_y)
        return (local_x / self.width * FULL_PERCENT, local_y / self.height * FULL_PERCENT)

    def contains(self, client_x: float, client_y: float) -> bool:
        """ビューポート座標が描画面内か判定"""
        local_x, local_y = self.to_local(client_x, client_y)
        return 0 <= local_x <= self.width and 0 <= local_y <= self.height


def clamp(value: float, lower: float, upper: float) -> float:
    """値を[lower, upper]に収める（upper < lower の場合はlowerを優先）"""
    return max(lower, min(value, upper))


def to_pixels(rect: PercentRect, frame_width: int, frame_height: int) -> PixelRect:
    """
    パーセント矩形をピクセル矩形に変換

    各座標を最も近い整数ピクセルに丸める。

    Args:
        rect: パーセント矩形
        frame_width: フレーム幅（px）
        frame_height: フレーム高さ（px）

    Returns:
        ピクセル矩形
    """
    if frame_width <= 0 or frame_height <= 0:
        raise ValueError(f"Frame size must be positive, got {frame_width}x{frame_height}")

    return PixelRect(
        x=_round_half_up(rect.x / FULL_PERCENT * frame_width),
        y=_round_half_up(rect.y / FULL_PERCENT * frame_height),
        w=_round_half_up(rect.w / FULL_PERCENT * frame_width),
        h=_round_half_up(rect.h / FULL_PERCENT * frame_height),
    )


def to_percent(rect: PixelRect, frame_width: int, frame_height: int) -> PercentRect:
    """
    ピクセル矩形をパーセント矩形に変換（丸めなしの除算）

    Args:
        rect: ピクセル矩形
        frame_width: フレーム幅（px）
        frame_height: フレーム高さ（px）

    Returns:
        パーセント矩形
    """
    if frame_width <= 0 or frame_height <= 0:
        raise ValueError(f"Frame size must be positive, got {frame_width}x{frame_height}")

    return PercentRect(
        x=rect.x / frame_width * FULL_PERCENT,
        y=rect.y / frame_height * FULL_PERCENT,
        w=rect.w / frame_width * FULL_PERCENT,
        h=rect.h / frame_height * FULL_PERCENT,
    )


def clamp_rect(rect: PercentRect, min_size_percent: float = 0.0,
               min_height_percent: Optional[float] = None) -> PercentRect:
    """
    矩形をフレーム内にクランプ

    w, h を [最小サイズ, 100] に、x, y を [0, 100-w] / [0, 100-h] に収める。

    Args:
        rect: 候補矩形
        min_size_percent: 最小サイズ（幅、高さ指定がなければ高さにも適用）
        min_height_percent: 高さの最小サイズ

    Returns:
        クランプ後の矩形
    """
    min_w = clamp(min_size_percent, 0.0, FULL_PERCENT)
    min_h = min_w if min_height_percent is None else clamp(min_height_percent, 0.0, FULL_PERCENT)

    w = clamp(rect.w, min_w, FULL_PERCENT)
    h = clamp(rect.h, min_h, FULL_PERCENT)
    x = clamp(rect.x, 0.0, FULL_PERCENT - w)
    y = clamp(rect.y, 0.0, FULL_PERCENT - h)
    return PercentRect(x=x, y=y, w=w, h=h)


def centered_rect(cx: float, cy: float, w: float, h: float) -> PercentRect:
    """中心座標とサイズから矩形を生成し、フレーム内にクランプ"""
    return clamp_rect(PercentRect(x=cx - w / 2, y=cy - h / 2, w=w, h=h))


def _round_half_up(value: float) -> int:
    """四捨五入（Pythonの偶数丸めを避ける）"""
    if value >= 0:
        return int(value + 0.5)
    return -int(-value + 0.5)
