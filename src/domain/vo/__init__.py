#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Value Objects (VO)

不変で検証付きの値オブジェクト。
ボックス座標モデル（パーセント⇄ピクセル変換）とハンドル種別を表現。
"""

from .box_geometry import (
    PercentRect, PixelRect, SurfaceRect,
    to_pixels, to_percent, clamp_rect, centered_rect
)
from .resize_handle import ResizeHandle
from .resolution import Resolution

__all__ = [
    "PercentRect",
    "PixelRect",
    "SurfaceRect",
    "to_pixels",
    "to_percent",
    "clamp_rect",
    "centered_rect",
    "ResizeHandle",
    "Resolution",
]
