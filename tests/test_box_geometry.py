#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ボックス座標Value Objectのテスト
"""
import pytest

from domain.vo.box_geometry import (
    PercentRect, PixelRect, SurfaceRect, centered_rect, clamp, clamp_rect, to_percent, to_pixels
)
from domain.vo.resize_handle import ResizeHandle
from domain.vo.resolution import Resolution


class TestPercentRect:
    """PercentRectのテスト"""

    def test_edges_and_center(self):
        """端と中心の計算"""
        rect = PercentRect(x=10, y=20, w=30, h=40)
        assert rect.right == 40
        assert rect.bottom == 60
        assert rect.center == (25, 40)

    def test_contains_point_inclusive(self):
        """境界上の点は内側とみなす"""
        rect = PercentRect(x=10, y=10, w=10, h=10)
        assert rect.contains_point(10, 10)
        assert rect.contains_point(20, 20)
        assert not rect.contains_point(20.01, 15)

    def test_nan_rejected(self):
        """NaNは拒否"""
        with pytest.raises(ValueError):
            PercentRect(x=float("nan"), y=0, w=1, h=1)

    def test_from_corners_any_order(self):
        """逆向きのドラッグでも正の幅・高さになる"""
        rect = PercentRect.from_corners(60, 70, 20, 30)
        assert rect == PercentRect(x=20, y=30, w=40, h=40)


class TestClampRect:
    """clamp_rectのテスト"""

    def test_inside_unchanged(self):
        rect = PercentRect(x=10, y=10, w=20, h=20)
        assert clamp_rect(rect) == rect

    def test_position_clamped_to_keep_size(self):
        """はみ出した位置はサイズを保ったまま戻す"""
        rect = clamp_rect(PercentRect(x=95, y=-5, w=20, h=10))
        assert rect == PercentRect(x=80, y=0, w=20, h=10)

    def test_size_clamped_to_full_frame(self):
        rect = clamp_rect(PercentRect(x=-10, y=0, w=150, h=120))
        assert rect == PercentRect(x=0, y=0, w=100, h=100)

    def test_minimum_size(self):
        """最小サイズ指定（高さ別指定）"""
        rect = clamp_rect(PercentRect(x=50, y=50, w=0.5, h=0.5), min_size_percent=2, min_height_percent=3)
        assert rect.w == 2
        assert rect.h == 3

    def test_clamp_prefers_lower_bound(self):
        assert clamp(5, 0, 10) == 5
        assert clamp(-1, 0, 10) == 0
        assert clamp(5, 10, 0) == 10


class TestPixelConversion:
    """ピクセル⇄パーセント変換のテスト"""

    def test_to_pixels_rounds_to_nearest(self):
        """最も近い整数ピクセルに丸める（0.5は切り上げ）"""
        rect = PercentRect(x=50, y=25, w=75, h=33.3)
        pixels = to_pixels(rect, 101, 102)
        assert pixels == PixelRect(x=51, y=26, w=76, h=34)

    def test_to_percent_is_exact_division(self):
        rect = to_percent(PixelRect(x=64, y=36, w=128, h=72), 1280, 720)
        assert (rect.x, rect.y, rect.w, rect.h) == pytest.approx((5, 5, 10, 10))

    def test_round_trip_within_one_pixel(self):
        """往復変換の誤差は1ピクセル以内"""
        original = PercentRect(x=12.345, y=67.891, w=23.456, h=11.111)
        restored = to_percent(to_pixels(original, 1920, 1080), 1920, 1080)
        assert abs(restored.x - original.x) * 1920 / 100 <= 1
        assert abs(restored.y - original.y) * 1080 / 100 <= 1
        assert abs(restored.w - original.w) * 1920 / 100 <= 1
        assert abs(restored.h - original.h) * 1080 / 100 <= 1

    def test_invalid_frame_size(self):
        with pytest.raises(ValueError):
            to_pixels(PercentRect(0, 0, 1, 1), 0, 100)
        with pytest.raises(ValueError):
            to_percent(PixelRect(0, 0, 1, 1), 100, -1)


class TestSurfaceRect:
    """SurfaceRectのテスト"""

    def test_percent_point(self):
        surface = SurfaceRect(left=100, top=50, width=400, height=200)
        assert surface.to_local(300, 150) == (200, 100)
        assert surface.to_percent_point(300, 150) == (50, 50)
        assert surface.contains(100, 50)
        assert not surface.contains(99, 50)

    def test_non_positive_size_rejected(self):
        with pytest.raises(ValueError):
            SurfaceRect(left=0, top=0, width=0, height=10)

    def test_centered_rect_clamped(self):
        """中心指定の矩形はフレーム内に収まる"""
        rect = centered_rect(2, 98, 15, 5)
        assert rect.x == 0
        assert rect.bottom == pytest.approx(100)


class TestResizeHandle:
    """ResizeHandleのテスト"""

    def test_edges(self):
        assert ResizeHandle.NORTH_WEST.moves_left_edge
        assert ResizeHandle.NORTH_WEST.moves_top_edge
        assert ResizeHandle.EAST.moves_right_edge
        assert not ResizeHandle.EAST.moves_top_edge
        assert not ResizeHandle.SOUTH.is_corner
        assert ResizeHandle.SOUTH_EAST.is_corner

    def test_from_string(self):
        assert ResizeHandle.from_string("ne") is ResizeHandle.NORTH_EAST
        with pytest.raises(ValueError):
            ResizeHandle.from_string("middle")


class TestResolution:
    """Resolutionのテスト"""

    def test_fit_into_letterbox(self):
        """横長フレームは上下に余白を取って収める"""
        surface = Resolution(1920, 1080).fit_into(0, 0, 960, 960)
        assert surface.width == pytest.approx(960)
        assert surface.height == pytest.approx(540)
        assert surface.top == pytest.approx(210)

    def test_invalid(self):
        with pytest.raises(ValueError):
            Resolution(0, 100)

    def test_large_resolution_accepted(self):
        """大きな解像度にも上限は無い"""
        resolution = Resolution(12000, 9000)
        surface = resolution.fit_into(0, 0, 1200, 900)
        assert surface.width == pytest.approx(1200)
        assert surface.height == pytest.approx(900)
