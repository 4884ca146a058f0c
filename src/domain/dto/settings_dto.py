#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
設定DTO定義

エディタ・テストセッション・フレーム抽出・パッケージの調整可能な定数。
ContainerConfigurator が設定辞書から生成してDIコンテナに登録する。
"""
from dataclasses import dataclass, asdict


@dataclass(frozen=True)
class EditorSettingsDTO:
    """
    編集操作の設定

    クリック判定の閾値、最小サイズ、既定ボックスの配置。
    """

    # クリック判定（これ未満ならクリック）
    click_max_duration_ms: float = 250.0
    click_max_distance_px: float = 5.0

    # ドラッグ描画の最小サイズ（%、幅・高さともにこれを超える必要あり）
    min_draw_size_percent: float = 1.0

    # リサイズ時の最小サイズ（描画面ピクセル）
    min_resize_px: float = 10.0

    # 既定ボックス（%）
    default_box_x: float = 42.5
    default_box_y: float = 45.0
    default_box_w: float = 15.0
    default_box_h: float = 5.0

    # ドラッグ/リサイズ中の途中更新の上限（回/秒、0で無制限）
    geometry_updates_per_second: float = 60.0

    def __post_init__(self):
        """検証"""
        if self.click_max_duration_ms <= 0:
            raise ValueError(f"Click duration threshold must be positive, got {self.click_max_duration_ms}")

        if self.click_max_distance_px <= 0:
            raise ValueError(f"Click distance threshold must be positive, got {self.click_max_distance_px}")

        if not 0 <= self.min_draw_size_percent < 100:
            raise ValueError(f"Minimum draw size must be in [0, 100), got {self.min_draw_size_percent}")

        if self.min_resize_px < 0:
            raise ValueError(f"Minimum resize size must be non-negative, got {self.min_resize_px}")

        if not (0 < self.default_box_w <= 100 and 0 < self.default_box_h <= 100):
            raise ValueError(
                f"Default box size must be in (0, 100], got {self.default_box_w}x{self.default_box_h}"
            )

        if self.geometry_updates_per_second < 0:
            raise ValueError(
                f"Geometry update rate must be non-negative, got {self.geometry_updates_per_second}"
            )

    def to_dict(self) -> dict:
        """辞書形式に変換"""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "EditorSettingsDTO":
        """辞書から生成（未知のキーは無視）"""
        return cls(**_known_fields(cls, data))


@dataclass(frozen=True)
class SessionSettingsDTO:
    """テスト再生のフィードバック遅延（ミリ秒）"""

    correct_feedback_ms: int = 300
    incorrect_feedback_ms: int = 700
    input_advance_ms: int = 100
    mistake_flash_ms: int = 700

    def __post_init__(self):
        """検証"""
        for name, value in asdict(self).items():
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")

    def to_dict(self) -> dict:
        """辞書形式に変換"""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "SessionSettingsDTO":
        """辞書から生成（未知のキーは無視）"""
        return cls(**_known_fields(cls, data))


@dataclass(frozen=True)
class ExtractionSettingsDTO:
    """動画からのフレーム抽出設定"""

    max_frames: int = 10
    target_fps: float = 1.0
    max_video_bytes: int = 200 * 1024 * 1024

    def __post_init__(self):
        """検証"""
        if self.max_frames < 1:
            raise ValueError(f"max_frames must be >= 1, got {self.max_frames}")

        if self.target_fps <= 0:
            raise ValueError(f"target_fps must be positive, got {self.target_fps}")

        if self.max_video_bytes <= 0:
            raise ValueError(f"max_video_bytes must be positive, got {self.max_video_bytes}")

    def to_dict(self) -> dict:
        """辞書形式に変換"""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "ExtractionSettingsDTO":
        """辞書から生成（未知のキーは無視）"""
        return cls(**_known_fields(cls, data))


@dataclass(frozen=True)
class PackageSettingsDTO:
    """テストパッケージ設定"""

    manifest_name: str = "test.json"
    default_archive_name: str = "test_package.zip"
    jpeg_quality: int = 90

    def __post_init__(self):
        """検証"""
        if not self.manifest_name:
            raise ValueError("Manifest name must not be empty")

        if not 1 <= self.jpeg_quality <= 100:
            raise ValueError(f"jpeg_quality must be in [1, 100], got {self.jpeg_quality}")

    def to_dict(self) -> dict:
        """辞書形式に変換"""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "PackageSettingsDTO":
        """辞書から生成（未知のキーは無視）"""
        return cls(**_known_fields(cls, data))


def _known_fields(cls, data: dict) -> dict:
    names = set(cls.__dataclass_fields__)
    return {key: value for key, value in data.items() if key in names}
