#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ドメイン層

ボックス座標モデル、フレーム・ボックス・セッションのデータ定義、
および外部との境界となるポートを定義する層。
UIフレームワークへの依存を持たず、純粋なビジネスルールを表現する。
"""

# DTO
from .dto import (
    BoxType, BoxDTO, HotspotDTO, InputFieldDTO, FrameAssetDTO,
    PointerEventDTO, TestSessionStateDTO, ScoreDTO, NoticeDTO, NoticeLevel,
    EditorSettingsDTO, SessionSettingsDTO, ExtractionSettingsDTO, PackageSettingsDTO
)

# Value Objects
from .vo import (
    PercentRect, PixelRect, SurfaceRect, ResizeHandle, Resolution,
    to_pixels, to_percent, clamp_rect, centered_rect
)

# Ports
from .ports import (
    # Primary Ports
    IBoxStore, IFrameGeometryEditor, ITestSession,
    # Secondary Ports
    IFrameExtractor, MalformedPackageError, IImageCodec,
    ITestPackageSerializer, ITestPackageRepository,
    IPointerEventSource, IPointerSubscription, IGeometryUpdateThrottle
)

__all__ = [
    # DTO
    "BoxType",
    "BoxDTO",
    "HotspotDTO",
    "InputFieldDTO",
    "FrameAssetDTO",
    "PointerEventDTO",
    "TestSessionStateDTO",
    "ScoreDTO",
    "NoticeDTO",
    "NoticeLevel",
    "EditorSettingsDTO",
    "SessionSettingsDTO",
    "ExtractionSettingsDTO",
    "PackageSettingsDTO",
    # Value Objects
    "PercentRect",
    "PixelRect",
    "SurfaceRect",
    "ResizeHandle",
    "Resolution",
    "to_pixels",
    "to_percent",
    "clamp_rect",
    "centered_rect",
    # Primary Ports
    "IBoxStore",
    "IFrameGeometryEditor",
    "ITestSession",
    # Secondary Ports
    "IFrameExtractor",
    "MalformedPackageError",
    "IImageCodec",
    "ITestPackageSerializer",
    "ITestPackageRepository",
    "IPointerEventSource",
    "IPointerSubscription",
    "IGeometryUpdateThrottle",
]
