#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Secondary Ports (出力ポート)

外部リソースへのアクセスを定義するインターフェース。
動画ファイル、パッケージアーカイブ、ホストのイベントループなどへのアクセスポート。
"""

from .video_ports import IFrameExtractor, ProgressCallback
from .package_ports import (
    MalformedPackageError, IImageCodec, ITestPackageSerializer, ITestPackageRepository
)
from .pointer_ports import IPointerEventSource, IPointerSubscription, PointerHandler
from .performance_ports import IGeometryUpdateThrottle

__all__ = [
    # Video
    "IFrameExtractor",
    "ProgressCallback",
    # Package
    "MalformedPackageError",
    "IImageCodec",
    "ITestPackageSerializer",
    "ITestPackageRepository",
    # Pointer
    "IPointerEventSource",
    "IPointerSubscription",
    "PointerHandler",
    # Performance
    "IGeometryUpdateThrottle",
]
