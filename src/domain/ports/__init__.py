#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Ports (ポート定義)

Hexagonal Architectureのポート定義。
Primary（入力）とSecondary（出力）のポートを管理。
"""

# Primary Ports
from .primary import IBoxStore, IFrameGeometryEditor, ITestSession, Scheduler

# Secondary Ports
from .secondary import (
    IFrameExtractor, ProgressCallback,
    MalformedPackageError, IImageCodec, ITestPackageSerializer, ITestPackageRepository,
    IPointerEventSource, IPointerSubscription, PointerHandler,
    IGeometryUpdateThrottle
)

__all__ = [
    # Primary Ports - Editor
    "IBoxStore",
    "IFrameGeometryEditor",
    # Primary Ports - Session
    "ITestSession",
    "Scheduler",
    # Secondary Ports - Video
    "IFrameExtractor",
    "ProgressCallback",
    # Secondary Ports - Package
    "MalformedPackageError",
    "IImageCodec",
    "ITestPackageSerializer",
    "ITestPackageRepository",
    # Secondary Ports - Pointer
    "IPointerEventSource",
    "IPointerSubscription",
    "PointerHandler",
    # Secondary Ports - Performance
    "IGeometryUpdateThrottle",
]
