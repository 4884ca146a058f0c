#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Secondary Adapters (出力アダプター)

外部リソースへのアクセスを実装するアダプター。
Secondary Portの実装を提供。
"""

from .pyav_frame_extractor import PyAVFrameExtractorAdapter
from .opencv_image_codec import OpenCVImageCodecAdapter
from .zip_test_package_repository import JsonManifestSerializer, ZipTestPackageRepositoryAdapter

__all__ = [
    "PyAVFrameExtractorAdapter",
    "OpenCVImageCodecAdapter",
    "JsonManifestSerializer",
    "ZipTestPackageRepositoryAdapter",
]
