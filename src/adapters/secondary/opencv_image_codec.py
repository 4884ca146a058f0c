#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
OpenCV Image Codec Adapter

OpenCVを使用した画像エンコード / デコードアダプター実装。
IImageCodecポートの実装を提供。ドメイン側はRGB24、OpenCV側はBGRで扱う。
"""
import numpy as np
import cv2


class OpenCVImageCodecAdapter:
    """
    OpenCVを使用した画像コーデックアダプター

    IImageCodecインターフェースの実装。
    """

    def encode_jpeg(self, image: np.ndarray, quality: int = 90) -> bytes:
        """RGB24画像をJPEGにエンコード"""
        if image.ndim != 3 or image.shape[2] != 3:
            raise ValueError(f"Expected (h, w, 3) RGB image, got shape {image.shape}")

        bgr = cv2.cvtColor(image, cv2.COLOR_RGB2BGR)
        ok, buffer = cv2.imencode(".jpg", bgr, [int(cv2.IMWRITE_JPEG_QUALITY), int(quality)])
        if not ok:
            raise ValueError("JPEG encoding failed")
        return buffer.tobytes()

    def decode(self, data: bytes) -> np.ndarray:
        """画像データをRGB24にデコード"""
        buffer = np.frombuffer(data, dtype=np.uint8)
        bgr = cv2.imdecode(buffer, cv2.IMREAD_COLOR) if buffer.size else None
        if bgr is None:
            raise ValueError("Image data could not be decoded")
        return cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB)
