#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PyAV Frame Extractor Adapter

PyAVを使用した静止フレーム抽出アダプター実装。
IFrameExtractorポートの実装を提供。
"""
from typing import List, Optional, Union
from pathlib import Path
import logging
import math
import os

import av
import numpy as np

from domain.dto.frame_dto import FrameAssetDTO
from domain.dto.settings_dto import ExtractionSettingsDTO
from domain.ports.secondary.video_ports import ProgressCallback

logger = logging.getLogger(__name__)


def plan_sample_times(duration: float, max_frames: int, target_fps: float) -> List[float]:
    """
    抽出時刻（秒）を計画

    通常は max_frames 枚を全体から均等間隔で取得し、
    max_frames / target_fps 秒より短い動画では duration * target_fps 枚（最低1枚）に減らす。

    Args:
        duration: 動画の長さ（秒）
        max_frames: 最大枚数
        target_fps: 短い動画での抽出レート

    Returns:
        抽出時刻のリスト（昇順）
    """
    if duration <= 0:
        return [0.0]

    count = max_frames
    if duration < max_frames / target_fps:
        count = max(1, math.floor(duration * target_fps))

    interval = duration / count
    return [i * interval for i in range(count)]


class PyAVFrameExtractorAdapter:
    """
    PyAVを使用したフレーム抽出アダプター

    IFrameExtractorインターフェースの実装。
    先頭から順にデコードし、計画した各時刻以降の最初のフレームをRGB24で取得する。
    """

    def __init__(self, settings: Optional[ExtractionSettingsDTO] = None):
        """
        Args:
            settings: 抽出設定
        """
        self._settings = settings or ExtractionSettingsDTO()

    @property
    def settings(self) -> ExtractionSettingsDTO:
        return self._settings

    def extract_frames(self, path: Union[str, Path],
                       progress: Optional[ProgressCallback] = None) -> List[FrameAssetDTO]:
        """動画から静止フレームを抽出"""
        path = Path(path)
        size = os.path.getsize(path)
        if size > self._settings.max_video_bytes:
            limit_mb = self._settings.max_video_bytes / (1024 * 1024)
            raise ValueError(f"Video file is too large ({size} bytes, limit {limit_mb:.0f} MB)")

        try:
            container = av.open(str(path))
        except av.error.FFmpegError as e:
            raise IOError(f"Failed to open video file: {path}") from e

        try:
            stream = next((s for s in container.streams if s.type == 'video'), None)
            if stream is None:
                raise IOError(f"No video stream in file: {path}")

            duration = self._duration_of(container, stream)
            times = plan_sample_times(duration, self._settings.max_frames, self._settings.target_fps)
            logger.info(f"Extracting {len(times)} frames from {path.name} (duration {duration:.2f}s)")

            frames = self._decode_at(container, stream, times, progress)
        except av.error.FFmpegError as e:
            raise IOError(f"Failed to decode video file: {path}") from e
        finally:
            container.close()

        if not frames:
            raise IOError(f"No frames could be decoded from: {path}")
        return frames

    def _duration_of(self, container, stream) -> float:
        if stream.duration and stream.time_base:
            return float(stream.duration * stream.time_base)
        if container.duration:
            return container.duration / av.time_base
        fps = float(stream.average_rate) if stream.average_rate else 0.0
        if stream.frames and fps > 0:
            return stream.frames / fps
        return 0.0

    def _decode_at(self, container, stream, times: List[float],
                   progress: Optional[ProgressCallback]) -> List[FrameAssetDTO]:
        frames: List[FrameAssetDTO] = []
        fps = float(stream.average_rate) if stream.average_rate else 0.0
        # 時刻の比較は半フレーム分の誤差を許容
        tolerance = 0.5 / fps if fps > 0 else 0.0

        decoded_index = 0
        for frame in container.decode(stream):
            if len(frames) >= len(times):
                break

            if frame.time is not None:
                frame_time = float(frame.time)
            elif fps > 0:
                frame_time = decoded_index / fps
            else:
                frame_time = 0.0
            decoded_index += 1

            target = times[len(frames)]
            if frame_time + tolerance < target:
                continue

            image = np.ascontiguousarray(frame.to_ndarray(format='rgb24'))
            frames.append(FrameAssetDTO.from_image(image, timestamp=frame_time))
            if progress is not None:
                progress(int(round(len(frames) / len(times) * 100)))

        return frames
