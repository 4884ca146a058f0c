#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Hotspot Test Builder - メインエントリポイント

動画フレームにクリック順ホットスポットと入力欄を配置し、
インタラクティブなテストを作成・受験するGUIツールのメインモジュール
"""
import sys
import os

# OpenCV-PyQt6競合を回避（最初に実行）
os.environ['OPENCV_IO_ENABLE_OPENEXR'] = '0'
if 'QT_PLUGIN_PATH' in os.environ:
    del os.environ['QT_PLUGIN_PATH']

# OpenCVのスレッドを無効化（PyQt6との競合を防ぐ）
import cv2
cv2.setNumThreads(0)

import argparse
import logging
from pathlib import Path
from typing import List, Optional

# バージョン情報
__version__ = "1.0.0"

CONFIG_DIR = Path.home() / ".config" / "hotspot_test_builder"


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None) -> None:
    """ロギングの設定

    Args:
        log_level: ログレベル（DEBUG, INFO, WARNING, ERROR, CRITICAL）
        log_file: ログファイルパス（Noneの場合はコンソールのみ）
    """
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=log_format,
        handlers=handlers,
        force=True
    )

    # PyQt6の過剰なデバッグログを抑制
    logging.getLogger("PyQt6").setLevel(logging.WARNING)


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """コマンドライン引数のパース

    Returns:
        パース済みの引数
    """
    parser = argparse.ArgumentParser(
        description="Hotspot Test Builder - 動画フレームからインタラクティブなテストを作成",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--video",
        type=str,
        help="起動時にフレームを抽出する動画ファイル"
    )
    source.add_argument(
        "--import",
        dest="package",
        type=str,
        help="起動時に読み込むテストパッケージ（.zip）"
    )

    parser.add_argument(
        "--config",
        type=str,
        help="設定ファイル（.yaml / .json）"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="デバッグモードで起動"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="ログレベル（デフォルト: 設定ファイルの値、無ければINFO）"
    )

    parser.add_argument(
        "--log-file",
        type=str,
        help="ログファイルパス"
    )

    return parser.parse_args(argv)


def find_config_file(explicit: Optional[str] = None) -> Optional[Path]:
    """設定ファイルパスを決定"""
    if explicit:
        return Path(explicit)
    for name in ("config.yaml", "config.yml", "config.json"):
        candidate = CONFIG_DIR / name
        if candidate.exists():
            return candidate
    return None


def main(argv: Optional[List[str]] = None) -> int:
    """メイン関数

    Returns:
        終了コード（0: 正常終了、1: エラー）
    """
    args = parse_arguments(argv)

    from infrastructure.container_config import ContainerConfigurator
    from infrastructure.di_container import DIContainer

    try:
        configurator = ContainerConfigurator(find_config_file(args.config))
    except (ValueError, OSError) as e:
        setup_logging("INFO", args.log_file)
        logging.error(f"設定ファイルを読み込めませんでした: {e}")
        return 1

    # ロギング設定（コマンドライン > 設定ファイル）
    log_level = "DEBUG" if args.debug else (args.log_level or configurator.log_level)
    setup_logging(log_level, args.log_file)

    logging.info(f"Hotspot Test Builder v{__version__} を起動しています...")
    logging.info(f"OpenCV threads: {cv2.getNumThreads()}")

    from PyQt6.QtWidgets import QApplication
    from core.authoring_workspace import AuthoringWorkspace
    from domain.dto.settings_dto import PackageSettingsDTO
    from domain.ports.secondary.performance_ports import IGeometryUpdateThrottle
    from ui.main_window import MainWindow

    app = QApplication(sys.argv if argv is None else [sys.argv[0]] + list(argv))
    app.setApplicationName("Hotspot Test Builder")
    app.setOrganizationName("HotspotTestBuilder")

    # DIコンテナの初期化
    container = DIContainer()
    try:
        configurator.configure_container(container)
    except ValueError as e:
        logging.error(f"コンポーネントの構成に失敗しました: {e}")
        return 1
    logging.debug("Container configured")

    window = MainWindow(
        container.resolve(AuthoringWorkspace),
        package_settings=container.resolve(PackageSettingsDTO),
        throttle=container.resolve(IGeometryUpdateThrottle),
    )

    # コマンドライン引数の処理
    if args.video:
        window.open_video(args.video)
    elif args.package:
        window.import_package(args.package)

    window.show()
    logging.info("アプリケーションを起動しました")

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
