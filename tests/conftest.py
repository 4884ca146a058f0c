#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
テスト共通設定
"""
import os

# ディスプレイの無い環境でもUIテストを実行
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
