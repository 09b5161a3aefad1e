# -*- coding: utf-8 -*-
"""
ログ出力の設定を行うモジュールです。

- get_logger()       : パッケージ共通のロガー（コンソール出力）
- get_trace_logger() : 伝播中のセルごとのドメイン変化を記録するファイルロガー

どちらも最初に呼ばれたときだけ handler を付け、2回目以降は同じロガーを返します。
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from .config import TRACE_LOG_DIR

LOGGER_NAME = "gridsolver"
TRACE_LOGGER_NAME = "gridsolver.trace"

CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
TRACE_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def _configure_once(
    name: str,
    make_handler,
    fmt: str,
    level: int,
    datefmt: Optional[str] = None,
) -> logging.Logger:
    """
    name のロガーに handler が無ければ make_handler() で作って付けます。

    make_handler は handler が必要になったときだけ呼ばれるので、
    ファイルやディレクトリの作成もそのときまで行いません。
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    handler = make_handler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=fmt, datefmt=datefmt))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger


def get_logger() -> logging.Logger:
    """gridsolver 全体で使う logger（標準エラー出力、INFO 以上）を返します。"""
    return _configure_once(LOGGER_NAME, logging.StreamHandler, CONSOLE_FORMAT, logging.INFO)


def get_trace_logger(log_dir: str = TRACE_LOG_DIR) -> logging.Logger:
    """
    伝播トレース用のロガーを返します。

    スイープのたびに全セルのドメインを書き出すと量が多いので、
    コンソールには出さずファイル（propagation_trace.log）にだけ書きます。
    """

    def make_file_handler() -> logging.Handler:
        os.makedirs(log_dir, exist_ok=True)
        return logging.FileHandler(
            os.path.join(log_dir, "propagation_trace.log"), encoding="utf-8"
        )

    logger = _configure_once(
        TRACE_LOGGER_NAME,
        make_file_handler,
        TRACE_FORMAT,
        logging.DEBUG,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # 親ロガー（gridsolver）への伝播禁止（stdout に出さない）
    logger.propagate = False
    return logger
