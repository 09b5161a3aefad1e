# -*- coding: utf-8 -*-
"""
盤面のセルを内部表現に正規化するモジュールです。

主な役割:
- pandas.DataFrame やパズル文字列を numpy 配列（int）に変換
- 空きマスは 0、数字はそのまま（1..K）
- そこから「最初から確定しているマス」の一覧（0 始まりの状態）を取り出す
"""

from __future__ import annotations

from typing import Any, List, Tuple

import numpy as np
import pandas as pd

from ..types import Position

# 空きマスとして扱う文字
BLANK_TOKENS = {"", ".", "0", "_", "-"}


def normalize_cell(x: Any) -> int:
    """
    個々のセルの値を、内部表現（int）に変換します。

    変換ルール
    ----------
    - None / NaN / 空文字 / "." / "0" など: 0（空きマス）
    - 数字: その値（"7" → 7）
    - それ以外: ValueError
    """
    if x is None:
        return 0
    if isinstance(x, float) and np.isnan(x):
        return 0

    s = str(x).strip()
    if s in BLANK_TOKENS:
        return 0

    # 7.0 のような DataFrame 由来の浮動小数も受け付ける
    if s.endswith(".0") and s[:-2].isdigit():
        s = s[:-2]

    if s.isdigit():
        return int(s)

    raise ValueError(f"cannot interpret cell value {x!r}")


def normalize_grid(df: pd.DataFrame) -> np.ndarray:
    """
    DataFrame から 2次元 numpy 配列に変換し、
    各セルを :func:`normalize_cell` によって正規化します。

    Parameters
    ----------
    df : pandas.DataFrame
        入力の盤面データ（N×N）。

    Returns
    -------
    numpy.ndarray
        shape = (N, N) の int 配列。
    """
    rows, cols = df.shape
    if rows != cols:
        raise ValueError(f"board must be square, got {rows}x{cols}")

    grid = np.zeros((rows, cols), dtype=int)
    for i in range(rows):
        for j in range(cols):
            grid[i, j] = normalize_cell(df.iat[i, j])

    return grid


def parse_puzzle_string(text: str, size: int) -> np.ndarray:
    """
    "53..7...." のような1マス1文字のパズル文字列を配列にします。

    空白・改行は無視します。K が 10 以上の盤面には使えません
    （その場合は DataFrame で渡してください）。
    """
    chars = [ch for ch in text if not ch.isspace()]
    if len(chars) != size * size:
        raise ValueError(
            f"puzzle string has {len(chars)} cells, expected {size * size}"
        )
    values = [normalize_cell(ch) for ch in chars]
    return np.array(values, dtype=int).reshape(size, size)


def extract_givens(grid: np.ndarray) -> List[Tuple[Position, int]]:
    """
    配列から確定済みマスの一覧を取り出します。

    入力の数字は 1 始まり、内部の状態は 0 始まりなので 1 を引きます。
    """
    givens: List[Tuple[Position, int]] = []
    rows, cols = grid.shape
    for i in range(rows):
        for j in range(cols):
            v = int(grid[i, j])
            if v > 0:
                givens.append(((i, j), v - 1))
    return givens
