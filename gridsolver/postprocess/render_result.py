# -*- coding: utf-8 -*-
"""
ソルバーの結果をもとに表示用の情報を構築するモジュールです。
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from ..csp.session import SolverSession
from ..errors import Contradiction, EnumerationOverflow, InvalidAssignment, SolverError
from ..grid.board import Board


def board_to_array(board: Board) -> np.ndarray:
    """
    盤面を「完成グリッド」の配列にします。

    確定したマスは 1 始まりの数字、未確定のマスは 0 です。
    """
    out = np.zeros((board.size, board.size), dtype=int)
    for r, c in board.positions():
        cell = board.cell((r, c))
        if cell.collapsed:
            out[r, c] = cell.value + 1
    return out


def board_to_dataframe(board: Board) -> pd.DataFrame:
    """
    盤面を文字列の DataFrame にします。

    未確定のマスは候補を "{1,2}" のように並べて表示します。
    """
    rows: List[List[str]] = []
    for r in range(board.size):
        row: List[str] = []
        for c in range(board.size):
            cell = board.cell((r, c))
            if cell.collapsed:
                row.append(str(cell.value + 1))
            else:
                row.append("{" + ",".join(str(v + 1) for v in cell.choices()) + "}")
        rows.append(row)
    return pd.DataFrame(rows)


def format_board(board: Board) -> str:
    """
    盤面をテキストで描きます。

    1マスを ceil(√K) × ceil(√K) の小さな枠で表し、
    確定したマスはその数字で埋め、未確定のマスは残っている候補の位置にだけ数字を書きます。
    """
    sub = math.ceil(math.sqrt(board.num_states))
    width = len(str(board.num_states))
    lines: List[str] = []
    for r in range(board.size):
        for i in range(sub):
            parts: List[str] = []
            for c in range(board.size):
                cell = board.cell((r, c))
                chunk = ""
                for j in range(sub):
                    index = i * sub + j
                    if cell.collapsed:
                        chunk += str(cell.value + 1).rjust(width)
                    elif index < board.num_states and cell.states >> index & 1:
                        chunk += str(index + 1).rjust(width)
                    else:
                        chunk += " " * width
                parts.append(chunk)
            lines.append(" ".join(parts).rstrip())
        lines.append("")
    return "\n".join(lines)


def build_candidates(board: Board) -> List[List[List[int]]]:
    """各マスの候補（1 始まり）を入れ子のリストで返します。"""
    return [
        [[v + 1 for v in board.cell((r, c)).choices()] for c in range(board.size)]
        for r in range(board.size)
    ]


def describe_error(error: SolverError) -> Dict[str, Any]:
    """例外を「どの条件で」「どの座標・値で」起きたかの辞書にします。"""
    if isinstance(error, Contradiction):
        return {
            "type": "contradiction",
            "position": list(error.position) if error.position is not None else None,
            "message": error.message,
        }
    if isinstance(error, InvalidAssignment):
        return {
            "type": "invalid_assignment",
            "position": list(error.position) if error.position is not None else None,
            "value": error.value + 1,
            "message": error.reason,
        }
    if isinstance(error, EnumerationOverflow):
        return {
            "type": "enumeration_overflow",
            "count": str(error.count),
            "limit": str(error.limit),
            "message": str(error),
        }
    return {"type": "error", "message": str(error)}


def build_result(
    session: SolverSession,
    error: Optional[SolverError] = None,
) -> Dict[str, Any]:
    """
    JSON にそのまま変換できる結果の辞書を作ります（DataFrame は返さない）。
    """
    board = session.board
    return {
        "status": session.state,
        "solved": session.is_solved(),
        "size": board.size,
        "num_states": board.num_states,
        "sweeps": session.sweeps,
        "solved_board": board_to_array(board).tolist(),
        "candidates": build_candidates(board),
        "text": format_board(board),
        "error": describe_error(error) if error is not None else None,
    }
