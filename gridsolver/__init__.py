# gridsolver/__init__.py
# -*- coding: utf-8 -*-
"""
gridsolver パッケージの入口となるモジュールです。

api_proto/local_api.py などから:

    from gridsolver import solve

と呼び出されることを想定しています。

ここでは、盤面（pandas.DataFrame）を受け取り、
1. 盤面の正規化と確定済みマスの取り出し
2. ルールの組み立てとソルバーセッションの作成
3. 変化が無くなるまで制約伝播
4. 伝播が止まったら総当たりで厳密なドメインを計算（任意）
5. 表示用の結果構築
を順番に呼び出します。
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

import pandas as pd

from .config import (
    DEFAULT_RULES,
    MAX_BRUTE_FORCE_COMBINATIONS,
    MAX_SWEEPS,
    MAX_WORKERS,
    USE_BRUTE_FORCE_FALLBACK,
)
from .csp.rules import build_rules
from .csp.session import SolverSession
from .errors import (
    Contradiction,
    EnumerationOverflow,
    InvalidAssignment,
    SolverError,
)
from .grid.parser import extract_givens, normalize_grid
from .logging_utils import get_logger
from .postprocess.render_result import board_to_dataframe, build_result

__all__ = [
    "solve",
    "SolverSession",
    "SolverError",
    "InvalidAssignment",
    "Contradiction",
    "EnumerationOverflow",
]

logger = get_logger()


def solve(
    df: pd.DataFrame,
    rule_names: Sequence[str] = DEFAULT_RULES,
    num_states: Optional[int] = None,
    use_brute_force: bool = USE_BRUTE_FORCE_FALLBACK,
    max_workers: int = MAX_WORKERS,
    max_combinations: int = MAX_BRUTE_FORCE_COMBINATIONS,
) -> Dict[str, Any]:
    """
    盤面を解くメイン関数。

    Parameters
    ----------
    df : pandas.DataFrame
        N×N の盤面。空きマスは空文字・"."・0 など、数字は 1..K。
    rule_names : sequence of str
        使うルール名（"row", "column", "block", "diagonal", "anti_diagonal"）。
    num_states : int, optional
        状態数 K。省略時は N。
    use_brute_force : bool
        伝播が止まったときに総当たりを行うかどうか。
    max_workers : int
        ワーカー数。
    max_combinations : int
        総当たりで扱う組み合わせ数の上限。超える場合は総当たりを行わず error に記録します。

    Returns
    -------
    dict
        build_result() の結果。矛盾などは "status" と "error" に入ります。
    """
    logger.info("=== solve() START ===")
    logger.info("Grid shape: %s", df.shape)

    # 1) 盤面パース
    grid = normalize_grid(df)
    size = grid.shape[0]
    k = num_states or size
    givens = extract_givens(grid)
    logger.info("Givens: %d / %d cells, states=%d", len(givens), size * size, k)

    # 2) ルールとセッション
    rules = build_rules(rule_names, size, k)
    logger.info("Rules: %s", ", ".join(rule.name for rule in rules))

    with SolverSession(
        size, k, rules=rules, max_workers=max_workers, max_combinations=max_combinations
    ) as session:
        error: Optional[SolverError] = None
        try:
            for pos, value in givens:
                session.collapse(pos, value)

            # 3) 制約伝播
            session.propagate_to_fixpoint(MAX_SWEEPS)

            # 4) 伝播が止まったら総当たり → もう一度伝播
            if use_brute_force and not session.is_solved():
                logger.info("--- Stalled: brute force reduction ---")
                try:
                    if session.brute_force_reduce():
                        session.propagate_to_fixpoint(MAX_SWEEPS)
                except EnumerationOverflow as e:
                    logger.warning("Brute force skipped: %s", e)
                    error = e
            elif not session.is_solved():
                logger.info("Stalled; brute force disabled.")

        except (Contradiction, InvalidAssignment) as e:
            logger.warning("Solve failed: %s", e)
            error = e

        logger.info("Final state: %s (sweeps=%d)", session.state, session.sweeps)
        logger.debug("\n%s", board_to_dataframe(session.board).to_string(index=False, header=False))

        # 5) 表示用の結果
        result = build_result(session, error)

    logger.info("=== solve() END ===")
    return result
