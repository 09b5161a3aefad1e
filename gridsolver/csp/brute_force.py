# -*- coding: utf-8 -*-
"""
総当たり（brute force）で各マスの厳密なドメインを求めるモジュールです。

盤面全体の組み合わせ（各マスの候補数の積）をすべて調べ、
全ルールを満たす割り当てに1回でも現れた値だけを、そのマスのドメインとします。

- 解に現れうる値を取り除くことは決してありません（健全）
- ただし未確定マスの数に対して指数的に時間がかかるので、
  伝播が止まったときの最後の手段・テスト用の答え合わせ・小さな盤面に限って使います

組み合わせ数が上限（config.MAX_BRUTE_FORCE_COMBINATIONS）を超える場合は
何もせずに EnumerationOverflow を送出します。

添字の区間はチャンクに分けてワーカーに配り、
チャンクごとの「観測した値」のマスクを OR でまとめます。
"""

from __future__ import annotations

import math
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import BRUTE_FORCE_CHUNKS_PER_WORKER, MAX_BRUTE_FORCE_COMBINATIONS
from ..errors import Contradiction
from ..grid.board import Board
from ..logging_utils import get_logger
from ..types import Position
from .enumerator import MixedRadix, bases_of, decode_board, scan
from .rules import Rule
from .workers import WorkerPool

logger = get_logger()

Group = Tuple[Rule, Tuple[Position, ...]]


def collect_groups(board: Board, rules: Sequence[Rule]) -> List[Group]:
    """
    全マス × 全ルールのスコープ（自分自身を含む）を集めます。

    同じルールで同じ並びのスコープは1回だけ調べれば十分なので、重複は除きます。
    """
    groups: List[Group] = []
    seen = set()
    for pos in board.positions():
        for k, rule in enumerate(rules):
            scope = tuple(rule.scope(pos, include_self=True))
            if not scope or (k, scope) in seen:
                continue
            seen.add((k, scope))
            groups.append((rule, scope))
    return groups


def is_globally_valid(grid: List[List[int]], groups: Sequence[Group]) -> bool:
    """展開済みの盤面が、すべてのルールのすべてのスコープを満たすかどうか。"""
    for rule, scope in groups:
        if not rule.is_valid([grid[r][c] for r, c in scope]):
            return False
    return True


def split_range(total: int, num_chunks: int) -> List[Tuple[int, int]]:
    """[0, total) を、ほぼ同じ長さの連続した区間 num_chunks 個に分けます。"""
    num_chunks = max(1, min(num_chunks, total))
    width = math.ceil(total / num_chunks)
    return [(lo, min(lo + width, total)) for lo in range(0, total, width)]


def compute_exact_domains(
    board: Board,
    rules: Sequence[Rule],
    pool: Optional[WorkerPool] = None,
    max_combinations: int = MAX_BRUTE_FORCE_COMBINATIONS,
) -> Dict[Position, int]:
    """
    総当たりで各マスの厳密なドメイン（マスク）を求めます。盤面は変更しません。

    Raises
    ------
    EnumerationOverflow
        組み合わせ数が max_combinations を超える場合（走査を始める前に送出）。
    Contradiction
        ドメインが空のマスがある、または全ルールを満たす割り当てが1つも無い場合。
    """
    pool = pool or WorkerPool(1)
    n = board.size
    positions = list(board.positions())
    choices = [board.cell(pos).choices() for pos in positions]

    for pos, opts in zip(positions, choices):
        if not opts:
            raise Contradiction(pos, "empty domain found before brute force")

    radix = MixedRadix(bases_of(choices), max_count=max_combinations)
    total = radix.count
    row_choices = [choices[r * n:(r + 1) * n] for r in range(n)]
    groups = collect_groups(board, rules)

    # 位置 j を含むグループについて、j 以降（上位桁側）のメンバーの平坦な添字
    flat_index = {pos: i for i, pos in enumerate(positions)}
    suffix_checks: List[List[Tuple[Rule, List[int]]]] = [[] for _ in positions]
    for rule, scope in groups:
        members = [flat_index[p] for p in scope]
        for j in members:
            suffix_checks[j].append((rule, [m for m in members if m >= j]))

    def accept_suffix(j: int, values: Sequence[int]) -> bool:
        for rule, members in suffix_checks[j]:
            if not rule.is_partial_valid([values[m] for m in members]):
                return False
        return True

    def scan_chunk(bounds: Tuple[int, int]) -> Tuple[List[int], int]:
        lo, hi = bounds
        observed = [0] * len(positions)
        found = 0
        for index, values in scan(choices, accept_suffix, start=lo, stop=hi):
            grid = decode_board(index, row_choices)
            if not is_globally_valid(grid, groups):
                continue
            found += 1
            for i, v in enumerate(values):
                observed[i] |= 1 << v
        return observed, found

    num_chunks = pool.max_workers * BRUTE_FORCE_CHUNKS_PER_WORKER if pool.parallel else 1
    chunks = split_range(total, num_chunks)
    logger.info(
        "[brute_force] combinations=%d chunks=%d workers=%d",
        total, len(chunks), pool.max_workers,
    )

    merged = [0] * len(positions)
    solutions = 0
    for observed, found in pool.map(scan_chunk, chunks):
        solutions += found
        merged = [a | b for a, b in zip(merged, observed)]

    logger.info("[brute_force] globally valid assignments=%d", solutions)

    if solutions == 0:
        first_open = next((p for p in positions if not board.is_collapsed(p)), None)
        raise Contradiction(first_open, "no globally consistent assignment exists")

    return {pos: mask for pos, mask in zip(positions, merged)}


def brute_force_reduce(
    board: Board,
    rules: Sequence[Rule],
    pool: Optional[WorkerPool] = None,
    max_combinations: int = MAX_BRUTE_FORCE_COMBINATIONS,
) -> bool:
    """
    未確定マスのドメインを、総当たりで求めた厳密なドメインに置き換えます。

    確定済みのマスには触れません。候補が1つになったマスは確定します。

    Returns
    -------
    bool
        どれか1マスでもドメインが変化したら True。
    """
    try:
        exact = compute_exact_domains(board, rules, pool, max_combinations)
    except Contradiction as e:
        board.mark_contradiction(e.position)
        raise

    changed = False
    for pos, mask in exact.items():
        if board.is_collapsed(pos):
            continue
        if board.restrict(pos, mask):
            changed = True
    return changed
