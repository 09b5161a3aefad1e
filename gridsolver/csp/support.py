# -*- coding: utf-8 -*-
"""
1マス・1候補値についての「サポート判定」を行うモジュールです。

値 v がマス p でサポートされている、とは:

    p に関係するどのルールについても、
    グループ内の他のマスに（現在のドメインから）値を選び、
    p の位置に v を置いたとき、ルールを満たす組み合わせが少なくとも1つある

ことを言います。サポートの無い値は p のドメインから取り除きます。

ルールに渡す値は、総当たり（brute_force.py）と同じく
常に group_of(p) の並び順です。

他のマスの候補は、p の判定を始めた時点の写し（Board.choices_snapshot）から読みます。
候補値ごとの判定は互いに独立なので、WorkerPool に配って並列に実行できます。
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from ..config import TRACE_ENABLED
from ..grid.board import Board
from ..logging_utils import get_trace_logger
from ..types import Position
from .domains import domain_from_values, format_domain
from .enumerator import Choices, scan
from .rules import Rule
from .workers import WorkerPool

# (ルール, グループの並び順の候補タプル, グループ内での p の位置)
RuleScope = Tuple[Rule, List[Tuple[int, ...]], int]


def has_support(rule: Rule, value: int, group_choices: Choices, index: int) -> bool:
    """
    group_choices の index 番目を value に固定した直積の中に、
    rule.is_valid を満たす組み合わせがあれば True を返します。

    Parameters
    ----------
    rule : Rule
        判定するルール。
    value : int
        p に置く値。
    group_choices : sequence of tuple
        グループの並び順に並べた各マスの候補。
    index : int
        グループ内での p の位置（group_choices[index] は無視されます）。
    """
    choices = list(group_choices)
    choices[index] = (value,)

    # 候補の少ない位置ほど上位の桁に置く。
    # 確定済みのマスとの衝突が最初の数手で見つかり、まとめて飛ばせる。
    order = sorted(range(len(choices)), key=lambda i: len(choices[i]), reverse=True)
    ordered = [choices[i] for i in order]

    # 桁 k 以上に置いたマスを、グループの並び順に戻したときの桁番号
    suffix_members = [
        sorted(range(k, len(order)), key=lambda m: order[m]) for k in range(len(order))
    ]

    def accept_suffix(position: int, values: Sequence[int]) -> bool:
        return rule.is_partial_valid([values[m] for m in suffix_members[position]])

    for _, values in scan(ordered, accept_suffix):
        restored = [0] * len(values)
        for k, i in enumerate(order):
            restored[i] = values[k]
        if rule.is_valid(restored):
            return True
    return False


def collect_rule_scopes(
    snapshot: Dict[Position, Tuple[int, ...]],
    pos: Position,
    rules: Sequence[Rule],
) -> List[RuleScope]:
    """
    p に関係するルールごとに、グループの候補を写しから取り出します。

    p を含まないルールは含めません。
    """
    scopes: List[RuleScope] = []
    for rule in rules:
        group = rule.group_of(pos)
        if pos not in group:
            continue
        scopes.append((rule, [snapshot[q] for q in group], group.index(pos)))
    return scopes


def supported_values(
    board: Board,
    pos: Position,
    rules: Sequence[Rule],
    pool: Optional[WorkerPool] = None,
) -> int:
    """
    p の現在のドメインのうち、すべてのルールでサポートされる値のマスクを返します。

    ルールの順番は結果に影響せず、最初に不成立になったルールで打ち切るだけです。
    """
    pool = pool or WorkerPool(1)
    snapshot = board.choices_snapshot()
    candidates = snapshot[pos]
    scopes = collect_rule_scopes(snapshot, pos, rules)

    def check_value(value: int) -> bool:
        return all(
            has_support(rule, value, group_choices, index)
            for rule, group_choices, index in scopes
        )

    results = pool.map(check_value, candidates)
    return domain_from_values(v for v, ok in zip(candidates, results) if ok)


def update_cell(
    board: Board,
    pos: Position,
    rules: Sequence[Rule],
    pool: Optional[WorkerPool] = None,
) -> bool:
    """
    p のドメインをサポートのある値だけに絞り込みます。

    候補が1つになれば確定し、空になれば Contradiction を送出します
    （Board.restrict 参照）。確定済みのマスは何もしません。

    Returns
    -------
    bool
        ドメインが変化したかどうか。
    """
    cell = board.cell(pos)
    if cell.collapsed:
        return False

    before = cell.states
    mask = supported_values(board, pos, rules, pool)

    if TRACE_ENABLED:
        get_trace_logger().debug(
            "cell %s: %s -> %s", pos, format_domain(before), format_domain(before & mask)
        )

    return board.restrict(pos, mask)
