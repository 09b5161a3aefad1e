# -*- coding: utf-8 -*-
"""
混合基数（mixed-radix）による組み合わせの列挙を行うモジュールです。

位置ごとに候補数（基数）が異なる組み合わせを、1つの整数の添字で表します。

    添字 → 桁: 桁 i = index mod base_i, index //= base_i （位置 0 が最下位）
    桁 → 値  : 位置 i の候補タプルの「桁 i 番目」の値

確定済みのマスは候補が1つ（基数 1）なので、桁は常に 0 になり、
確定値がそのまま選ばれます。

サポート判定（support.py）と総当たり（brute_force.py）の両方で使います。
"""

from __future__ import annotations

import math
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

from ..errors import EnumerationOverflow

Choices = Sequence[Tuple[int, ...]]

# accept_suffix(position, values) : position 以降（上位桁側）の値が
# 部分的に成立しうるなら True を返すコールバック
SuffixCheck = Callable[[int, Sequence[int]], bool]


def bases_of(choices: Choices) -> List[int]:
    return [len(c) for c in choices]


def combination_count(bases: Sequence[int]) -> int:
    """組み合わせの総数（基数の積）。Python の int なので桁あふれしません。"""
    return math.prod(bases)


class MixedRadix:
    """
    基数の並びから、添字 ⇔ 桁ベクトルの変換を行うクラスです。

    Parameters
    ----------
    bases : sequence of int
        位置ごとの基数（候補数）。
    max_count : int, optional
        組み合わせ総数の上限。超える場合は EnumerationOverflow。
    """

    def __init__(self, bases: Sequence[int], max_count: Optional[int] = None) -> None:
        self.bases = list(bases)
        # weights[i] = bases[0] * ... * bases[i-1]（位置 i の桁の重み）
        self.weights: List[int] = []
        w = 1
        for b in self.bases:
            self.weights.append(w)
            w *= b
        self.count = w
        if max_count is not None and self.count > max_count:
            raise EnumerationOverflow(self.count, max_count)

    def decode(self, index: int) -> List[int]:
        if not 0 <= index < self.count:
            raise IndexError(f"index {index} out of range [0, {self.count})")
        digits: List[int] = []
        for base in self.bases:
            rem = index % base
            digits.append(rem)
            index //= base
        return digits

    def encode(self, digits: Sequence[int]) -> int:
        return sum(d * w for d, w in zip(digits, self.weights))

    def skip(self, index: int, position: int) -> int:
        """
        位置 position 以上の桁が今と異なる、最初の添字を返します。

        position より下位の桁はすべて 0 に戻り、
        position の桁が1つ進みます（必要なら上位へ繰り上がり）。
        """
        w = self.weights[position]
        return (index // w + 1) * w


def decode_values(index: int, choices: Choices) -> Tuple[int, ...]:
    """
    添字を、位置ごとの具体的な値のタプルに変換します。

    候補が1つの位置（確定済みのマス）は桁に関係なくその値になります。
    """
    values: List[int] = []
    for i, opts in enumerate(choices):
        if not opts:
            raise ValueError(f"position {i} has no admissible values")
        if len(opts) == 1:
            values.append(opts[0])
            continue
        rem = index % len(opts)
        values.append(opts[rem])
        index //= len(opts)
    return tuple(values)


def step(digits: Sequence[int], bases: Sequence[int]) -> List[int]:
    """
    桁ベクトルを辞書順で1つ進めます（最後の桁が最下位）。

    最大値の次は全桁 0 に戻るので、「一周したか」は
    呼び出し側が回数（基数の積）で判断する必要があります。
    """
    out = list(digits)
    i = len(out) - 1
    while i >= 0:
        out[i] += 1
        if out[i] < bases[i]:
            return out
        out[i] = 0
        i -= 1
    return out


def iter_digit_vectors(bases: Sequence[int]) -> Iterator[List[int]]:
    """全桁 0 から始めて、ちょうど基数の積の個数だけ桁ベクトルを返します。"""
    total = combination_count(bases)
    digits = [0] * len(bases)
    for _ in range(total):
        yield digits
        digits = step(digits, bases)


def scan(
    choices: Choices,
    accept_suffix: Optional[SuffixCheck] = None,
    start: int = 0,
    stop: Optional[int] = None,
    max_count: Optional[int] = None,
) -> Iterator[Tuple[int, Tuple[int, ...]]]:
    """
    [start, stop) の添字を昇順に調べ、(index, values) を返すジェネレータです。

    accept_suffix が与えられた場合、最上位の位置から順に
    「その位置以降の値」がまだ成立しうるかを確認し、
    位置 j で不成立なら j 以上の桁が変わる添字まで一気に飛ばします。
    飛ばした添字はどれも全体として不成立なので、
    結果は素朴な全列挙と同じになります。
    """
    radix = MixedRadix(bases_of(choices), max_count=max_count)
    end = radix.count if stop is None else min(stop, radix.count)
    n = len(choices)

    index = start
    while index < end:
        digits = radix.decode(index)
        values = [choices[i][d] for i, d in enumerate(digits)]

        failed_at = -1
        if accept_suffix is not None:
            for j in range(n - 1, -1, -1):
                if not accept_suffix(j, values):
                    failed_at = j
                    break

        if failed_at >= 0:
            index = radix.skip(index, failed_at)
            continue

        yield index, tuple(values)
        index += 1


def decode_board(index: int, row_choices: Sequence[Choices]) -> List[List[int]]:
    """
    盤面全体の添字を、行ごと・マスごとの2段階で展開します。

    外側: 各行の組み合わせ数を基数として、添字を行ごとの添字に分解
    内側: 行ごとの添字を、その行のマスの候補で展開
    """
    row_bases = [combination_count(bases_of(row)) for row in row_choices]
    outer = MixedRadix(row_bases)
    row_indices = outer.decode(index)
    return [
        list(decode_values(row_index, row))
        for row_index, row in zip(row_indices, row_choices)
    ]
