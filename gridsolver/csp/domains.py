# -*- coding: utf-8 -*-
"""
マスのドメイン（取り得る状態の集合）をビットマスクで扱うモジュールです。

状態 i が「まだ可能」なら i ビット目を立てます。
例: K=4 で {0, 2} が可能なら 0b0101。

Python の int は桁あふれしないので、K の上限は
config.MAX_STATES で決めるだけで済みます。
"""

from __future__ import annotations

from typing import Iterable, List, Tuple

from ..config import MAX_STATES


def check_num_states(num_states: int, max_states: int = MAX_STATES) -> int:
    """状態数 K が 1 以上 max_states 以下であることを確認して返します。"""
    if not 1 <= num_states <= max_states:
        raise ValueError(
            f"num_states must be between 1 and {max_states}, got {num_states}"
        )
    return num_states


def full_domain(num_states: int) -> int:
    """全状態が可能なドメイン（K 個のビットがすべて立ったマスク）を返します。"""
    return (1 << num_states) - 1


def value_mask(value: int) -> int:
    return 1 << value


def domain_from_values(values: Iterable[int]) -> int:
    mask = 0
    for v in values:
        mask |= 1 << v
    return mask


def domain_size(mask: int) -> int:
    return mask.bit_count()


def domain_values(mask: int) -> Tuple[int, ...]:
    """
    ドメインに含まれる状態を昇順のタプルで返します。

    この順番が列挙器（enumerator）の「桁の値 → 状態」の対応になるので、
    常に同じ順序であることが重要です。
    """
    values: List[int] = []
    i = 0
    while mask:
        if mask & 1:
            values.append(i)
        mask >>= 1
        i += 1
    return tuple(values)


def format_domain(mask: int) -> str:
    return "{" + ", ".join(str(v) for v in domain_values(mask)) + "}"
