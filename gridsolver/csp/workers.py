# -*- coding: utf-8 -*-
"""
互いに独立した小さな計算をワーカーに配るためのモジュールです。

使い道は2つだけです。
- 1マスの候補値ごとのサポート判定（support.py）
- 総当たりの添字区間をチャンクに分けた走査（brute_force.py）

どちらも「読み取り専用の写し」を読み、自分の結果スロットにだけ書くので、
ロックは要りません。ルールに任意の関数（lambda など）を持たせられるよう、
プロセスではなくスレッドのプールを使います。
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence, TypeVar

from ..config import MAX_WORKERS

T = TypeVar("T")
R = TypeVar("R")


class WorkerPool:
    """
    上限つきのワーカープールです。

    max_workers が 1 以下ならスレッドを作らず、その場で順番に実行します。
    """

    def __init__(self, max_workers: int = MAX_WORKERS) -> None:
        self.max_workers = max(1, max_workers)
        self._executor: Optional[ThreadPoolExecutor] = None

    @property
    def parallel(self) -> bool:
        return self.max_workers > 1

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.max_workers, thread_name_prefix="gridsolver"
            )
        return self._executor

    def map(self, fn: Callable[[T], R], items: Sequence[T]) -> List[R]:
        """
        items の各要素に fn を適用し、投入した順に結果を返します。

        全タスクの完了を待ってから返すので（join）、
        呼び出し側は結果をそのまま組み立てに使えます。
        """
        if not self.parallel or len(items) <= 1:
            return [fn(item) for item in items]

        executor = self._get_executor()
        futures = [executor.submit(fn, item) for item in items]
        # 例外はここで呼び出し側に伝わる
        return [f.result() for f in futures]

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> "WorkerPool":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
