# -*- coding: utf-8 -*-
"""
gridsolver 全体で共通して使う設定値をまとめたモジュールです。

実運用時には、ここを編集することで
- ドメイン（候補集合）の最大状態数
- 並列実行のワーカー数
- 総当たり（brute force）の組み合わせ数上限
- ログ出力の設定
などを簡単に変更できます。
"""

from __future__ import annotations

import os
from typing import Optional, Tuple

# ==== ドメイン関連 =========================================================

# 1マスが取り得る状態数 K の上限。
# ドメインは int のビットマスクで表すので、ここを変えれば K の上限も変わります。
MAX_STATES: int = 64

# ==== ルール関連 ===========================================================

# solve() で何も指定されなかったときに使うルール名の並び
DEFAULT_RULES: Tuple[str, ...] = ("row", "column", "block")

# ==== 並列実行関連 =========================================================

# 候補値ごとのサポート判定・総当たりの区間分割で使うワーカー数。
# 1 以下ならスレッドを作らずにその場で順番に実行します。
MAX_WORKERS: int = int(os.getenv("GRIDSOLVER_MAX_WORKERS", "1"))

# 総当たりの添字区間を、ワーカー1つあたり何個のチャンクに分けるか
BRUTE_FORCE_CHUNKS_PER_WORKER: int = 4

# ==== 伝播・総当たり関連 ===================================================

# propagate_to_fixpoint() のスイープ回数上限。None なら上限なし。
MAX_SWEEPS: Optional[int] = None

# 総当たりで扱える組み合わせ数の上限（符号付き 64bit カウンタの幅）。
# これを超える盤面は黙って打ち切らず、EnumerationOverflow を送出します。
MAX_BRUTE_FORCE_COMBINATIONS: int = 2**63 - 1

# API 経由のリクエストで使う総当たりの上限。
# リクエストごとに数秒で返せる程度に抑え、超える盤面は EnumerationOverflow として返します。
API_MAX_BRUTE_FORCE_COMBINATIONS: int = int(os.getenv("GRIDSOLVER_API_MAX_COMBINATIONS", str(10**6)))

# 伝播が止まった（stalled）ときに総当たりで厳密なドメインを求めるかどうか
USE_BRUTE_FORCE_FALLBACK: bool = True

# ==== ログ関連 =============================================================

# セルごとのドメイン変化をファイルに書き出すかどうか
TRACE_ENABLED: bool = os.getenv("GRIDSOLVER_TRACE", "0") == "1"

# トレースログの保存先ディレクトリ
TRACE_LOG_DIR: str = "logs"
