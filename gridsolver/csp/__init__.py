"""
gridsolver.csp パッケージ

制約充足（ドメインの絞り込み）に関する処理をまとめています。

主に以下の役割を持つモジュールから構成されています。
- domains.py     : ドメイン（ビットマスク）の補助関数
- rules.py       : 行・列・ブロックなどのルール
- enumerator.py  : 混合基数による組み合わせの列挙
- workers.py     : 独立した判定を配るワーカープール
- support.py     : 1マス・1候補値のサポート判定
- propagation.py : 盤面全体のスイープ
- brute_force.py : 総当たりによる厳密なドメインの計算
- session.py     : 上記をまとめたソルバーセッション
"""
