"""
gridsolver.grid パッケージ

盤面（グリッド）に関する処理をまとめたサブパッケージです。
- board.py  : N×N のマスを保持する Board
- parser.py : DataFrame やパズル文字列から内部表現への変換
"""
