"""
共通の型定義を提供するモジュール。
プロジェクト全体で使用される汎用的な型エイリアスなどを定義します。
"""
from typing import List, Tuple

# @intent:data_structure ドキュメント上のオペコード識別子（例: "0x00"）。
OpcodeKey = str

# @intent:data_structure サイクル数の並び。条件分岐命令は (分岐成立, 分岐不成立) の2要素を持つ。
CycleCounts = Tuple[int, ...]

# @intent:data_structure parse_lineが返す (識別子, ニーモニック, バイト長, サイクル) のタプル。
ParsedLine = Tuple[OpcodeKey, str, int, List[int]]
