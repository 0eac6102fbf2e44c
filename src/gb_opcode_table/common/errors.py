"""
オペコードテーブル処理で使用する例外の定義。
"""
from typing import Optional


class OpcodeTableError(ValueError):
    """オペコードテーブルの読み込み・整形に関するエラーの基底クラス。"""


# @intent:responsibility ドキュメントが解析できない、または期待するセクションや値の形式を持たないことを表します。
class MalformedInputError(OpcodeTableError):
    def __init__(self, message: str, opcode: Optional[str] = None):
        super().__init__(message)
        self.opcode = opcode


# @intent:responsibility オペコードレコードに必須フィールド（mnemonic/bytes/cycles）が欠けていることを表します。
class MissingFieldError(OpcodeTableError):
    def __init__(self, opcode: str, field_name: str, section: str):
        super().__init__(f"Opcode {opcode} in section '{section}' is missing field '{field_name}'")
        self.opcode = opcode
        self.field_name = field_name
        self.section = section
