# gb_opcode_table/table/models.py
"""
オペコードテーブルのデータモデル

このモジュールは、オペコードテーブルのセクション、各オペコードのレコード、
およびテーブル全体を表す読み取り専用のデータ構造を定義します。
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from gb_opcode_table.common.errors import MalformedInputError
from gb_opcode_table.common.types import CycleCounts, OpcodeKey

# @intent:responsibility テーブルのセクション（通常命令 / CBプレフィックス命令）を定義します。
class Section(Enum):
    UNPREFIXED = "unprefixed"
    CB_PREFIXED = "cbprefixed"

    # @intent:utility_function CLIや設定ファイルで使われるセクション指定文字列を解釈します。
    @classmethod
    def from_selector(cls, selector: str) -> "Section":
        key = selector.strip().lower().replace("-", "").replace("_", "")
        if key == "unprefixed":
            return cls.UNPREFIXED
        if key in ("cbprefixed", "cb"):
            return cls.CB_PREFIXED
        raise MalformedInputError(f"Unknown table section: {selector}")

# @intent:responsibility 出力時のオペコードの並び順を定義します。
class Order(Enum):
    NUMERIC = "numeric"   # 識別子の数値順
    DOCUMENT = "document" # 入力ドキュメントの記述順

# @intent:responsibility 命令のオペランド1つを記録します。
@dataclass(frozen=True)
class Operand:
    name: str
    immediate: bool = True

    def render(self) -> str:
        return self.name if self.immediate else f"({self.name})"

# @intent:responsibility 1つのオペコードに対応する命令メタデータを不変に記録します。
@dataclass(frozen=True)
class OpcodeRecord:
    """
    オペコード識別子、ニーモニック、バイト長、サイクル数を保持するデータクラス。
    opcodeはドキュメント上の表記をそのまま保持し、valueは整数値を保持します。
    """
    opcode: OpcodeKey # 例: "0x00"
    value: int # 例: 0x00
    mnemonic: str # 例: "NOP"
    length: int # 命令のバイト長
    cycles: CycleCounts # 例: (4,) または (12, 8)
    operands: Tuple[Operand, ...] = field(default_factory=tuple)

# @intent:responsibility ロード済みのオペコードテーブル全体を保持し、セクション単位の参照を提供します。
class OpcodeTable:
    """
    セクションごとのオペコードレコードを保持する読み取り専用のテーブル。
    レコードはドキュメントの記述順で保持されます。
    """
    def __init__(self, sections: Dict[Section, List[OpcodeRecord]]):
        self._sections = {section: list(records) for section, records in sections.items()}

    @property
    def sections(self) -> List[Section]:
        return list(self._sections.keys())

    # @intent:responsibility 指定セクションのレコードを指定された順序で返します。
    # @intent:pre-condition セクションがテーブルに存在しない場合はMalformedInputErrorを送出します。
    def records(self, section: Section, order: Order = Order.NUMERIC) -> List[OpcodeRecord]:
        if section not in self._sections:
            raise MalformedInputError(f"Opcode table has no '{section.value}' section")
        records = list(self._sections[section])
        if order == Order.NUMERIC:
            records.sort(key=lambda record: record.value)
        return records

    # @intent:responsibility 識別子（文字列または整数値）から1件のレコードを検索します。
    def lookup(self, section: Section, opcode) -> Optional[OpcodeRecord]:
        for record in self.records(section, Order.DOCUMENT):
            if isinstance(opcode, int):
                if record.value == opcode:
                    return record
            elif record.opcode.lower() == str(opcode).strip().lower():
                return record
        return None
