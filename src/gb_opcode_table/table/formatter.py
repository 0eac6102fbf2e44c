# gb_opcode_table/table/formatter.py
"""
オペコードテーブル整形モジュール。

選択されたセクションの各オペコードを
`<opcode>, "<mnemonic>", <bytes>, <cycle>[, <cycle>]` 形式の1行に変換します。
"""
import logging
import re
from typing import List, TextIO

from gb_opcode_table.common.errors import MalformedInputError
from gb_opcode_table.common.types import ParsedLine
from gb_opcode_table.table.models import OpcodeRecord, OpcodeTable, Order, Section

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = ", "

_LINE_PATTERN = re.compile(r'^(?P<opcode>[^,\s]+), "(?P<mnemonic>.*)", (?P<bytes>\d+), (?P<cycles>\d+(?:, \d+)?)$')

# @intent:utility_function オペランド付きのニーモニック表記（例: "LD (HL), A"）を生成します。
def render_mnemonic(record: OpcodeRecord, with_operands: bool = False) -> str:
    if not with_operands or not record.operands:
        return record.mnemonic
    return record.mnemonic + " " + FIELD_SEPARATOR.join(op.render() for op in record.operands)

# @intent:responsibility 1件のレコードを1行のテキストに整形します。
def format_record(record: OpcodeRecord, with_operands: bool = False) -> str:
    """
    opcode, "mnemonic", bytes, cycle[, cycle] の順でフィールドを連結します。
    サイクル数が2つある場合は記録された順序（分岐成立, 分岐不成立）のまま出力します。
    """
    fields = [record.opcode, f'"{render_mnemonic(record, with_operands)}"', str(record.length)]
    fields.extend(str(cycle) for cycle in record.cycles)
    return FIELD_SEPARATOR.join(fields)

# @intent:responsibility 指定セクションの全レコードを整形し、行のリストを返します。
# @intent:rationale 全行を生成してから出力するため、途中でエラーが起きた場合は1行も出力されません。
def format_section(table: OpcodeTable, section: Section, order: Order = Order.NUMERIC,
                   with_operands: bool = False) -> List[str]:
    lines = [format_record(record, with_operands) for record in table.records(section, order)]
    logger.debug("Formatted %d lines for section '%s' (%s order)", len(lines), section.value, order.value)
    return lines

def write_section(lines: List[str], stream: TextIO) -> None:
    for line in lines:
        stream.write(line + "\n")

# @intent:utility_function 整形済みの1行をフィールドに分解します。
def parse_line(line: str) -> ParsedLine:
    """
    format_recordが出力した行を (opcode, mnemonic, bytes, cycles) に戻します。
    """
    match = _LINE_PATTERN.match(line.rstrip("\n"))
    if not match:
        raise MalformedInputError(f"Not a formatted opcode line: {line!r}")
    cycles = [int(value) for value in match.group("cycles").split(FIELD_SEPARATOR)]
    return match.group("opcode"), match.group("mnemonic"), int(match.group("bytes")), cycles
