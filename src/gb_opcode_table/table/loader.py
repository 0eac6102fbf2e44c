# gb_opcode_table/table/loader.py
"""
オペコードテーブルローダーモジュール。
JSON形式のオペコードテーブル（"unprefixed" / "cbprefixed" の2セクション）を解析し、
OpcodeTableを生成します。
"""
import json
import logging
import re
from typing import Any, Dict, Iterable, List, Optional, TextIO, Tuple

from gb_opcode_table.common.errors import MalformedInputError, MissingFieldError
from gb_opcode_table.common.types import OpcodeKey
from gb_opcode_table.table.models import OpcodeRecord, OpcodeTable, Operand, Section

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("mnemonic", "bytes", "cycles")

_KEY_PATTERN = re.compile(r'^(?:0[xX](?P<hex>[0-9A-Fa-f]+)|\$(?P<dollar>[0-9A-Fa-f]+)|(?P<dec>[0-9]+))$')

# 出力行の区切り（改行・引用符）を壊す文字
_UNSAFE_TEXT = re.compile(r'[\x00-\x1f\x7f"]')

# @intent:utility_function オペコード識別子（0x, $, 10進）を整数値に変換します。
# @intent:pre-condition 前後の空白や符号、区切りの"_"を含む表記は受け付けません。
def parse_opcode_key(key: Any) -> int:
    if isinstance(key, bool):
        raise MalformedInputError(f"Invalid opcode identifier: {key!r}", opcode=str(key))
    if isinstance(key, int):
        value = key
    elif isinstance(key, str):
        match = _KEY_PATTERN.match(key)
        if not match:
            raise MalformedInputError(f"Invalid opcode identifier: {key!r}", opcode=key)
        if match.group("dec") is not None:
            value = int(match.group("dec"))
        else:
            value = int(match.group("hex") or match.group("dollar"), 16)
    else:
        raise MalformedInputError(f"Invalid opcode identifier: {key!r}", opcode=str(key))

    if not 0x00 <= value <= 0xFF:
        raise MalformedInputError(f"Opcode identifier out of byte range: {key}", opcode=str(key))
    return value


def _reject_duplicate_keys(pairs: List[Tuple[str, Any]]) -> Dict[str, Any]:
    result = {}
    for key, value in pairs:
        if key in result:
            raise MalformedInputError(f"Duplicate key in opcode table: {key}", opcode=key)
        result[key] = value
    return result


class OpcodeTableLoader:
    """
    JSON形式のオペコードテーブルを解析し、OpcodeTableを生成するローダー。
    """
    def load_from_file(self, path: str, sections: Optional[Iterable[Section]] = None) -> OpcodeTable:
        logger.debug("Loading opcode table from %s", path)
        with open(path, 'r', encoding="utf-8") as f:
            return self.load_from_stream(f, sections, source=path)

    def load_from_stream(self, stream: TextIO, sections: Optional[Iterable[Section]] = None,
                         source: str = "<stream>") -> OpcodeTable:
        try:
            text = stream.read()
        except UnicodeDecodeError as e:
            raise MalformedInputError(f"Opcode table {source} is not valid UTF-8: {e}")
        return self.load_from_string(text, sections, source=source)

    # @intent:responsibility JSON文字列を解析し、要求されたセクションのみを含むテーブルを返します。
    # @intent:pre-condition sectionsがNoneの場合は両セクションが必須です。
    def load_from_string(self, text: str, sections: Optional[Iterable[Section]] = None,
                         source: str = "<string>") -> OpcodeTable:
        try:
            data = json.loads(text, object_pairs_hook=_reject_duplicate_keys)
        except json.JSONDecodeError as e:
            raise MalformedInputError(f"Error parsing opcode table {source}: {e}")

        if not isinstance(data, dict):
            raise MalformedInputError(f"Opcode table {source} must be a JSON object at the top level")

        wanted = list(sections) if sections is not None else list(Section)
        parsed = {}
        for section in wanted:
            parsed[section] = self._parse_section(data, section)
            logger.info("Loaded %d opcodes from section '%s'", len(parsed[section]), section.value)
        return OpcodeTable(parsed)

    # @intent:responsibility 単一セクションだけを読み込むための簡易インターフェース。
    def load_section(self, source, section: Section) -> OpcodeTable:
        if hasattr(source, "read"):
            return self.load_from_stream(source, [section])
        return self.load_from_file(source, [section])

    def _parse_section(self, data: Dict[str, Any], section: Section) -> List[OpcodeRecord]:
        raw_section = data.get(section.value)
        if raw_section is None:
            raise MalformedInputError(f"Opcode table has no '{section.value}' section")
        if not isinstance(raw_section, dict):
            raise MalformedInputError(f"Section '{section.value}' must be a JSON object")

        records = []
        seen = {}
        for key, raw_record in raw_section.items():
            record = self._parse_record(key, raw_record, section)
            if record.value in seen:
                raise MalformedInputError(
                    f"Opcode {key} in section '{section.value}' duplicates {seen[record.value]} (0x{record.value:02X})",
                    opcode=key)
            seen[record.value] = key
            records.append(record)
        return records

    def _parse_record(self, key: OpcodeKey, raw: Any, section: Section) -> OpcodeRecord:
        if not isinstance(raw, dict):
            raise MalformedInputError(f"Opcode {key} in section '{section.value}' is not an object", opcode=key)

        for field_name in REQUIRED_FIELDS:
            if field_name not in raw:
                raise MissingFieldError(key, field_name, section.value)

        value = parse_opcode_key(key)

        mnemonic = raw["mnemonic"]
        if not isinstance(mnemonic, str) or not mnemonic:
            raise MalformedInputError(f"Opcode {key}: mnemonic must be a non-empty string", opcode=key)
        if _UNSAFE_TEXT.search(mnemonic):
            raise MalformedInputError(f"Opcode {key}: mnemonic contains a quote or control character: {mnemonic!r}", opcode=key)

        length = raw["bytes"]
        if isinstance(length, bool) or not isinstance(length, int) or length < 1:
            raise MalformedInputError(f"Opcode {key}: bytes must be a positive integer, got {length!r}", opcode=key)

        cycles = raw["cycles"]
        if not isinstance(cycles, list) or not 1 <= len(cycles) <= 2:
            raise MalformedInputError(f"Opcode {key}: cycles must be a list of one or two integers, got {cycles!r}", opcode=key)
        for cycle in cycles:
            if isinstance(cycle, bool) or not isinstance(cycle, int) or cycle < 0:
                raise MalformedInputError(f"Opcode {key}: invalid cycle count {cycle!r}", opcode=key)

        return OpcodeRecord(
            opcode=key,
            value=value,
            mnemonic=mnemonic,
            length=length,
            cycles=tuple(cycles),
            operands=self._parse_operands(key, raw.get("operands", [])),
        )

    def _parse_operands(self, key: OpcodeKey, raw_operands: Any) -> Tuple[Operand, ...]:
        if not isinstance(raw_operands, list):
            raise MalformedInputError(f"Opcode {key}: operands must be a list", opcode=key)
        operands = []
        for raw in raw_operands:
            if not isinstance(raw, dict) or "name" not in raw:
                raise MalformedInputError(f"Opcode {key}: operand must be an object with a name", opcode=key)
            if _UNSAFE_TEXT.search(str(raw["name"])):
                raise MalformedInputError(f"Opcode {key}: operand name contains a quote or control character: {raw['name']!r}", opcode=key)
            operands.append(Operand(name=str(raw["name"]), immediate=bool(raw.get("immediate", True))))
        return tuple(operands)
