# tests/table/test_formatter.py
"""
gb_opcode_table.table.formatterモジュールの単体テスト。
"""
import io
import json

import pytest

from gb_opcode_table.common.errors import MalformedInputError
from gb_opcode_table.table.formatter import format_record, format_section, parse_line, write_section
from gb_opcode_table.table.loader import OpcodeTableLoader
from gb_opcode_table.table.models import OpcodeRecord, Operand, Order, Section

# @intent:test_suite オペコード1件ごとの行整形と、セクション単位の整形の検証。

TABLE_DATA = {
    "unprefixed": {
        "0xC3": {"mnemonic": "JP", "bytes": 3, "cycles": [16]},
        "0x00": {"mnemonic": "NOP", "bytes": 1, "cycles": [4]},
        "0x20": {"mnemonic": "JR", "bytes": 2, "cycles": [12, 8]},
        "0xC0": {"mnemonic": "RET", "bytes": 1, "cycles": [20, 8]},
        "0x77": {
            "mnemonic": "LD", "bytes": 1, "cycles": [8],
            "operands": [{"name": "HL", "immediate": False}, {"name": "A", "immediate": True}],
        },
    },
    "cbprefixed": {
        "0x7C": {"mnemonic": "BIT", "bytes": 2, "cycles": [8]},
        "0x11": {"mnemonic": "RL", "bytes": 2, "cycles": [8]},
    },
}


@pytest.fixture
def table():
    return OpcodeTableLoader().load_from_string(json.dumps(TABLE_DATA))


class TestFormatRecord:
    # @intent:test_case_single_cycle サイクル数が1つのレコードの整形を検証します。
    def test_nop(self):
        record = OpcodeRecord(opcode="0x00", value=0x00, mnemonic="NOP", length=1, cycles=(4,))
        assert format_record(record) == '0x00, "NOP", 1, 4'

    # @intent:test_case_two_cycles サイクル数が2つのレコードは両方を記録順に出力することを検証します。
    def test_two_cycles_keep_order(self):
        record = OpcodeRecord(opcode="0xC0", value=0xC0, mnemonic="RET", length=1, cycles=(4, 1))
        assert format_record(record) == '0xC0, "RET", 1, 4, 1'

    def test_opcode_token_is_kept_verbatim(self):
        record = OpcodeRecord(opcode="0xcb", value=0xCB, mnemonic="PREFIX", length=1, cycles=(4,))
        assert format_record(record).startswith("0xcb, ")

    def test_with_operands(self):
        record = OpcodeRecord(
            opcode="0x77", value=0x77, mnemonic="LD", length=1, cycles=(8,),
            operands=(Operand("HL", immediate=False), Operand("A")),
        )
        assert format_record(record, with_operands=True) == '0x77, "LD (HL), A", 1, 8'
        assert format_record(record) == '0x77, "LD", 1, 8'

    def test_with_operands_no_operands(self):
        record = OpcodeRecord(opcode="0x00", value=0x00, mnemonic="NOP", length=1, cycles=(4,))
        assert format_record(record, with_operands=True) == '0x00, "NOP", 1, 4'


class TestFormatSection:
    def test_one_line_per_opcode_numeric_order(self, table):
        lines = format_section(table, Section.UNPREFIXED)
        assert lines == [
            '0x00, "NOP", 1, 4',
            '0x20, "JR", 2, 12, 8',
            '0x77, "LD", 1, 8',
            '0xC0, "RET", 1, 20, 8',
            '0xC3, "JP", 3, 16',
        ]

    def test_document_order(self, table):
        lines = format_section(table, Section.UNPREFIXED, Order.DOCUMENT)
        assert [line.split(",")[0] for line in lines] == ["0xC3", "0x00", "0x20", "0xC0", "0x77"]

    # @intent:test_case_isolation 選択したセクション以外の識別子が出力されないことを検証します。
    def test_section_isolation(self, table):
        unprefixed = {line.split(",")[0] for line in format_section(table, Section.UNPREFIXED)}
        cbprefixed = {line.split(",")[0] for line in format_section(table, Section.CB_PREFIXED)}

        assert unprefixed == set(TABLE_DATA["unprefixed"])
        assert cbprefixed == set(TABLE_DATA["cbprefixed"])
        assert unprefixed.isdisjoint(cbprefixed)

    # @intent:test_case_round_trip 出力行を分解すると元のニーモニック、バイト長、サイクル数に戻ることを検証します。
    def test_round_trip(self, table):
        for section in Section:
            for line in format_section(table, section):
                opcode, mnemonic, length, cycles = parse_line(line)
                raw = TABLE_DATA[section.value][opcode]
                assert mnemonic == raw["mnemonic"]
                assert length == raw["bytes"]
                assert cycles == raw["cycles"]

    def test_round_trip_with_operands(self, table):
        line = format_section(table, Section.UNPREFIXED, with_operands=True)[2]
        assert parse_line(line) == ("0x77", "LD (HL), A", 1, [8])

    def test_write_section(self, table):
        stream = io.StringIO()
        write_section(format_section(table, Section.CB_PREFIXED), stream)
        assert stream.getvalue() == '0x11, "RL", 2, 8\n0x7C, "BIT", 2, 8\n'


class TestParseLine:
    def test_single_cycle_field(self):
        assert parse_line('0x00, "NOP", 1, 4\n') == ("0x00", "NOP", 1, [4])

    @pytest.mark.parametrize("line", ["", "0x00 NOP 1 4", '0x00, "NOP", 1', '0x00, "NOP", 1, 4, 8, 12'])
    def test_invalid_lines(self, line):
        with pytest.raises(MalformedInputError):
            parse_line(line)
