# src/gb_opcode_table/table/__init__.py
"""
オペコードテーブルの読み込みと整形を行うパッケージ。
"""
from .models import Operand, OpcodeRecord, OpcodeTable, Order, Section
from .loader import OpcodeTableLoader, parse_opcode_key
from .formatter import format_record, format_section, parse_line, write_section
