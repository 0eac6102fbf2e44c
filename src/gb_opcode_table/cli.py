# gb_opcode_table/cli.py
"""
コマンドラインのエントリポイント。
オペコードテーブルの指定セクションを整形し、標準出力（またはファイル）へ書き出します。
"""
import argparse
import logging
import sys
from typing import List, Optional, TextIO

from gb_opcode_table.common.errors import MalformedInputError, OpcodeTableError
from gb_opcode_table.config.loader import ConfigLoader
from gb_opcode_table.config.models import FormatterConfig
from gb_opcode_table.table.formatter import format_record, format_section, write_section
from gb_opcode_table.table.loader import OpcodeTableLoader, parse_opcode_key
from gb_opcode_table.table.models import Order, Section

__version__ = "0.1.0"

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gb-opcode-table",
        description="Format a Game Boy opcode table section as one line per opcode.",
    )
    parser.add_argument('section', nargs='?',
                        help='Table section: unprefixed or cbprefixed (also cb-prefixed, cb). '
                             'Required unless --config supplies it')
    parser.add_argument('--table', '-t', type=str,
                        help="Opcode table JSON file ('-' reads standard input)")
    parser.add_argument('--config', '-c', type=str,
                        help='YAML config file')
    parser.add_argument('--order', choices=[o.value for o in Order],
                        help='Output order (default: numeric)')
    parser.add_argument('--operands', action='store_true', default=None,
                        help='Append operands to the mnemonic field')
    parser.add_argument('--opcode', type=str,
                        help='Only print the line for this opcode identifier')
    parser.add_argument('--output', '-o', type=str,
                        help='Write lines to this file instead of standard output')
    parser.add_argument('--verbose', '-v', action='count', default=0,
                        help='Increase verbosity (-v, -vv)')
    parser.add_argument('--quiet', '-q', action='store_true',
                        help='Only report errors')
    parser.add_argument('--version', action='version',
                        version=f'%(prog)s {__version__}')
    return parser

# @intent:responsibility 設定値とコマンドライン引数からログレベルを決定し、stderrへのログ出力を構成します。
def setup_logging(config: FormatterConfig, verbose: int, quiet: bool) -> None:
    if quiet:
        level = logging.ERROR
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = getattr(logging, config.log_level)

    logging.basicConfig(
        level=level,
        format='%(levelname)s: %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )

# @intent:responsibility 設定ファイルの値にコマンドライン引数の指定を上書きします。
def resolve_config(args: argparse.Namespace) -> FormatterConfig:
    config = ConfigLoader().load_from_file(args.config) if args.config else FormatterConfig()
    if args.table is not None:
        config.table_path = args.table
    if args.section is not None:
        config.section = args.section
    if args.order is not None:
        config.order = args.order
    if args.operands is not None:
        config.with_operands = args.operands
    return config


def run(config: FormatterConfig, opcode: Optional[str] = None, stdin: Optional[TextIO] = None) -> List[str]:
    """
    設定に従ってテーブルを読み込み、出力する行のリストを返します。
    エラー時はOpcodeTableErrorを送出し、行は一切返しません。
    """
    section = Section.from_selector(config.section)
    order = Order(config.order)
    loader = OpcodeTableLoader()

    if config.table_path == "-":
        table = loader.load_section(stdin if stdin is not None else sys.stdin, section)
    else:
        table = loader.load_section(config.table_path, section)

    if opcode is None:
        return format_section(table, section, order, config.with_operands)

    record = table.lookup(section, parse_opcode_key(opcode))
    if record is None:
        raise MalformedInputError(f"Opcode {opcode} not found in section '{section.value}'", opcode=opcode)
    return [format_record(record, config.with_operands)]


def main(argv: Optional[List[str]] = None, stdout: Optional[TextIO] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.section is None and args.config is None:
        parser.error('a table section is required (unprefixed or cbprefixed) unless --config is given')

    try:
        config = resolve_config(args)
    except (OSError, ValueError) as e:
        setup_logging(FormatterConfig(), args.verbose, args.quiet)
        logger.error("Failed to load config %s: %s", args.config, e)
        return EXIT_FAILURE

    setup_logging(config, args.verbose, args.quiet)

    try:
        Section.from_selector(config.section)
    except MalformedInputError as e:
        parser.error(str(e))

    try:
        lines = run(config, args.opcode)
    except OpcodeTableError as e:
        logger.error("%s", e)
        return EXIT_FAILURE
    except OSError as e:
        logger.error("Cannot read opcode table %s: %s", config.table_path, e)
        return EXIT_FAILURE

    if args.output:
        try:
            with open(args.output, 'w', encoding="utf-8") as f:
                write_section(lines, f)
        except OSError as e:
            logger.error("Cannot write output %s: %s", args.output, e)
            return EXIT_FAILURE
        logger.info("Wrote %d lines to %s", len(lines), args.output)
    else:
        write_section(lines, stdout if stdout is not None else sys.stdout)
    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
