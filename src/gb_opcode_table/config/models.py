from dataclasses import dataclass

@dataclass
class FormatterConfig:
    table_path: str = "opcodes.json"
    section: str = "unprefixed"  # "unprefixed", "cbprefixed"
    order: str = "numeric"  # "numeric", "document"
    with_operands: bool = False
    log_level: str = "WARNING"
