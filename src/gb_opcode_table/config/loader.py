import yaml
from typing import Dict, Any
from gb_opcode_table.table.models import Order, Section
from .models import FormatterConfig

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

class ConfigLoader:
    def load_from_file(self, path: str) -> FormatterConfig:
        with open(path, 'r') as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Error parsing config {path}: {e}")
        return self._parse_config(data or {})

    def _parse_config(self, data: Dict[str, Any]) -> FormatterConfig:
        if not isinstance(data, dict):
            raise ValueError(f"Invalid config format: expected a mapping, got {type(data).__name__}")

        section = str(data.get("section", "unprefixed"))
        # 正規化のために一度Sectionに変換する
        section = Section.from_selector(section).value

        order = str(data.get("order", "numeric")).lower()
        if order not in [o.value for o in Order]:
            raise ValueError(f"Invalid order: {order}")

        log_level = str(data.get("log_level", "WARNING")).upper()
        if log_level not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {log_level}")

        return FormatterConfig(
            table_path=str(data.get("table_path", "opcodes.json")),
            section=section,
            order=order,
            with_operands=self._parse_bool(data.get("with_operands", False)),
            log_level=log_level,
        )

    def _parse_bool(self, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.lower() in ("true", "yes", "on", "1"):
            return True
        if isinstance(value, str) and value.lower() in ("false", "no", "off", "0"):
            return False
        raise ValueError(f"Invalid boolean format: {value}")
