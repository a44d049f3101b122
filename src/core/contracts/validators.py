"""
JSON Schema Contract Validators

Модуль для валидации JSON данных на границах ядра согласно JSON Schema
контрактам (библиотека jsonschema, Draft 2020-12).

Схемы (лежат в пакете, contracts/schema/):
- market_chart.json — входной payload истории цен {"prices": [[ts_ms, price], ...]}
- derived_series.json — экспорт нормализованных рядов для оверлеев/графиков
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator

import jsonschema
from jsonschema import Draft202012Validator, ValidationError


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Схемы ищутся в каталоге schema/ рядом с этим модулем.
    """

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'market_chart')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если файл не является валидной JSON Schema
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        # Meta-validation самой схемы
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}") from e

        self._schemas[schema_name] = schema
        return schema


_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """Валидация данных против именованной JSON Schema."""

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]) -> Iterator[ValidationError]:
        return self.validator.iter_errors(data)

    def get_errors(self, data: Dict[str, Any]) -> list[str]:
        """
        Человекочитаемый список ошибок (путь: сообщение), пустой если данные валидны.
        """
        messages = []
        for error in sorted(self.iter_errors(data), key=lambda e: list(e.absolute_path)):
            path = "/".join(str(p) for p in error.absolute_path) or "<root>"
            messages.append(f"{path}: {error.message}")
        return messages


class MarketChartValidator(ContractValidator):
    """Валидатор входного payload истории цен."""

    def __init__(self):
        super().__init__("market_chart")


class DerivedSeriesValidator(ContractValidator):
    """Валидатор экспорта нормализованных рядов."""

    def __init__(self):
        super().__init__("derived_series")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_market_chart(data: Dict[str, Any]) -> None:
    """
    Raises:
        ValidationError: Если payload не соответствует market_chart.json
    """
    MarketChartValidator().validate(data)


def validate_derived_series(data: Dict[str, Any]) -> None:
    """
    Raises:
        ValidationError: Если экспорт не соответствует derived_series.json
    """
    DerivedSeriesValidator().validate(data)
