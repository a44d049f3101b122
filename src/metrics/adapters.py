"""
Adapters — вход истории цен и экспорт нормализованных рядов

Вход: payload в формате market chart ({"prices": [[ts_ms, price], ...]}),
как его сохраняет data-fetch коллаборатор в кэше. Payload проверяется по
контракту market_chart.json, затем по инвариантам RawSeries.

Выход: JSON-совместимый dict нормализованных рядов для рендера графиков и
оверлеев, проверенный по контракту derived_series.json.
"""

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from jsonschema import ValidationError
from loguru import logger

from src.core.contracts.validators import MarketChartValidator, validate_derived_series
from src.core.domain.series import DataError, DerivedSeries, NormalizationBounds, RawSeries

EXPORT_SCHEMA_VERSION = "1"


def load_market_chart(entity_id: str, payload: Dict[str, Any]) -> RawSeries:
    """
    RawSeries из market chart payload.

    Args:
        entity_id: Идентификатор сущности
        payload: {"prices": [[ts_ms, price], ...], ...}

    Returns:
        RawSeries

    Raises:
        DataError: Если payload не проходит контракт или инварианты ряда
    """
    validator = MarketChartValidator()
    errors = validator.get_errors(payload)
    if errors:
        raise DataError(f"{entity_id}: market chart payload rejected: {'; '.join(errors[:5])}")

    return RawSeries.from_pairs(entity_id, [(int(ts), float(price)) for ts, price in payload["prices"]])


def load_market_chart_file(entity_id: str, path: Union[str, Path]) -> RawSeries:
    """
    RawSeries из JSON файла market chart.

    Raises:
        FileNotFoundError: Если файл не найден
        DataError: Если содержимое не JSON или не проходит контракт
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        try:
            payload = json.load(f)
        except json.JSONDecodeError as e:
            raise DataError(f"{entity_id}: {path} is not valid JSON: {e}") from e

    series = load_market_chart(entity_id, payload)
    logger.debug(f"[Adapters] Loaded {len(series)} points for {entity_id} from {path}")
    return series


def export_derived_series(
    series_by_entity: Mapping[str, DerivedSeries],
    bounds: Optional[NormalizationBounds] = None,
) -> Dict[str, Any]:
    """
    Экспорт нормализованных рядов.

    Args:
        series_by_entity: entity_id → DerivedSeries (после нормализации)
        bounds: Использованные границы нормализации (для подписи осей)

    Returns:
        {"schema_version": "1", "bounds": {...} | None, "series": {id: [...]}}

    Raises:
        jsonschema.ValidationError: Если ряды не нормализованы (значения вне
            диапазонов контракта)
    """
    data: Dict[str, Any] = {
        "schema_version": EXPORT_SCHEMA_VERSION,
        "bounds": None,
        "series": {
            entity_id: [sample.to_dict() for sample in series]
            for entity_id, series in series_by_entity.items()
        },
    }
    if bounds is not None:
        data["bounds"] = {
            "trend_low": bounds.trend_low,
            "trend_high": bounds.trend_high,
            "vol_high": bounds.vol_high,
            "sample_count": bounds.sample_count,
        }

    try:
        validate_derived_series(data)
    except ValidationError:
        logger.error("[Adapters] Derived series export violates contract (series not normalized?)")
        raise

    return data
