from __future__ import annotations

import csv
import json
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Protocol

import structlog

from pos_terminal.errors import InvalidArgumentError
from pos_terminal.models import PriceRule, VolumeRule

logger = structlog.get_logger()


class CatalogProvider(Protocol):
    source: str

    def fetch_rules(self) -> list[PriceRule]:
        ...


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def rule_from_mapping(payload: dict[str, Any]) -> PriceRule:
    """Build a PriceRule from one catalog row.

    ``pack_size`` and ``pack_price`` must be given together or not at all.
    """
    if not isinstance(payload, dict):
        raise InvalidArgumentError(f"Catalog entry must be an object: {payload!r}")
    if "code" not in payload or "unit_price" not in payload:
        raise InvalidArgumentError(f"Catalog entry needs 'code' and 'unit_price': {payload!r}")
    pack_size = payload.get("pack_size")
    pack_price = payload.get("pack_price")
    if _blank(pack_size) != _blank(pack_price):
        raise InvalidArgumentError(f"Catalog entry '{payload['code']}' has an incomplete volume rule.")

    volume_rule = None
    if not _blank(pack_size):
        try:
            size = int(str(pack_size).strip())
        except ValueError as exc:
            raise InvalidArgumentError(f"Invalid pack_size for '{payload['code']}': {pack_size!r}") from exc
        volume_rule = VolumeRule(pack_size=size, pack_price=pack_price)
    return PriceRule(code=payload["code"], unit_price=payload["unit_price"], volume_rule=volume_rule)


class JsonCatalogProvider:
    def __init__(self, file_path: str | Path, source: str = "json") -> None:
        self.source = source
        self.file_path = Path(file_path)

    def fetch_rules(self) -> list[PriceRule]:
        try:
            payload = json.loads(self.file_path.read_text(encoding="utf-8"), parse_float=Decimal)
        except json.JSONDecodeError as exc:
            raise InvalidArgumentError(f"Catalog {self.file_path} is not valid JSON: {exc}") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise InvalidArgumentError(f"Cannot read catalog {self.file_path}: {exc}") from exc
        if not isinstance(payload, list):
            raise InvalidArgumentError(f"Catalog {self.file_path} must contain a list of products.")
        return [rule_from_mapping(item) for item in payload]


class CsvCatalogProvider:
    def __init__(self, file_path: str | Path, source: str = "csv") -> None:
        self.source = source
        self.file_path = Path(file_path)

    def fetch_rules(self) -> list[PriceRule]:
        try:
            with self.file_path.open(newline="", encoding="utf-8") as handle:
                rows = list(csv.DictReader(handle))
        except (OSError, UnicodeDecodeError, csv.Error) as exc:
            raise InvalidArgumentError(f"Cannot read catalog {self.file_path}: {exc}") from exc
        return [rule_from_mapping({k.strip(): v for k, v in row.items() if k}) for row in rows]


PROVIDERS: dict[str, Callable[[Path], CatalogProvider]] = {
    ".json": JsonCatalogProvider,
    ".csv": CsvCatalogProvider,
}


def load_catalog(path: str | Path) -> list[PriceRule]:
    path = Path(path)
    provider_cls = PROVIDERS.get(path.suffix.lower())
    if provider_cls is None:
        raise InvalidArgumentError(f"Unsupported catalog format: {path.suffix or path.name}")
    provider: CatalogProvider = provider_cls(path)
    rules = provider.fetch_rules()
    logger.info("catalog_loaded", source=provider.source, path=str(path), products=len(rules))
    return rules


def standard_catalog() -> list[PriceRule]:
    return [
        PriceRule("A", Decimal("1.25"), VolumeRule(3, Decimal("3.00"))),
        PriceRule("B", Decimal("4.25")),
        PriceRule("C", Decimal("1.00"), VolumeRule(6, Decimal("5.00"))),
        PriceRule("D", Decimal("0.75")),
    ]
