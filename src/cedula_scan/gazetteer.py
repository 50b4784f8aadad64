"""
DIVIPOLA gazetteer: resolves the municipio/departamento codes printed on a
cedula to place names.

Decoders depend only on the :class:`Gazetteer` protocol. A lookup never raises;
an unknown or empty code pair yields a :class:`Ubicacion` with empty names.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import yaml

from cedula_scan.config import get_settings
from cedula_scan.errors import ConfigurationError
from cedula_scan.models.identity import Ubicacion

logger = logging.getLogger(__name__)

DEFAULT_CATALOG = Path(__file__).resolve().parent / "data" / "divipola.yaml"


@runtime_checkable
class Gazetteer(Protocol):
    def lookup_location(self, codigo_municipio: str, codigo_departamento: str) -> Ubicacion:
        ...


class StaticGazetteer:
    """In-memory gazetteer keyed by (codigo_municipio, codigo_departamento)."""

    def __init__(self, rows: Iterable[tuple[str, str, str, str]] = ()) -> None:
        self._entries: dict[tuple[str, str], tuple[str, str]] = {}
        for codigo_municipio, codigo_departamento, municipio, departamento in rows:
            self._entries[(codigo_municipio, codigo_departamento)] = (municipio, departamento)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, codes: object) -> bool:
        return codes in self._entries

    def lookup_location(self, codigo_municipio: str, codigo_departamento: str) -> Ubicacion:
        codigo_municipio = codigo_municipio or ""
        codigo_departamento = codigo_departamento or ""
        names = None
        if codigo_municipio and codigo_departamento:
            names = self._entries.get((codigo_municipio, codigo_departamento))

        if names is None:
            logger.debug(
                "No DIVIPOLA entry for municipio=%r departamento=%r",
                codigo_municipio,
                codigo_departamento,
            )
            return Ubicacion(
                codigo_municipio=codigo_municipio,
                codigo_departamento=codigo_departamento,
            )

        municipio, departamento = names
        return Ubicacion(
            codigo_municipio=codigo_municipio,
            codigo_departamento=codigo_departamento,
            municipio=municipio,
            departamento=departamento,
        )


def _parse_rows(data: Any, source: str) -> list[tuple[str, str, str, str]]:
    if not isinstance(data, Mapping) or not isinstance(data.get("localidades"), list):
        raise ConfigurationError(f"Gazetteer catalog {source} must define a 'localidades' list")

    rows = []
    for index, row in enumerate(data["localidades"]):
        if (
            not isinstance(row, (list, tuple))
            or len(row) != 4
            or not all(isinstance(value, str) and value for value in row)
        ):
            raise ConfigurationError(
                f"Gazetteer catalog {source} entry {index} must be "
                "[codigo_municipio, codigo_departamento, municipio, departamento]"
            )
        rows.append(tuple(row))
    return rows


def load_gazetteer(path: str | Path | None = None) -> StaticGazetteer:
    """
    Load a gazetteer from a YAML catalog.

    Args:
        path: Catalog file; the packaged sample catalog when None

    Returns:
        StaticGazetteer with every catalog entry

    Raises:
        ConfigurationError: If the file cannot be read or is malformed
    """
    catalog_path = Path(path) if path is not None else DEFAULT_CATALOG
    source = str(catalog_path)
    try:
        with open(catalog_path, encoding="utf-8") as file:
            data = yaml.safe_load(file)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Error parsing gazetteer catalog {source}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Error reading gazetteer catalog {source}: {e}") from e

    gazetteer = StaticGazetteer(_parse_rows(data, source))
    logger.info("Loaded %d gazetteer entries from %s", len(gazetteer), source)
    return gazetteer


@lru_cache
def default_gazetteer() -> StaticGazetteer:
    """Gazetteer configured by ``CEDULA_GAZETTEER_PATH``, loaded once."""
    return load_gazetteer(get_settings().GAZETTEER_PATH)
