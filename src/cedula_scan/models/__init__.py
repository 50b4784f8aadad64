"""Data models for decoded cedulas."""

from .findings import Finding, FindingCode
from .identity import DocumentoInfo, Genero, GrupoRH, IdentityRecord, TipoDocumento, Ubicacion
from .mrz import RecoveredLines

__all__ = [
    "DocumentoInfo",
    "Finding",
    "FindingCode",
    "Genero",
    "GrupoRH",
    "IdentityRecord",
    "RecoveredLines",
    "TipoDocumento",
    "Ubicacion",
]
