"""
Identity record models for Colombian national ID cards (cedula de ciudadania).

Both card generations decode into the same :class:`IdentityRecord`. Legacy cards
(PDF417 barcode) produce the ``ANTIGUA`` variant, current cards (ICAO TD1 MRZ)
produce the ``NUEVA`` variant. Attributes are snake_case; ``to_dict`` emits the
camelCase names used by the citizen-update form.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class Genero(str, Enum):
    """Sex as printed on the card."""

    MASCULINO = "M"
    FEMENINO = "F"
    DESCONOCIDO = "DESCONOCIDO"


class GrupoRH(str, Enum):
    """Blood group and Rh factor."""

    O_POSITIVO = "O+"
    O_NEGATIVO = "O-"
    A_POSITIVO = "A+"
    A_NEGATIVO = "A-"
    B_POSITIVO = "B+"
    B_NEGATIVO = "B-"
    AB_POSITIVO = "AB+"
    AB_NEGATIVO = "AB-"
    DESCONOCIDO = "DESCONOCIDO"


class TipoDocumento(str, Enum):
    """Card generation the record was decoded from."""

    ANTIGUA = "ANTIGUA"  # PDF417 barcode
    NUEVA = "NUEVA"  # TD1 machine readable zone


class _FrozenModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Ubicacion(_FrozenModel):
    """DIVIPOLA location resolved from the codes on the card."""

    codigo_municipio: str = ""
    codigo_departamento: str = ""
    municipio: str = ""
    departamento: str = ""

    @property
    def found(self) -> bool:
        """Whether the gazetteer resolved the codes to a name."""
        return bool(self.municipio)


class DocumentoInfo(_FrozenModel):
    """Legacy-card identifiers (AFIS code and fingerprint card number)."""

    codigo_afis: str = ""
    tarjeta_dactilar: str = ""


class IdentityRecord(_FrozenModel):
    """Structured identity data decoded from a single scan."""

    numero_documento: str = Field(
        default="", description="Digits without leading zeros; empty when unresolved"
    )
    primer_apellido: str = ""
    segundo_apellido: str = ""
    primer_nombre: str = ""
    segundo_nombre: str = ""
    nombres: str = ""
    fecha_nacimiento: str = Field(default="", description="YYYY-MM-DD or empty")
    genero: Genero = Genero.DESCONOCIDO
    rh: GrupoRH = GrupoRH.DESCONOCIDO
    tipo_documento: TipoDocumento
    ubicacion: Ubicacion = Field(default_factory=Ubicacion)

    # ANTIGUA only
    documento_info: Optional[DocumentoInfo] = None

    # NUEVA only
    fecha_expiracion: Optional[str] = None
    nuip: Optional[str] = None
    nombres_truncados: Optional[bool] = None

    confianza: int = Field(..., ge=0, le=100)

    @model_validator(mode="after")
    def check_variant_fields(self) -> IdentityRecord:
        if self.tipo_documento is TipoDocumento.ANTIGUA:
            if self.documento_info is None:
                msg = "ANTIGUA records require documento_info"
                raise ValueError(msg)
            if any(
                value is not None
                for value in (self.fecha_expiracion, self.nuip, self.nombres_truncados)
            ):
                msg = "ANTIGUA records cannot carry MRZ-only fields"
                raise ValueError(msg)
        else:
            if self.documento_info is not None:
                msg = "NUEVA records cannot carry documento_info"
                raise ValueError(msg)
            if self.fecha_expiracion is None or self.nuip is None or self.nombres_truncados is None:
                msg = "NUEVA records require fecha_expiracion, nuip and nombres_truncados"
                raise ValueError(msg)
        return self

    @property
    def nombre_completo(self) -> str:
        parts = (
            self.primer_nombre,
            self.segundo_nombre,
            self.primer_apellido,
            self.segundo_apellido,
        )
        return " ".join(part for part in parts if part)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary with camelCase keys, omitting fields of the other variant."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> IdentityRecord:
        """Create an instance from a dictionary with camelCase keys."""
        return cls.model_validate(data)
