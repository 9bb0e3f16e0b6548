"""Pydantic models describing the registry extract files.

The extractor writes six JSON files into one directory. Their shape is a fixed input
contract; models keep unknown keys (``extra="allow"``) and remember the decoded JSON
object they were built from, so the raw record survives for content fingerprinting.

Record collections validate per record: an invalid record is dropped and reported
through the ``dropped_records`` validation context instead of failing the whole file.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Annotated, Any, Final, Self

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ModelWrapValidatorHandler,
    PrivateAttr,
    TypeAdapter,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    WrapValidator,
    field_validator,
    model_validator,
)

log = logging.getLogger(__name__)

DROPPED_RECORDS: Final[str] = "dropped_records"


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _key_to_str(value: object) -> object:
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float):
        return str(int(value)) if float(value).is_integer() else str(value)
    return _blank_to_none(value)


def _keys_to_str(value: object) -> object:
    if value is None:
        return []
    if isinstance(value, list):
        keys = (_key_to_str(item) for item in value)
        return [key for key in keys if key is not None]
    return value


def _loose_int(value: object) -> object:
    if isinstance(value, str):
        return parse_int(value)
    return value


def _none_to_list(value: object) -> object:
    return [] if value is None else value


def _none_to_dict(value: object) -> object:
    return {} if value is None else value


def parse_int(value: str | None) -> int | None:
    """Parse a registry numeric identifier, tolerating blanks and junk."""

    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def _note_dropped(info: ValidationInfo, location: object, exc: ValidationError) -> None:
    first = exc.errors()[0]
    reason = f"{location}: {first['msg']} at {'.'.join(str(part) for part in first['loc'])}"
    context = info.context
    if isinstance(context, dict) and isinstance(context.get(DROPPED_RECORDS), list):
        context[DROPPED_RECORDS].append(reason)
    else:
        log.debug("Dropping invalid record %s", reason)


def _keep_valid_items(
    value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo
) -> Any:
    if not isinstance(value, list):
        return handler(value)
    kept: list[Any] = []
    for index, item in enumerate(value):
        try:
            kept.extend(handler([item]))
        except ValidationError as exc:
            _note_dropped(info, f"record {index}", exc)
    return kept


def _keep_valid_entries(
    value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo
) -> Any:
    if not isinstance(value, dict):
        return handler(value)
    kept: dict[Any, Any] = {}
    for key, item in value.items():
        try:
            kept.update(handler({key: item}))
        except ValidationError as exc:
            _note_dropped(info, f"entry {key!r}", exc)
    return kept


class RegistryBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    _source: dict[str, Any] | None = PrivateAttr(default=None)

    @model_validator(mode="wrap")
    @classmethod
    def _keep_source(cls, value: Any, handler: ModelWrapValidatorHandler[Self]) -> Self:
        model = handler(value)
        if isinstance(value, dict):
            model._source = dict(value)
        return model

    def raw(self) -> dict[str, Any]:
        """Return the record as decoded from the extract, before any coercion."""

        if self._source is not None:
            return self._source
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


# Standards -------------------------------------------------------------------


class StandardRecord(RegistryBaseModel):
    standard_id: str | None = Field(default=None, alias="idEstandarCompetencia")
    sector_id: str | None = Field(default=None, alias="idSectorProductivo")
    code: str | None = Field(default=None, alias="codigo")
    level: str | None = Field(default=None, alias="nivel")
    title: str | None = Field(default=None, alias="titulo")
    committee: str | None = Field(default=None, alias="comite")
    sector_name: str | None = Field(default=None, alias="secProductivo")

    _coerce_keys = field_validator(
        "standard_id", "sector_id", "code", "level", "committee", mode="before"
    )(_key_to_str)
    _normalize_text = field_validator("title", "sector_name", mode="before")(_blank_to_none)

    @property
    def sector_key(self) -> int | None:
        return parse_int(self.sector_id)

    @property
    def level_number(self) -> int | None:
        return parse_int(self.level)


# Committees ------------------------------------------------------------------


class AssociatedStandard(RegistryBaseModel):
    code: str | None = Field(default=None, alias="codigo")
    title: str | None = Field(default=None, alias="titulo")

    _coerce_code = field_validator("code", mode="before")(_key_to_str)


class CommitteeRecord(RegistryBaseModel):
    key: str | None = Field(default=None, alias="clave")
    name: str | None = Field(default=None, alias="nombre")
    president: str | None = Field(default=None, alias="presidente")
    vice_president: str | None = Field(default=None, alias="vicepresidente")
    president_title: str | None = Field(default=None, alias="puestoPresidente")
    vice_president_title: str | None = Field(default=None, alias="puestoVicepresidente")
    contact: str | None = Field(default=None, alias="contacto")
    email: str | None = Field(default=None, alias="correo")
    phones: str | None = Field(default=None, alias="telefonos")
    url: str | None = None
    street: str | None = Field(default=None, alias="calleNumero")
    neighborhood: str | None = Field(default=None, alias="colonia")
    postal_code: str | None = Field(default=None, alias="codigoPostal")
    locality: str | None = Field(default=None, alias="localidad")
    municipality: str | None = Field(default=None, alias="delegacionStr")
    state: str | None = Field(default=None, alias="entidadStr")
    sector_id: str | None = Field(default=None, alias="idSectorProductivo")
    sector_label: str | None = Field(default=None, alias="sectorProductivoStr")
    enrolled_at: int | float | str | None = Field(default=None, alias="fechaIntegracion")
    committee_type: int | None = Field(default=None, alias="idTipoComite")
    associated_standards: list[AssociatedStandard] = Field(
        default_factory=list["AssociatedStandard"], alias="estandaresAsociados"
    )
    record_id: int | str | None = Field(default=None, alias="id")

    _coerce_keys = field_validator("key", "postal_code", "sector_id", mode="before")(_key_to_str)
    _normalize_text = field_validator(
        "name",
        "president",
        "vice_president",
        "president_title",
        "vice_president_title",
        "contact",
        "email",
        "phones",
        "url",
        "street",
        "neighborhood",
        "locality",
        "municipality",
        "state",
        "sector_label",
        mode="before",
    )(_blank_to_none)
    _normalize_standards = field_validator("associated_standards", mode="before")(_none_to_list)
    _coerce_type = field_validator("committee_type", mode="before")(_loose_int)

    @property
    def sector_key(self) -> int | None:
        return parse_int(self.sector_id)


# Accreditation matrix ---------------------------------------------------------


KeyList = Annotated[list[str], BeforeValidator(_keys_to_str)]


class MatrixEntry(RegistryBaseModel):
    certifier_ids: KeyList = Field(default_factory=list[str], alias="ece_ids")
    certifier_count: int | None = Field(default=None, alias="ece_count")
    title: str | None = None

    _coerce_count = field_validator("certifier_count", mode="before")(_loose_int)


class AccreditationMatrixFile(RegistryBaseModel):
    generated_at: str | None = None
    total_ecs: int | None = None
    matrix: Annotated[dict[str, MatrixEntry], WrapValidator(_keep_valid_entries)] = Field(
        default_factory=dict[str, MatrixEntry]
    )

    _normalize_matrix = field_validator("matrix", mode="before")(_none_to_dict)


# Certifier and center registries ----------------------------------------------


class CertifierRecord(RegistryBaseModel):
    key: str | None = Field(default=None, alias="id")
    name: str | None = Field(default=None, alias="canonical_name")
    alternate_names: list[str] | None = None
    normalized_key: str | None = None
    entity_type: str | None = None
    standard_codes: KeyList = Field(default_factory=list[str], alias="ec_codes")

    _coerce_key = field_validator("key", mode="before")(_key_to_str)
    _normalize_text = field_validator("name", "normalized_key", "entity_type", mode="before")(
        _blank_to_none
    )


class CenterRecord(RegistryBaseModel):
    key: str | None = Field(default=None, alias="id")
    name: str | None = Field(default=None, alias="canonical_name")
    alternate_names: list[str] | None = None
    normalized_key: str | None = None
    standard_codes: KeyList = Field(default_factory=list[str], alias="ec_codes")
    standard_count: int | None = Field(default=None, alias="ec_count")

    _coerce_key = field_validator("key", mode="before")(_key_to_str)
    _coerce_count = field_validator("standard_count", mode="before")(_loose_int)
    _normalize_text = field_validator("name", "normalized_key", mode="before")(_blank_to_none)


class CertifierRegistryFile(RegistryBaseModel):
    generated_at: str | None = None
    total_count: int | None = None
    registry: Annotated[list[CertifierRecord], WrapValidator(_keep_valid_items)] = Field(
        default_factory=list["CertifierRecord"]
    )

    _normalize_registry = field_validator("registry", mode="before")(_none_to_list)


class CenterRegistryFile(RegistryBaseModel):
    generated_at: str | None = None
    total_count: int | None = None
    registry: Annotated[list[CenterRecord], WrapValidator(_keep_valid_items)] = Field(
        default_factory=list["CenterRecord"]
    )

    _normalize_registry = field_validator("registry", mode="before")(_none_to_list)


# Standard details -------------------------------------------------------------


class StandardDetail(RegistryBaseModel):
    title: str | None = None
    certifiers: list[str] = Field(default_factory=list[str])
    courses: list[str] = Field(default_factory=list[str])
    occupations: list[str] = Field(default_factory=list[str])
    committee_members: list[str] = Field(default_factory=list[str])

    _normalize_lists = field_validator(
        "certifiers", "courses", "occupations", "committee_members", mode="before"
    )(_none_to_list)


class StandardDetailsFile(RegistryBaseModel):
    extraction_date: str | None = None
    summary: dict[str, Any] = Field(default_factory=dict[str, Any])
    failed_ecs: list[str] = Field(default_factory=list[str])
    ec_details: Annotated[dict[str, StandardDetail], WrapValidator(_keep_valid_entries)] = Field(
        default_factory=dict[str, StandardDetail]
    )

    _normalize_details = field_validator("ec_details", "summary", mode="before")(_none_to_dict)
    _normalize_failed = field_validator("failed_ecs", mode="before")(_none_to_list)


# Extract descriptors ----------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ExtractFile[T]:
    """Describe one extract file: where it lives and how to parse and count it."""

    file_name: str
    label: str
    adapter: TypeAdapter[T]
    counter: Callable[[T], int]
    mandatory: bool = False

    def count(self, value: T) -> int:
        return self.counter(value)

    def validate(self, payload: object, dropped: list[str]) -> T:
        """Validate a decoded payload, collecting the reasons invalid records were dropped."""

        return self.adapter.validate_python(payload, context={DROPPED_RECORDS: dropped})


STANDARDS_EXTRACT: Final[ExtractFile[list[StandardRecord]]] = ExtractFile(
    file_name="ec_standards_api.json",
    label="Standards",
    adapter=TypeAdapter(Annotated[list[StandardRecord], WrapValidator(_keep_valid_items)]),
    counter=len,
    mandatory=True,
)
CERTIFIERS_EXTRACT: Final[ExtractFile[CertifierRegistryFile]] = ExtractFile(
    file_name="master_ece_registry.json",
    label="Certifier registry",
    adapter=TypeAdapter(CertifierRegistryFile),
    counter=lambda value: len(value.registry),
)
CENTERS_EXTRACT: Final[ExtractFile[CenterRegistryFile]] = ExtractFile(
    file_name="master_ccap_registry.json",
    label="Center registry",
    adapter=TypeAdapter(CenterRegistryFile),
    counter=lambda value: len(value.registry),
)
COMMITTEES_EXTRACT: Final[ExtractFile[list[CommitteeRecord]]] = ExtractFile(
    file_name="committees_complete.json",
    label="Committees",
    adapter=TypeAdapter(Annotated[list[CommitteeRecord], WrapValidator(_keep_valid_items)]),
    counter=len,
)
MATRIX_EXTRACT: Final[ExtractFile[AccreditationMatrixFile]] = ExtractFile(
    file_name="ec_ece_matrix.json",
    label="Standard-certifier matrix",
    adapter=TypeAdapter(AccreditationMatrixFile),
    counter=lambda value: len(value.matrix),
)
DETAILS_EXTRACT: Final[ExtractFile[StandardDetailsFile]] = ExtractFile(
    file_name="ec_certifiers_all.json",
    label="Standard details",
    adapter=TypeAdapter(StandardDetailsFile),
    counter=lambda value: len(value.ec_details),
)


@dataclass(slots=True)
class RegistryExtracts:
    """Everything loaded for one run; a missing or unreadable file is ``None``."""

    standards: list[StandardRecord] | None = None
    certifiers: CertifierRegistryFile | None = None
    centers: CenterRegistryFile | None = None
    committees: list[CommitteeRecord] | None = None
    matrix: AccreditationMatrixFile | None = None
    details: StandardDetailsFile | None = None

    @property
    def has_standards(self) -> bool:
        return bool(self.standards)


class MandatoryExtractMissingError(RuntimeError):
    """Raised when the base standard extract is absent or empty."""
