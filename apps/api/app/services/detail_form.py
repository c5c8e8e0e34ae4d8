"""Per-jersey detail collection: form schema, submission validation and summary counters.

Form fields are addressed as ``jersey_<index>_<key>`` with ``index`` in
``0..quantity-1``; the same names are used by the schema and by validation.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.models.domain import (
    JERSEY_NUMBER_MAX,
    JERSEY_NUMBER_MIN,
    JERSEY_SIZES,
    SIZES_BY_CATEGORY,
    JerseyDetail,
    JerseyType,
    Shorts,
    SizeCategory,
    Sleeve,
)

FieldKind = Literal["select", "text", "number", "textarea"]


@dataclass(frozen=True)
class FieldSpec:
    key: str
    attribute: str
    label: str
    kind: FieldKind
    required: bool = True
    options: tuple[str, ...] = ()
    placeholder: str | None = None


FIELD_SPECS: tuple[FieldSpec, ...] = (
    FieldSpec(
        "type", "type", "Jersey Type", "select", options=tuple(t.value for t in JerseyType)
    ),
    FieldSpec("name", "name", "Name on Jersey", "text", placeholder="Enter player name"),
    FieldSpec("number", "number", "Jersey Number", "number", placeholder="Enter jersey number"),
    FieldSpec(
        "size_category",
        "size_category",
        "Size Category",
        "select",
        options=tuple(c.value for c in SizeCategory),
    ),
    FieldSpec("size", "size", "Size", "select", options=JERSEY_SIZES),
    FieldSpec("sleeve", "sleeve", "Sleeve", "select", options=tuple(s.value for s in Sleeve)),
    FieldSpec("shorts", "shorts", "Shorts", "select", options=tuple(s.value for s in Shorts)),
    FieldSpec(
        "additional",
        "additional_details",
        "Additional Details",
        "textarea",
        required=False,
        placeholder="Any additional requirements",
    ),
)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class JerseyFormField(_CamelModel):
    name: str
    key: str
    label: str
    kind: FieldKind
    required: bool
    options: list[str] = []
    min: int | None = None
    max: int | None = None
    placeholder: str | None = None


class JerseyFormGroup(_CamelModel):
    index: int
    label: str
    inputs: list[JerseyFormField]


class DetailSummary(_CamelModel):
    types: dict[str, int]
    size_categories: dict[str, int]
    sleeves: dict[str, int]


class DetailValidationError(Exception):
    """The first jersey, in index order, whose fields are missing or invalid."""

    def __init__(
        self,
        index: int,
        missing_fields: Iterable[str] = (),
        invalid_fields: Iterable[str] = (),
    ) -> None:
        self.index = index
        self.missing_fields = list(missing_fields)
        self.invalid_fields = list(invalid_fields)
        super().__init__(self.message)

    @property
    def jersey_label(self) -> str:
        return f"Jersey {self.index + 1}"

    @property
    def message(self) -> str:
        if self.missing_fields:
            return f"Please fill in all required fields for {self.jersey_label}."
        return f"Please correct {', '.join(self.invalid_fields)} for {self.jersey_label}."

    def to_detail(self) -> dict[str, Any]:
        return {
            "jerseyIndex": self.index,
            "jersey": self.jersey_label,
            "missingFields": self.missing_fields,
            "invalidFields": self.invalid_fields,
            "message": self.message,
        }


def field_name(index: int, key: str) -> str:
    return f"jersey_{index}_{key}"


def render_schema(quantity: int) -> list[JerseyFormGroup]:
    if quantity < 1:
        raise ValueError("quantity must be a positive integer")

    groups: list[JerseyFormGroup] = []
    for index in range(quantity):
        inputs = [
            JerseyFormField(
                name=field_name(index, spec.key),
                key=spec.key,
                label=spec.label,
                kind=spec.kind,
                required=spec.required,
                options=list(spec.options),
                min=JERSEY_NUMBER_MIN if spec.kind == "number" else None,
                max=JERSEY_NUMBER_MAX if spec.kind == "number" else None,
                placeholder=spec.placeholder,
            )
            for spec in FIELD_SPECS
        ]
        groups.append(JerseyFormGroup(index=index, label=f"Jersey {index + 1}", inputs=inputs))
    return groups


def _clean(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _parse_number(value: str) -> int | None:
    try:
        number = int(value)
    except ValueError:
        return None
    if not JERSEY_NUMBER_MIN <= number <= JERSEY_NUMBER_MAX:
        return None
    return number


def spec_options(key: str) -> tuple[str, ...]:
    for spec in FIELD_SPECS:
        if spec.key == key:
            return spec.options
    raise KeyError(key)


def _invalid_fields(values: dict[str, str]) -> list[str]:
    invalid: list[str] = []
    for spec in FIELD_SPECS:
        value = values[spec.key]
        if not value:
            continue
        if spec.kind == "number" and _parse_number(value) is None:
            invalid.append(to_camel(spec.attribute))
        elif spec.key == "size":
            category = values["size_category"]
            allowed = (
                SIZES_BY_CATEGORY[SizeCategory(category)]
                if category in spec_options("size_category")
                else spec.options
            )
            if value not in allowed:
                invalid.append(to_camel(spec.attribute))
        elif spec.options and value not in spec.options:
            invalid.append(to_camel(spec.attribute))
    return invalid


def validate_submission(raw_fields: Mapping[str, Any], quantity: int) -> list[JerseyDetail]:
    """Collect ``quantity`` jersey details from flat form fields.

    Stops at the first jersey with a problem and raises ``DetailValidationError`` for
    that index; later jerseys are not inspected.
    """
    details: list[JerseyDetail] = []
    for index in range(quantity):
        values = {
            spec.key: _clean(raw_fields.get(field_name(index, spec.key))) for spec in FIELD_SPECS
        }
        missing = [
            to_camel(spec.attribute)
            for spec in FIELD_SPECS
            if spec.required and not values[spec.key]
        ]
        invalid = _invalid_fields(values)
        if missing or invalid:
            raise DetailValidationError(index, missing, invalid)

        details.append(
            JerseyDetail(
                type=JerseyType(values["type"]),
                name=values["name"],
                number=int(values["number"]),
                size_category=SizeCategory(values["size_category"]),
                size=values["size"],
                sleeve=Sleeve(values["sleeve"]),
                shorts=Shorts(values["shorts"]),
                additional_details=values["additional"],
            )
        )
    return details


def _count(values: Iterable[str], choices: Iterable[str], include_empty: bool) -> dict[str, int]:
    counts = {choice: 0 for choice in choices}
    for value in values:
        if value in counts:
            counts[value] += 1
    if include_empty:
        return counts
    return {key: count for key, count in counts.items() if count > 0}


def summarize_details(
    details: Iterable[JerseyDetail], *, include_empty: bool = False
) -> DetailSummary:
    details = list(details)
    return DetailSummary(
        types=_count((d.type.value for d in details), spec_options("type"), include_empty),
        size_categories=_count(
            (d.size_category.value for d in details),
            spec_options("size_category"),
            include_empty,
        ),
        sleeves=_count((d.sleeve.value for d in details), spec_options("sleeve"), include_empty),
    )


def summarize_fields(
    raw_fields: Mapping[str, Any], quantity: int, *, include_empty: bool = True
) -> DetailSummary:
    """Live counters for a form that may still be partially filled."""

    def column(key: str) -> list[str]:
        return [_clean(raw_fields.get(field_name(index, key))) for index in range(quantity)]

    return DetailSummary(
        types=_count(column("type"), spec_options("type"), include_empty),
        size_categories=_count(
            column("size_category"), spec_options("size_category"), include_empty
        ),
        sleeves=_count(column("sleeve"), spec_options("sleeve"), include_empty),
    )
