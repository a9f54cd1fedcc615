"""
change_detection/details.py

Typed payloads for the `details` column of a change row.

Each change type has its own schema, tagged by `kind`. The stored JSON keeps
camelCase keys so rows read back through `parse_details` round-trip exactly.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class ChangeType:
    TEXT_CHANGE = "text_change"
    ELEMENT_ADDED = "element_added"
    ELEMENT_REMOVED = "element_removed"
    CTA_TEXT_CHANGE = "cta_text_change"
    NAV_CHANGE = "nav_change"


class ChangeReference(BaseModel):
    """
    One side of a change: a matching key plus display values.
    """

    key: str | None = None
    label: str | None = None
    href: str | None = None
    text: str | None = None

    def to_payload(self) -> dict[str, str]:
        return self.model_dump(exclude_none=True)


class _Details(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class TextChangeDetails(_Details):
    kind: Literal["text_change"] = "text_change"
    before_length: int = Field(..., ge=0, alias="beforeLength")
    after_length: int = Field(..., ge=0, alias="afterLength")


class ElementChangeDetails(_Details):
    kind: Literal["element_added", "element_removed"]
    element_key: str = Field(..., alias="elementKey")


class StructuralSummaryDetails(_Details):
    """
    Emitted once when a page has more structural edits than are itemised.
    """

    kind: Literal["structural_summary"] = "structural_summary"
    added: list[str] = Field(default_factory=list)
    removed: list[str] = Field(default_factory=list)


class CtaTextChangeDetails(_Details):
    kind: Literal["cta_text_change"] = "cta_text_change"
    href: str
    before_text: str = Field(..., alias="beforeText")
    after_text: str = Field(..., alias="afterText")


class NavChangeDetails(_Details):
    kind: Literal["nav_change"] = "nav_change"
    added: list[str] = Field(default_factory=list)
    removed: list[str] = Field(default_factory=list)


ChangeDetails = Annotated[
    Union[
        TextChangeDetails,
        ElementChangeDetails,
        StructuralSummaryDetails,
        CtaTextChangeDetails,
        NavChangeDetails,
    ],
    Field(discriminator="kind"),
]

_DETAILS_ADAPTER: TypeAdapter[Any] = TypeAdapter(ChangeDetails)


def dump_details(details: BaseModel) -> dict[str, Any]:
    return details.model_dump(by_alias=True)


def parse_details(payload: dict[str, Any]) -> Any:
    """
    Rebuild the typed details from a stored payload. Extra keys such as
    `before`/`after` are ignored.
    """

    return _DETAILS_ADAPTER.validate_python(payload)
