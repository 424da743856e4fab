"""Invoice labels per language, loaded from the YAML tables in templates/l10n."""

from enum import Enum
from functools import lru_cache

import yaml
from pydantic import BaseModel, ValidationError, field_validator

from klirr.common.errors import InvalidData, InvalidLanguage
from klirr.common.templates import L10N_DIR


class Language(str, Enum):
    EN = "english"
    SV = "swedish"

    def __str__(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, text: str) -> "Language":
        value = str(text).strip().lower()
        for language in cls:
            if value in (language.name.lower(), language.value):
                return language
        raise InvalidLanguage(text, "supported languages are en (english) and sv (swedish)")


class ClientInfoLabels(BaseModel):
    to_company: str
    vat_number: str


class InvoiceInfoLabels(BaseModel):
    purchase_order: str
    invoice_identifier: str
    invoice_date: str
    due_date: str
    client_contact: str
    vendor_contact: str
    terms: str


class VendorInfoLabels(BaseModel):
    address: str
    bank: str
    iban: str
    bic: str
    organisation_number: str
    vat_number: str


class LineItemsLabels(BaseModel):
    description: str
    when: str
    quantity: str
    unit_price: str
    total_cost: str
    grand_total: str


class L10n(BaseModel):
    language: Language
    client_info: ClientInfoLabels
    invoice_info: InvoiceInfoLabels
    vendor_info: VendorInfoLabels
    line_items: LineItemsLabels
    month_names: list[str]

    @field_validator("month_names")
    @classmethod
    def twelve_months(cls, v: list[str]) -> list[str]:
        if len(v) != 12:
            raise ValueError(f"expected 12 month names, found {len(v)}")
        return v

    def to_typst_dict(self) -> dict:
        return self.model_dump(mode="json", exclude={"language"})


@lru_cache(maxsize=None)
def load_l10n(language: Language) -> L10n:
    path = L10N_DIR / f"{language.value}.yaml"
    with open(path, encoding="utf-8") as f:
        content = yaml.safe_load(f) or {}
    try:
        return L10n(language=language, **content)
    except ValidationError as e:
        raise InvalidData(str(path), str(e)) from e
