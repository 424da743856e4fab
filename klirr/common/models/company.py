"""Vendor/client company records and payment information."""

from dataclasses import dataclass
from typing import Optional

from klirr.common.errors import InvalidData, InvalidDay, InvalidNetDays
from klirr.common.models.calendar import validate_day
from klirr.common.models.money import Currency


def _require(data: dict, key: str, record: str):
    if not isinstance(data, dict) or key not in data:
        raise InvalidData(data, f"{record} is missing '{key}'")
    return data[key]


@dataclass(frozen=True)
class PostalAddress:
    street_line_1: str
    zip: str
    city: str
    country: str
    street_line_2: str = ""

    def to_dict(self) -> dict:
        return {
            "street_address": {
                "line_1": self.street_line_1,
                "line_2": self.street_line_2,
            },
            "zip": self.zip,
            "city": self.city,
            "country": self.country,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PostalAddress":
        street = _require(data, "street_address", "postal address") or {}
        return cls(
            street_line_1=str(street.get("line_1", "")),
            street_line_2=str(street.get("line_2") or ""),
            zip=str(_require(data, "zip", "postal address")),
            city=str(_require(data, "city", "postal address")),
            country=str(_require(data, "country", "postal address")),
        )


@dataclass(frozen=True)
class CompanyInformation:
    company_name: str
    organisation_number: str
    vat_number: str
    postal_address: PostalAddress
    contact_person: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "company_name": self.company_name,
            "contact_person": self.contact_person,
            "organisation_number": self.organisation_number,
            "vat_number": self.vat_number,
            "postal_address": self.postal_address.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CompanyInformation":
        return cls(
            company_name=str(_require(data, "company_name", "company")),
            organisation_number=str(_require(data, "organisation_number", "company")),
            vat_number=str(_require(data, "vat_number", "company")),
            postal_address=PostalAddress.from_dict(_require(data, "postal_address", "company")),
            contact_person=data.get("contact_person"),
        )


@dataclass(frozen=True)
class PaymentTerms:
    """Net payment terms; ``net_days`` after the invoice date."""

    net_days: int = 30

    def __post_init__(self):
        if isinstance(self.net_days, bool):
            raise InvalidNetDays(self.net_days, "net days must be a day in 1..=31")
        try:
            validate_day(self.net_days)
        except InvalidDay:
            raise InvalidNetDays(self.net_days, "net days must be a day in 1..=31") from None

    @classmethod
    def net(cls, days: int) -> "PaymentTerms":
        return cls(days)

    def __str__(self) -> str:
        return f"Net {self.net_days}"

    def to_dict(self) -> dict:
        return {"net": self.net_days}

    @classmethod
    def from_dict(cls, data: dict) -> "PaymentTerms":
        return cls(_require(data, "net", "payment terms"))


@dataclass(frozen=True)
class PaymentInformation:
    iban: str
    bank_name: str
    bic: str
    currency: Currency
    terms: PaymentTerms = PaymentTerms()

    def to_dict(self) -> dict:
        return {
            "iban": self.iban,
            "bank_name": self.bank_name,
            "bic": self.bic,
            "currency": str(self.currency),
            "terms": self.terms.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PaymentInformation":
        return cls(
            iban=str(_require(data, "iban", "payment information")),
            bank_name=str(_require(data, "bank_name", "payment information")),
            bic=str(_require(data, "bic", "payment information")),
            currency=Currency.parse(_require(data, "currency", "payment information")),
            terms=PaymentTerms.from_dict(_require(data, "terms", "payment information")),
        )
