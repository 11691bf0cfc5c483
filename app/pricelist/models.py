"""
Pydantic models for the price list extraction pipeline.

Defines the fixed PriceRow table schema, the caller-supplied document
metadata and the request/response bodies of the HTTP layer. Wire names
are PascalCase (PriceRow) or camelCase (Meta) via field aliases.
"""

from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    field_validator,
    model_validator,
)

CENT = Decimal("0.01")

# Decimal in Python, plain number on the wire
Money = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]


def to_cents(value: Decimal) -> Decimal:
    """Round to minor-unit precision, half up."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


class Currency(str, Enum):
    """ISO currencies recognised in price lists."""

    EUR = "EUR"
    USD = "USD"
    GBP = "GBP"


class Tier(str, Enum):
    """Price column a detected value belongs to."""

    T1 = "T1"  # list / MSRP / retail
    T2 = "T2"  # net / dealer / trade


class QuoteOrPriceList(str, Enum):
    """Kind of source document."""

    PRICE_LIST = "Price List"
    QUOTE = "Quote"


LANGUAGE_PLACEHOLDERS = ("LANGUAGE 2", "LANGUAGE 3", "LANGUAGE 4")


class PriceRow(BaseModel):
    """
    One emitted line item of the price table.

    ModelCode and ModelDescription are never empty. MaterialID, SAPNumber
    and ModelDescriptionEnglish mirror the code/description when left blank.
    """

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    supplier: str = Field(
        default="",
        alias="Supplier",
        description="Company selling the goods (distributor/dealer/integrator).",
    )
    manufacturer: str = Field(
        default="",
        alias="Manufacturer",
        description="Company that makes the product.",
    )
    model_code: str = Field(
        ...,
        alias="ModelCode",
        description="Vendor SKU / model identifier, letters+digits as shown in the doc.",
    )
    model_description: str = Field(
        ...,
        alias="ModelDescription",
        description="Human description of the model row.",
    )
    t1_list: Money = Field(
        default=Decimal("0"),
        alias="T1List",
        description="List/MSRP price if present; else 0.",
    )
    t1_cost: Money = Field(
        default=Decimal("0"),
        alias="T1Cost",
        description="Cost at T1 if present; else 0.",
    )
    t2_list: Money = Field(
        default=Decimal("0"),
        alias="T2List",
        description="Dealer/Net price if present; else 0.",
    )
    t2_cost: Money = Field(
        default=Decimal("0"),
        alias="T2Cost",
        description="Cost at T2 if present; else 0.",
    )
    iso_currency: Currency = Field(
        default=Currency.EUR,
        alias="ISOCurrency",
        description="ISO currency code like EUR, USD, GBP.",
    )
    validity_date: str = Field(
        default="",
        alias="ValidityDate",
        description="Validity or issue date (ISO if possible) or empty.",
    )
    tier: Tier = Field(
        default=Tier.T2,
        alias="T1orT2",
        description="Best label for the extracted price (T1 or T2).",
    )
    material_id: str = Field(default="", alias="MaterialID")
    sap_number: str = Field(default="", alias="SAPNumber")
    model_description_english: str = Field(default="", alias="ModelDescriptionEnglish")
    model_description_language2: str = Field(
        default=LANGUAGE_PLACEHOLDERS[0], alias="ModelDescriptionLanguage2"
    )
    model_description_language3: str = Field(
        default=LANGUAGE_PLACEHOLDERS[1], alias="ModelDescriptionLanguage3"
    )
    model_description_language4: str = Field(
        default=LANGUAGE_PLACEHOLDERS[2], alias="ModelDescriptionLanguage4"
    )
    quote_or_price_list: QuoteOrPriceList = Field(
        default=QuoteOrPriceList.PRICE_LIST,
        alias="QuoteOrPriceList",
    )
    weight_kg: float = Field(default=0, alias="WeightKg")
    height_mm: float = Field(default=0, alias="HeightMm")
    length_mm: float = Field(default=0, alias="LengthMm")
    width_mm: float = Field(default=0, alias="WidthMm")
    power_watts: float = Field(default=0, alias="PowerWatts")
    file_name: str = Field(
        default="",
        alias="FileName",
        description="Source PDF file name.",
    )

    @field_validator("model_code", "model_description")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject blank identifiers and descriptions."""
        v = v.strip()
        if not v:
            raise ValueError("ModelCode and ModelDescription must not be empty")
        return v

    @field_validator("t1_list", "t1_cost", "t2_list", "t2_cost")
    @classmethod
    def quantize_money(cls, v: Decimal) -> Decimal:
        """Keep prices at minor-unit (cent) precision."""
        return to_cents(v)

    @model_validator(mode="after")
    def mirror_identifiers(self) -> "PriceRow":
        """Fill mirrored fields from the model code and description."""
        if not self.material_id:
            self.material_id = self.model_code
        if not self.sap_number:
            self.sap_number = self.model_code
        if not self.model_description_english:
            self.model_description_english = self.model_description
        return self

    @property
    def price(self) -> Decimal:
        """The non-zero price of the row's own tier."""
        if self.tier == Tier.T1:
            return self.t1_list
        return self.t2_list


class Meta(BaseModel):
    """
    Caller-supplied document metadata.

    Blank fields may be filled by guesses from the document text; values
    given here are never overwritten.
    """

    model_config = ConfigDict(populate_by_name=True)

    supplier: str = Field(default="")
    manufacturer: str = Field(default="")
    validity_date: str = Field(default="", alias="validityDate")
    file_name: str = Field(default="", alias="fileName")

    @field_validator("supplier", "manufacturer", "validity_date", "file_name", mode="before")
    @classmethod
    def strip_value(cls, v: Any) -> str:
        """Normalise None and surrounding whitespace."""
        if v is None:
            return ""
        return str(v).strip()


# =============================================================================
# HTTP Models
# =============================================================================


class ParseResponse(BaseModel):
    """Response model for the heuristic /parse endpoint."""

    items: list[PriceRow] = Field(
        default_factory=list,
        description="Extracted rows in document order",
    )


class SalvageRequest(BaseModel):
    """Raw text returned by a generative model call."""

    raw: str = Field(..., description="Unprocessed model response body")


class SalvageDebug(BaseModel):
    """Diagnostics for a response that could not be repaired."""

    model_config = ConfigDict(populate_by_name=True)

    cleaned_prefix: str = Field(..., alias="cleanedPrefix")
    stages_tried: list[str] = Field(..., alias="stagesTried")
    final_stage: str = Field(..., alias="finalStage")


class SalvageErrorResponse(BaseModel):
    """Error payload returned when salvage fails."""

    error: str
    detail: str | None = None
    debug: SalvageDebug | None = None


class SchemaResponse(BaseModel):
    """Response model carrying the PriceRow table JSON schema."""

    schema_definition: dict[str, Any] = Field(
        ...,
        description="Response schema for constraining a generative call",
        alias="schema",
    )


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(default="healthy")
    message: str = Field(default="")
    version: str = Field(default="1.0.0")
