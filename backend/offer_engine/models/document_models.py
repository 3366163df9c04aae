"""
Document request envelope.

Each proposal or letter type is a separate variant of a tagged union keyed by
``document_type``, so the API and the quote builders never reach into an
untyped bag of optional fields.
"""
from typing import Annotated, Literal, Optional, Union

from pydantic import Field, RootModel

from offer_engine.models.common import CamelModel
from offer_engine.models.company_services_models import CompanyServicesData
from offer_engine.models.golden_visa_models import GoldenVisaData
from offer_engine.models.offer_models import OfferData
from offer_engine.models.taxation_models import TaxationData


class OfferDocumentRequest(CamelModel):
    document_type: Literal["offer"] = "offer"
    data: Optional[OfferData] = None


class GoldenVisaDocumentRequest(CamelModel):
    document_type: Literal["golden-visa"] = "golden-visa"
    data: Optional[GoldenVisaData] = None


class CompanyServicesDocumentRequest(CamelModel):
    document_type: Literal["company-services"] = "company-services"
    data: Optional[CompanyServicesData] = None


class TaxationDocumentRequest(CamelModel):
    document_type: Literal["taxation"] = "taxation"
    data: Optional[TaxationData] = None


DocumentRequest = Annotated[
    Union[
        OfferDocumentRequest,
        GoldenVisaDocumentRequest,
        CompanyServicesDocumentRequest,
        TaxationDocumentRequest,
    ],
    Field(discriminator="document_type"),
]


class DocumentEnvelope(RootModel[DocumentRequest]):
    """Request body wrapper so the tagged union validates as one model."""
