"""Quote routes: build any proposal or letter from its configuration."""
import logging

from fastapi import APIRouter
from fastapi.encoders import jsonable_encoder

from offer_engine.models.document_models import DocumentEnvelope
from offer_engine.services.authority_registry import list_authorities
from offer_engine.services.quote_builder import build_document

router = APIRouter(prefix="/api/quotes", tags=["Quotes"])
logger = logging.getLogger("tme-offers.api")


@router.post("")
async def create_quote(envelope: DocumentEnvelope):
    """
    Return the itemized quote (or letters) for the requested document type.

    Missing document data raises InvalidDocumentDataError, which the app
    maps to a 400.
    """
    document = envelope.root
    logger.debug(f"Building {document.document_type} document")
    return jsonable_encoder(build_document(document))


@router.get("/authorities")
async def get_authorities():
    return [
        {"id": config.id, "name": config.name, "displayName": config.display_name}
        for config in list_authorities()
    ]
