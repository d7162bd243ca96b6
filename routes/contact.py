# routes/contact.py
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from core.config import settings
from schemas.contact_schema import ContactInfo, ContactRequest, ContactResponse
from services.validation import validate_contact

import logging
logger = logging.getLogger(__name__)

router = APIRouter(tags=["Support"])


# ==================================================================
#  ✅ Contact Support (public, stateless)
# ==================================================================
@router.post("/contact-support", response_model=ContactResponse)
def contact_support(data: ContactRequest):
    try:
        error = validate_contact(data.name, data.email, data.message)
        if error:
            return JSONResponse(status_code=400, content={"error": error})

        logger.info(f"📬 Support message from {data.email}")
        return ContactResponse(
            success=True,
            message=f"Message from {data.name} ({data.email}): {data.message}",
            contactInfo=ContactInfo(phone=settings.CONTACT_PHONE, email=settings.CONTACT_EMAIL),
        )
    except Exception as e:
        logger.exception(f"❌ Contact support failed: {e}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})
