# contact_schema.py
from pydantic import BaseModel
from typing import Optional


class ContactRequest(BaseModel):
    # Optional on purpose: missing fields are answered with the endpoint's own 400.
    name: Optional[str] = None
    email: Optional[str] = None
    message: Optional[str] = None


class ContactInfo(BaseModel):
    phone: str
    email: str


class ContactResponse(BaseModel):
    success: bool
    message: str
    contactInfo: ContactInfo
