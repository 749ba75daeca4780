"""HTTP routes for the site backend."""

import logging
from typing import Optional

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from .config import Config, get_config
from .email_client import EmailSender, get_email_sender, send_contact_email
from .experience import calculate_experience, get_experience_text, get_total_experience
from .models import ContactError, ContactFormData, ContactSuccess, ExperienceSummary, missing_fields

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Missing required fields"
INVALID_BODY_MESSAGE = "Invalid JSON body"
INVALID_FIELDS_MESSAGE = "Invalid field values"
SEND_FAILED_MESSAGE = "Failed to send message. Please try again."
SEND_OK_MESSAGE = "Message sent successfully!"

router = APIRouter(prefix="/api", tags=["Site"])


def _error(status_code: int, message: str, fields: Optional[list[str]] = None) -> JSONResponse:
    body = ContactError(error=message, fields=fields or [])
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_defaults=True))


@router.post("/contact")
async def submit_contact(request: Request):
    try:
        data = await request.json()
    except (ValueError, RecursionError):
        logger.info("Rejected contact submission with unreadable body")
        return _error(status.HTTP_400_BAD_REQUEST, INVALID_BODY_MESSAGE)

    if not isinstance(data, dict):
        return _error(status.HTTP_400_BAD_REQUEST, INVALID_BODY_MESSAGE)

    missing = missing_fields(data)
    if missing:
        logger.info(f"Rejected contact submission, missing: {', '.join(missing)}")
        return _error(status.HTTP_400_BAD_REQUEST, MISSING_FIELDS_MESSAGE, missing)

    try:
        form = ContactFormData.model_validate(data)
    except ValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
        logger.info(f"Rejected contact submission, invalid: {', '.join(fields)}")
        return _error(status.HTTP_400_BAD_REQUEST, INVALID_FIELDS_MESSAGE, fields)

    config: Config = request.app.state.config
    sender: EmailSender = request.app.state.email_sender

    logger.info(
        f"Contact form submission from {form.full_name} <{form.email}> "
        f"at {form.received_at.isoformat(timespec='seconds')}"
    )

    try:
        await run_in_threadpool(send_contact_email, sender, form, config.contact_recipient)
    except Exception as e:
        logger.exception(f"Contact form error: {e}")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, SEND_FAILED_MESSAGE)

    return ContactSuccess(message=SEND_OK_MESSAGE)


@router.get("/experience", response_model=ExperienceSummary)
def experience_summary() -> ExperienceSummary:
    return ExperienceSummary(
        years=calculate_experience(),
        total=get_total_experience(),
        text=get_experience_text(),
    )


def create_app(
    config: Optional[Config] = None, sender: Optional[EmailSender] = None
) -> FastAPI:
    """Build the FastAPI application."""
    if config is None:
        config = get_config()
    if sender is None:
        sender = get_email_sender(config)

    app = FastAPI(title="Portfolio Site API")
    app.state.config = config
    app.state.email_sender = sender
    app.include_router(router)

    logger.debug(f"Created app with {type(sender).__name__}")
    return app
