"""Email routes: list messages of an allowed mailbox, send as an allowed mailbox."""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from graphlinker.api.models import EmailRequest, MessageSummary
from graphlinker.config import DEFAULT_FOLDER, DEFAULT_TOP
from graphlinker.errors import GatewayError
from graphlinker.gateway import MailGateway
from graphlinker.utils.logger import get_logger

logger = get_logger("graphlinker.api.routes")

router = APIRouter(prefix="/emails", tags=["emails"])


def get_gateway(request: Request) -> MailGateway:
    gateway: MailGateway | None = getattr(request.app.state, "gateway", None)
    if gateway is None:
        logger.error("api.no_gateway")
        raise HTTPException(status_code=503, detail="Mail provider is not initialized")
    return gateway


@router.get("/{sender_email}", response_model=list[MessageSummary], name="ReadEmails")
async def read_emails(
    sender_email: str,
    top: int = Query(DEFAULT_TOP, ge=1, le=1000),
    folder: str = Query(DEFAULT_FOLDER),
    from_date: Optional[datetime] = Query(None, alias="fromDate", description="Inclusive lower bound (UTC)"),
    gateway: MailGateway = Depends(get_gateway),
) -> list[MessageSummary]:
    """Read the latest messages of an allowed mailbox, newest first."""
    try:
        messages = await gateway.list_messages(sender_email, top=top, folder=folder, from_date=from_date)
    except GatewayError:
        raise
    except Exception as e:
        logger.exception("api.read_emails.provider_error", sender=sender_email, error=str(e))
        raise
    return [MessageSummary.from_graph(m) for m in messages]


@router.post("/{sender_email}", name="SendEmail")
async def send_email(
    sender_email: str,
    payload: EmailRequest,
    gateway: MailGateway = Depends(get_gateway),
) -> str:
    """Send as an allowed mailbox. Every to/cc/bcc recipient must match one of the sender's patterns."""
    try:
        await gateway.send_message(
            sender_email,
            to=payload.to_list(),
            subject=payload.subject,
            body=payload.body,
            cc=payload.cc_list(),
            bcc=payload.bcc_list(),
            attachments=payload.attachments,
        )
    except GatewayError:
        raise
    except Exception as e:
        logger.exception("api.send_email.provider_error", sender=sender_email, error=str(e))
        raise
    return "Email sent."
