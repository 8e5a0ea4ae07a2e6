"""Real Microsoft Graph API mail provider (async, application permissions)."""

from datetime import datetime

from msgraph import GraphServiceClient
from msgraph.generated.models.body_type import BodyType
from msgraph.generated.models.email_address import EmailAddress as GraphSDKEmailAddress
from msgraph.generated.models.file_attachment import FileAttachment as GraphSDKFileAttachment
from msgraph.generated.models.item_body import ItemBody as GraphSDKItemBody
from msgraph.generated.models.message import Message as GraphSDKMessage
from msgraph.generated.models.recipient import Recipient as GraphSDKRecipient
from msgraph.generated.users.item.mail_folders.item.messages.messages_request_builder import (
    MessagesRequestBuilder,
)
from msgraph.generated.users.item.send_mail.send_mail_post_request_body import (
    SendMailPostRequestBody,
)

from graphlinker.auth import get_client_secret_credential
from graphlinker.config import GRAPH_SCOPES
from graphlinker.mail_provider.graph_models import (
    AttachmentInfo,
    EmailAddress,
    GraphMessage,
    ItemBody,
    OutgoingMessage,
    Recipient,
)
from graphlinker.mail_provider.mapping import received_since_filter
from graphlinker.utils.logger import get_logger

logger = get_logger("graphlinker.graph_provider")

ORDER_BY_RECEIVED_DESC = ["receivedDateTime desc"]


def _convert_recipient(r) -> Recipient | None:
    if r is None or not r.email_address:
        return None
    return Recipient(
        emailAddress=EmailAddress(
            address=r.email_address.address or "",
            name=r.email_address.name,
        )
    )


def _convert_sdk_message(msg: GraphSDKMessage) -> GraphMessage:
    """Convert SDK message to our GraphMessage model."""
    body = ItemBody()
    if msg.body:
        body = ItemBody(
            contentType="html" if msg.body.content_type == BodyType.Html else "text",
            content=msg.body.content or "",
        )
    attachments = [
        AttachmentInfo(id=a.id, name=a.name, size=a.size, contentType=a.content_type)
        for a in (msg.attachments or [])
    ]
    return GraphMessage(
        id=msg.id or "",
        receivedDateTime=msg.received_date_time.isoformat() if msg.received_date_time else None,
        subject=msg.subject or "",
        body=body,
        bodyPreview=msg.body_preview,
        from_=_convert_recipient(msg.from_),
        toRecipients=[r for r in map(_convert_recipient, msg.to_recipients or []) if r],
        ccRecipients=[r for r in map(_convert_recipient, msg.cc_recipients or []) if r],
        attachments=attachments,
    )


def _sdk_recipients(addresses: list[str]) -> list[GraphSDKRecipient]:
    return [GraphSDKRecipient(email_address=GraphSDKEmailAddress(address=a)) for a in addresses]


def _build_sdk_message(message: OutgoingMessage) -> GraphSDKMessage:
    sdk_message = GraphSDKMessage(
        subject=message.subject,
        body=GraphSDKItemBody(
            content_type=BodyType.Html if message.body.contentType == "html" else BodyType.Text,
            content=message.body.content,
        ),
        to_recipients=_sdk_recipients(message.toRecipients),
        cc_recipients=_sdk_recipients(message.ccRecipients),
        bcc_recipients=_sdk_recipients(message.bccRecipients),
    )
    if message.attachments:
        sdk_message.attachments = [
            GraphSDKFileAttachment(
                odata_type="#microsoft.graph.fileAttachment",
                name=a.name,
                content_type=a.contentType,
                content_bytes=a.content,
                is_inline=False,
            )
            for a in message.attachments
        ]
    return sdk_message


class GraphProvider:
    """Microsoft Graph mail provider using application (client secret) auth.

    Every call is scoped to /users/{mailbox}; the app registration needs the
    Mail.Read and Mail.Send application permissions. Errors from the SDK are
    not retried or translated; they propagate to the caller.
    """

    def __init__(self, tenant_id: str, client_id: str, client_secret: str):
        credential = get_client_secret_credential(
            tenant_id=tenant_id,
            client_id=client_id,
            client_secret=client_secret,
        )
        self._client = GraphServiceClient(credentials=credential, scopes=GRAPH_SCOPES)
        logger.info("graph_provider.init", tenant_id=tenant_id[:8])

    async def list_messages(
        self,
        mailbox: str,
        folder: str,
        top: int,
        received_since: datetime | None = None,
    ) -> list[GraphMessage]:
        """List messages of a mailbox folder, newest first, with attachment metadata expanded."""
        q = MessagesRequestBuilder.MessagesRequestBuilderGetQueryParameters(
            top=top,
            orderby=ORDER_BY_RECEIVED_DESC,
            expand=["attachments"],
        )
        if received_since is not None:
            q.filter = received_since_filter(received_since)
        config = MessagesRequestBuilder.MessagesRequestBuilderGetRequestConfiguration(
            query_parameters=q,
        )
        result = await (
            self._client.users.by_user_id(mailbox)
            .mail_folders.by_mail_folder_id(folder)
            .messages.get(request_configuration=config)
        )
        messages = [_convert_sdk_message(m) for m in ((result.value if result else None) or [])]
        logger.debug(
            "graph_provider.list_messages",
            mailbox=mailbox,
            folder=folder,
            top=top,
            count=len(messages),
        )
        return messages

    async def send_message(
        self,
        mailbox: str,
        message: OutgoingMessage,
        save_to_sent_items: bool = True,
    ) -> None:
        """Send a message as `mailbox` via /users/{mailbox}/sendMail."""
        request_body = SendMailPostRequestBody(
            message=_build_sdk_message(message),
            save_to_sent_items=save_to_sent_items,
        )
        await self._client.users.by_user_id(mailbox).send_mail.post(body=request_body)
        logger.info(
            "graph_provider.send_message",
            mailbox=mailbox,
            recipient_count=len(message.all_recipients),
            attachment_count=len(message.attachments),
        )
