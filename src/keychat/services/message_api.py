from fastapi import APIRouter, Depends
from dishka.integrations.fastapi import inject
from dishka import FromDishka
import logging

from keychat.core.gateways import UserGateway, MessageGateway
from keychat.core.dto import MessageDTO
from keychat.core.errors import NotFoundError, RejectedError
from .auth_api import AuthAPI
from .models.auth_api_models import RequestContext
from .models.message_api_models import *
from .request_body import json_or_form


class MessageAPI:
    """
    Message endpoints: sending a message to another user and reading
    the whole two-party thread with a peer.

    Attributes:
        logger: Logger instance for tracking operations
        auth_api: Authentication API instance providing the caller identity
        message_router: FastAPI router containing message endpoints
    """

    def __init__(
            self,
            logger: logging.Logger,
            auth_api: AuthAPI,
    ):
        self.logger = logger
        self.auth_api = auth_api

        self._message_router = auth_api.protected_router(tags=["Messages"])
        self._register_endpoints()

    @property
    def message_router(self) -> APIRouter:
        return self._message_router

    def get_router(self) -> APIRouter:
        return self._message_router

    @staticmethod
    def relabel(message: MessageDTO, context: RequestContext, peer_username: str) -> ConversationMessage:
        """
        Replace the sender/recipient ids of a thread message with usernames.
        """
        if message.src_id == context.user_id:
            src, dst = context.username, peer_username
        else:
            src, dst = peer_username, context.username

        return ConversationMessage(
            src=src,
            dst=dst,
            content=message.content,
            createdAt=message.created_at
        )

    def _register_endpoints(self):
        @self.message_router.post("/send_message")
        @inject
        async def send_message(
                user_gateway: FromDishka[UserGateway],
                message_gateway: FromDishka[MessageGateway],
                context: RequestContext = Depends(self.auth_api.current_user),
                message_data: MessageSendRequest = Depends(json_or_form(MessageSendRequest))
        ):
            """
            Send a message to the user named ``dst``.

            Raises:
                NotFoundError: If the recipient does not exist
                RejectedError: If the recipient is the sender
            """
            dst_user = await user_gateway.get_user_by_username(message_data.dst)
            if dst_user is None:
                raise NotFoundError({
                    "message_sent": False,
                    "message": f"{message_data.dst} does not exist"
                })

            if dst_user.id == context.user_id:
                raise RejectedError({
                    "message_sent": False,
                    "message": "you can not send a message to yourself"
                })

            await message_gateway.send_message(
                src_id=context.user_id,
                dst_id=dst_user.id,
                content=message_data.content
            )
            self.logger.debug("Message sent from %s to %s", context.user_id, dst_user.id)

            return {"status": "success", "data": {"message_sent": True}}

        @self.message_router.get("/read_message/{username}")
        @inject
        async def read_message(
                username: str,
                user_gateway: FromDishka[UserGateway],
                message_gateway: FromDishka[MessageGateway],
                context: RequestContext = Depends(self.auth_api.current_user)
        ):
            """
            Read every message exchanged with ``username``, oldest first.

            Raises:
                RejectedError: If the peer is the caller
                NotFoundError: If the peer does not exist
            """
            if username == context.username:
                raise RejectedError({"messages": "you can not have a conversation with yourself"})

            peer = await user_gateway.get_user_by_username(username)
            if peer is None:
                raise NotFoundError({"messages": f"{username} does not exist"})

            thread = await message_gateway.read_messages(context.user_id, peer.id)

            return {
                "status": "success",
                "data": {
                    "messages": [self.relabel(m, context, peer.username) for m in thread]
                }
            }
