from fastapi import APIRouter, Depends, Header
from dishka import FromDishka
from dishka.integrations.fastapi import inject

import logging

from keychat.core.gateways import UserGateway
from keychat.core.errors import ForbiddenError
from .models.auth_api_models import *
from .request_body import json_or_form


class AuthAPI:
    """
    Registration endpoint and the api key dependency chain.

    Every protected router depends on ``current_user``, which runs
    ``get_api_key`` (header extraction) then the key lookup.
    Attributes:
        logger (logging.Logger): Logger instance
        _auth_router (APIRouter): router holding the public /register endpoint
    """
    BEARER_PREFIX = "Bearer "
    PUBLIC_ROUTES = {("POST", "/register")}

    def __init__(
            self,
            logger: logging.Logger
    ):
        self.logger = logger
        self._auth_router = APIRouter(tags=["Authentication"])
        self._register_dependencies()
        self._register_endpoints()

    @property
    def auth_router(self) -> APIRouter:
        return self._auth_router

    def get_router(self) -> APIRouter:
        return self._auth_router

    def protected_router(self, **kwargs) -> APIRouter:
        """
        Create a router whose every route requires a valid api key.
        """
        return APIRouter(dependencies=[Depends(self.current_user)], **kwargs)

    @classmethod
    def extract_api_key(cls, authorization: str | None) -> str | None:
        """
        Strip the Bearer prefix from an Authorization header value.
        Returns None when nothing usable is left.
        """
        if not authorization:
            return None
        key = authorization.replace(cls.BEARER_PREFIX, "", 1).strip()
        return key or None

    def _register_dependencies(self):
        async def get_api_key(
                authorization: str | None = Header(default=None)
        ) -> str:
            key = self.extract_api_key(authorization)
            if key is None:
                raise ForbiddenError({"apiKey": "No api key in Authorization header"})
            return key

        @inject
        async def current_user(
                user_gateway: FromDishka[UserGateway],
                api_key: str = Depends(get_api_key)
        ) -> RequestContext:
            owner = await user_gateway.get_user_by_api_key(api_key)
            if owner is None or not owner.active:
                self.logger.info("Rejected api key (known=%s)", owner is not None)
                raise ForbiddenError({"key": "Invalid api key"})

            return RequestContext(user_id=owner.id, username=owner.username)

        self.get_api_key = get_api_key
        self.current_user = current_user

    def _register_endpoints(self):
        @self.auth_router.post("/register")
        @inject
        async def register(
                user_gateway: FromDishka[UserGateway],
                user_data: UserRegisterRequest = Depends(json_or_form(UserRegisterRequest))
        ):
            """
            Register a new user and hand out its api key
            Args: user_data: username and email
            Returns: dict: id of the new user and its key
            """
            registered = await user_gateway.register(
                username=user_data.username,
                email=user_data.email
            )
            self.logger.info("Registered user %s (id=%s)", user_data.username, registered.id)

            return {
                "status": "success",
                "data": UserRegisterResponse(id=registered.id, key=registered.key)
            }
