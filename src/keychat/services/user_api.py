from fastapi import APIRouter, Depends
from dishka import FromDishka
from dishka.integrations.fastapi import inject
import logging
import re

from keychat.core.gateways import UserGateway
from keychat.core.errors import NotFoundError
from .auth_api import AuthAPI
from .models.auth_api_models import RequestContext
from .models.user_api_models import UserResponse

NUMERIC_ID = re.compile(r"\s*-?[0-9]+\s*")


class UserAPI:
    """
    Read-only user lookups: by id, by username and the caller's own record.
    All routes require a valid api key.
    """

    def __init__(
            self,
            logger: logging.Logger,
            auth_api: AuthAPI
    ):
        self.logger = logger
        self.auth_api = auth_api

        self._user_router = auth_api.protected_router(tags=["Users"])
        self._register_endpoints()

    @property
    def user_router(self) -> APIRouter:
        return self._user_router

    def get_router(self) -> APIRouter:
        return self._user_router

    def _register_endpoints(self):
        @self.user_router.get("/user_by_id/{user_id}")
        @inject
        async def get_user_by_id(
                user_id: str,
                user_gateway: FromDishka[UserGateway]
        ):
            # Non-numeric ids answer 200 with a fail envelope, unlike every other validation path
            if not NUMERIC_ID.fullmatch(user_id):
                return {"status": "fail", "data": {"userId": f"{user_id} is not a number"}}
            numeric_id = int(user_id)

            user = await user_gateway.get_user_by_id(numeric_id)
            if user is None:
                raise NotFoundError({"userId": f"{numeric_id} does not exist"})

            return {"status": "success", "data": {"user": UserResponse.model_validate(user, from_attributes=True)}}

        @self.user_router.get("/myinfo")
        @inject
        async def get_my_info(
                user_gateway: FromDishka[UserGateway],
                context: RequestContext = Depends(self.auth_api.current_user)
        ):
            user = await user_gateway.get_user_by_id(context.user_id)
            if user is None:
                raise NotFoundError({"userId": f"{context.user_id} does not exist"})

            return {"status": "success", "data": {"user": UserResponse.model_validate(user, from_attributes=True)}}

        @self.user_router.get("/user_by_username/{username}")
        @inject
        async def get_user_by_username(
                username: str,
                user_gateway: FromDishka[UserGateway]
        ):
            user = await user_gateway.get_user_by_username(username)
            if user is None:
                raise NotFoundError({"username": f"{username} does not exist"})

            return {"status": "success", "data": {"user": UserResponse.model_validate(user, from_attributes=True)}}
