"""Account endpoints: registration, self lookup, profile update, and deletion."""

from __future__ import annotations

from http import HTTPStatus
from typing import TYPE_CHECKING

from starlette.responses import JSONResponse, Response

from gamesync.auth.identity import caller_from_request
from gamesync.views.payloads import account_payload, parse_body
from shared.auth.types import AccountUpdateRequest, RegisterRequest
from shared.errors import NotFoundError

if TYPE_CHECKING:
    from starlette.requests import Request

    from shared.auth.service import AccountService

_NOT_FOUND = "Account not found or access denied"


def _account_service(request: Request) -> AccountService:
    return request.app.state.account_service


async def register(request: Request) -> Response:
    """POST /users/register - create an account; no credentials required."""
    req = await parse_body(request, RegisterRequest)
    account = await _account_service(request).register(
        username=req.username,
        password=req.password,
        email=req.email,
        steam_id=req.steam_id,
    )
    return JSONResponse(account_payload(account), status_code=HTTPStatus.CREATED)


async def get_self(request: Request) -> Response:
    """GET /users/me"""
    account = await _account_service(request).get_self(caller_from_request(request))
    return JSONResponse(account_payload(account))


async def get_account(request: Request) -> Response:
    """GET /users/{account_id}"""
    caller = caller_from_request(request)
    account = await _account_service(request).find_by_id(caller, request.path_params["account_id"])
    if account is None:
        raise NotFoundError(_NOT_FOUND)
    return JSONResponse(account_payload(account))


async def update_account(request: Request) -> Response:
    """PUT /users/{account_id} - partial self-service update."""
    caller = caller_from_request(request)
    req = await parse_body(request, AccountUpdateRequest)
    account = await _account_service(request).update_profile(
        caller,
        request.path_params["account_id"],
        username=req.username,
        email=req.email,
        new_password=req.new_password,
    )
    if account is None:
        raise NotFoundError(_NOT_FOUND)
    return JSONResponse(account_payload(account))


async def delete_account(request: Request) -> Response:
    """DELETE /users/{account_id} - removes the account and every game it owns."""
    caller = caller_from_request(request)
    if not await _account_service(request).delete_account(caller, request.path_params["account_id"]):
        raise NotFoundError(_NOT_FOUND)
    return Response(status_code=HTTPStatus.NO_CONTENT)
