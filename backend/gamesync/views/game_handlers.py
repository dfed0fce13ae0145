"""Game endpoints, all scoped to the authenticated owner."""

from __future__ import annotations

from http import HTTPStatus
from typing import TYPE_CHECKING

from starlette.responses import JSONResponse, Response

from gamesync.auth.identity import caller_from_request
from gamesync.views.payloads import game_payload, parse_body
from shared.errors import NotFoundError
from shared.games.types import GameDraft, GamePatch

if TYPE_CHECKING:
    from starlette.requests import Request

    from shared.games.service import GameService

_NOT_FOUND = "Game not found or access denied"


def _game_service(request: Request) -> GameService:
    return request.app.state.game_service


async def create_game(request: Request) -> Response:
    caller = caller_from_request(request)
    draft = await parse_body(request, GameDraft)
    game = await _game_service(request).create(caller, draft)
    return JSONResponse(game_payload(game), status_code=HTTPStatus.CREATED)


async def list_games(request: Request) -> Response:
    games = await _game_service(request).list_owned(caller_from_request(request))
    return JSONResponse([game_payload(game) for game in games])


async def get_game(request: Request) -> Response:
    caller = caller_from_request(request)
    game = await _game_service(request).get_owned(caller, request.path_params["game_id"])
    if game is None:
        raise NotFoundError(_NOT_FOUND)
    return JSONResponse(game_payload(game))


async def update_game(request: Request) -> Response:
    """PUT /games/{game_id} - fields absent from the body stay unchanged."""
    caller = caller_from_request(request)
    patch = await parse_body(request, GamePatch)
    game = await _game_service(request).update(caller, request.path_params["game_id"], patch)
    if game is None:
        raise NotFoundError(_NOT_FOUND)
    return JSONResponse(game_payload(game))


async def delete_game(request: Request) -> Response:
    caller = caller_from_request(request)
    if not await _game_service(request).delete(caller, request.path_params["game_id"]):
        raise NotFoundError(_NOT_FOUND)
    return Response(status_code=HTTPStatus.NO_CONTENT)
