from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Response, WebSocket, WebSocketDisconnect, status

from playdate.api.deps import get_arcade
from playdate.api.models import (
    Character,
    CharacterUpdateRequest,
    GameCatalogResponse,
    GameView,
    PlayerId,
    SessionState,
    SurfaceUploadRequest,
)
from playdate.arcade import GAME_CATALOG, Arcade
from playdate.surfaces import decode_data_url
from playdate.websocket_hub import hub

router = APIRouter()


@router.websocket("/ws")
async def table_updates_ws(websocket: WebSocket) -> None:
    await hub.connect(websocket)

    try:
        # Keep the socket open; client can optionally send pings.
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await hub.disconnect(websocket)
    except Exception:
        await hub.disconnect(websocket)
        raise


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/session", response_model=SessionState)
async def get_session_route(arcade: Arcade = Depends(get_arcade)) -> SessionState:
    return arcade.session_state()


@router.get("/characters", response_model=list[Character])
async def list_characters_route(arcade: Arcade = Depends(get_arcade)) -> list[Character]:
    return arcade.roster.as_list()


@router.put("/characters/{player}", response_model=Character)
async def update_character_route(
    player: PlayerId,
    payload: CharacterUpdateRequest,
    arcade: Arcade = Depends(get_arcade),
) -> Character:
    try:
        return arcade.update_character(player, payload)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e


@router.post("/characters/{player}/randomize", response_model=Character)
async def randomize_character_route(player: PlayerId, arcade: Arcade = Depends(get_arcade)) -> Character:
    return arcade.randomize_character(player)


@router.get("/games", response_model=GameCatalogResponse)
async def list_games_route() -> GameCatalogResponse:
    return GameCatalogResponse(games=list(GAME_CATALOG))


@router.post("/games/{game_type}", response_model=GameView, status_code=status.HTTP_201_CREATED)
async def select_game_route(game_type: str, arcade: Arcade = Depends(get_arcade)) -> GameView:
    try:
        arcade.select_game(game_type)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    return arcade.game_view()


@router.get("/game", response_model=GameView)
async def get_game_route(arcade: Arcade = Depends(get_arcade)) -> GameView:
    try:
        return arcade.game_view()
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.delete("/game", status_code=status.HTTP_204_NO_CONTENT)
async def leave_game_route(arcade: Arcade = Depends(get_arcade)) -> Response:
    arcade.leave_game()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/game/actions/{action}", response_model=GameView)
async def game_action_route(
    action: str,
    payload: dict[str, Any] | None = Body(default=None),
    arcade: Arcade = Depends(get_arcade),
) -> GameView:
    try:
        arcade.dispatch_action(action, payload)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    return arcade.game_view()


@router.put("/game/surface", status_code=status.HTTP_204_NO_CONTENT)
async def upload_surface_route(payload: SurfaceUploadRequest, arcade: Arcade = Depends(get_arcade)) -> Response:
    try:
        arcade.upload_surface(decode_data_url(payload.data_url))
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/game/surface/download")
async def download_surface_route(arcade: Arcade = Depends(get_arcade)) -> Response:
    try:
        exported = arcade.download_surface()
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    return Response(
        content=exported.content,
        media_type="image/png",
        headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
    )
