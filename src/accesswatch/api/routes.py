"""Route handlers for tracking subscriptions.

Handlers are plain ``def`` functions: FastAPI runs them in its threadpool, where
the adapters are free to drive their own event loop.
"""

from __future__ import annotations

import secrets
from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from accesswatch.app import Application  # noqa: TC001

from .schemas import TrackedIdentityList, TrackedIdentityOut, TrackRequest, UntrackRequest

AUTH_HEADER = "X-Auth-Token"


def get_application(request: Request) -> Application:
    return request.app.state.application


def require_auth_token(
    request: Request,
    x_auth_token: Annotated[str | None, Header(alias=AUTH_HEADER)] = None,
) -> None:
    expected: str = request.app.state.auth_string
    if x_auth_token is None or not secrets.compare_digest(
        x_auth_token.encode(), expected.encode()
    ):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


ApplicationDep = Annotated[Application, Depends(get_application)]

health_router = APIRouter(tags=["health"])
track_router = APIRouter(
    prefix="/track",
    tags=["track"],
    dependencies=[Depends(require_auth_token)],
)


@health_router.get("/")
@health_router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@track_router.post("")
def track(body: TrackRequest, application: ApplicationDep) -> dict[str, str]:
    application.tracking.subscribe(body.chat_id, body.run, alias=body.alias)
    return {"status": "ok"}


@track_router.delete("")
def untrack(body: UntrackRequest, application: ApplicationDep) -> dict[str, str]:
    application.tracking.unsubscribe(body.chat_id, body.run)
    return {"status": "ok"}


@track_router.get("/send/{chat_id}")
def send_tracked(chat_id: str, application: ApplicationDep) -> dict[str, str]:
    application.tracking.send_list(chat_id)
    return {"status": "ok"}


@track_router.get("/{chat_id}", response_model=TrackedIdentityList)
def list_tracked(chat_id: str, application: ApplicationDep) -> TrackedIdentityList:
    identities = application.tracking.list_for_chat(chat_id)
    return TrackedIdentityList(data=[TrackedIdentityOut.from_identity(i) for i in identities])
