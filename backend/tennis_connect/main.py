from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from tennis_connect.api.v1.auth import router as auth_router
from tennis_connect.api.v1.clubs import router as clubs_router
from tennis_connect.api.v1.coaches import router as coaches_router
from tennis_connect.api.v1.health import router as health_router
from tennis_connect.api.v1.marketplace import router as marketplace_router
from tennis_connect.api.v1.me import router as me_router
from tennis_connect.api.v1.messages import router as messages_router
from tennis_connect.api.v1.players import router as players_router
from tennis_connect.api.v1.tournaments import router as tournaments_router
from tennis_connect.api.v1.users import router as users_router
from tennis_connect.core.logging import setup_logging
from tennis_connect.core.settings import settings

setup_logging(settings.LOG_LEVEL)

app = FastAPI(title=settings.PROJECT_NAME)

# The SPA sends the session cookie cross-origin in local dev.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def clear_stale_session_cookie(request: Request, call_next):
    response = await call_next(request)
    if getattr(request.state, "stale_session_cookie", False):
        cookie_prefix = f"{settings.SESSION_COOKIE_NAME}="
        # Leave responses that already (re)set the cookie alone, e.g. login or logout.
        if not any(h.startswith(cookie_prefix) for h in response.headers.getlist("set-cookie")):
            response.delete_cookie(settings.SESSION_COOKIE_NAME, path="/")
    return response


app.include_router(
    health_router,
    prefix=settings.API_V1_STR,
    tags=["Health"],
)
app.include_router(
    auth_router,
    prefix=settings.API_V1_STR,
    tags=["Auth"],
)
app.include_router(
    me_router,
    prefix=settings.API_V1_STR,
    tags=["Me"],
)
app.include_router(
    users_router,
    prefix=settings.API_V1_STR,
    tags=["Users"],
)
app.include_router(
    players_router,
    prefix=settings.API_V1_STR,
    tags=["Players"],
)
app.include_router(
    coaches_router,
    prefix=settings.API_V1_STR,
    tags=["Coaches"],
)
app.include_router(
    tournaments_router,
    prefix=settings.API_V1_STR,
    tags=["Tournaments"],
)
app.include_router(
    marketplace_router,
    prefix=settings.API_V1_STR,
    tags=["Marketplace"],
)
app.include_router(
    clubs_router,
    prefix=settings.API_V1_STR,
    tags=["Clubs"],
)
app.include_router(
    messages_router,
    prefix=settings.API_V1_STR,
    tags=["Messages"],
)
