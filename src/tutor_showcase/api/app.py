"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Header, HTTPException, Request, status

from tutor_showcase.api.admin import router as admin_router
from tutor_showcase.api.site import router as site_router
from tutor_showcase.api.telegram_models import TelegramUpdate
from tutor_showcase.app_logging import configure_logging
from tutor_showcase.containers import AppContainer
from tutor_showcase.telegram_commands import CHAT_MENU_BUTTON, telegram_commands


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            await app.state.container.telegram_client.set_my_commands(
                telegram_commands()
            )
            await app.state.container.telegram_client.set_chat_menu_button(
                CHAT_MENU_BUTTON
            )
        except Exception:
            logger.exception("Failed to sync Telegram bot commands")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(site_router)
    app.include_router(admin_router)

    @app.post("/telegram/webhook")
    async def telegram_webhook(
        update: TelegramUpdate,
        request: Request,
        x_telegram_bot_api_secret_token: str | None = Header(default=None),
    ) -> dict[str, str]:
        """Handle Telegram webhook updates."""
        state_container: AppContainer = request.app.state.container
        secret = state_container.settings.telegram_webhook_secret
        if secret and x_telegram_bot_api_secret_token != secret:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
        if update.message is None:
            return {"status": "ok"}
        try:
            await state_container.dispatcher.dispatch(update.message.to_inbound())
        except Exception:
            logger.exception(
                "Unhandled error in Telegram webhook",
                extra={"update_id": update.update_id},
            )
        return {"status": "ok"}

    return app
