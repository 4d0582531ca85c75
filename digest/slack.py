"""Slack destination - posts digest pages with chat.postMessage."""

import asyncio
from typing import Optional

import httpx

import config
from digest.pipeline import Destination
from digest.render.paginator import MessagePage
from digest.types import DigestContext
from logger import logger
from utils.log_sanitizer import sanitize_for_log

MAX_ATTEMPTS = 3
DEFAULT_RETRY_AFTER = 1.0


class SlackPostError(Exception):
    """Slack rejected a message or kept rate limiting it."""

    def __init__(self, error: str, status_code: Optional[int] = None):
        self.error = error
        self.status_code = status_code
        super().__init__(f"Slack chat.postMessage failed: {error}")


class SlackDestination(Destination):
    """Posts each rendered page as its own Slack message."""

    name = 'slack'

    def __init__(
        self,
        token: Optional[str] = None,
        channel_id: Optional[str] = None,
        dry_run: Optional[bool] = None,
        api_url: Optional[str] = None,
        timeout: float = 30.0
    ):
        self.token = token if token is not None else config.SLACK_BOT_TOKEN
        self.channel_id = channel_id if channel_id is not None else config.SLACK_CHANNEL_ID
        self.dry_run = config.DRY_RUN if dry_run is None else dry_run
        self.api_url = (api_url or config.SLACK_API_URL).rstrip('/')
        self.timeout = timeout

    def is_enabled(self) -> bool:
        return bool(self.token and self.channel_id)

    async def send_digest(self, pages: list[MessagePage], context: DigestContext) -> None:
        if self.dry_run:
            for page in pages:
                logger.info(
                    f"[DRY_RUN] Digest preview {context.date_title} "
                    f"({page.index + 1}/{page.total}, {len(page.blocks)} blocks)\n"
                    "----------------------------------------\n"
                    f"{page.text.strip()}\n"
                    "----------------------------------------"
                )
            return

        if not self.is_enabled():
            logger.warning("Slack destination has no bot token or channel configured")
            return

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            for page in pages:
                await self._post_message(client, page.to_payload())
                logger.info(f"Posted digest part {page.index + 1}/{page.total} to Slack")

    async def _post_message(self, client, payload: dict) -> dict:
        """POST one message, retrying while Slack rate limits us."""
        headers = {
            'Authorization': f'Bearer {self.token}',
            'Content-Type': 'application/json; charset=utf-8',
        }
        body = {'channel': self.channel_id, **payload}

        for attempt in range(1, MAX_ATTEMPTS + 1):
            response = await client.post(f"{self.api_url}/chat.postMessage", headers=headers, json=body)

            if response.status_code == 429:
                retry_after = _retry_after(response, {})
            else:
                try:
                    data = response.json()
                except ValueError:
                    logger.error(f"Slack returned non-JSON response: HTTP {response.status_code}")
                    raise SlackPostError(f"http_{response.status_code}", response.status_code)

                if data.get('ok'):
                    return data

                error = data.get('error', 'unknown_error')
                if error != 'ratelimited':
                    logger.error(f"Slack post failed: {sanitize_for_log(data)}")
                    raise SlackPostError(error, response.status_code)
                retry_after = _retry_after(response, data)

            if attempt < MAX_ATTEMPTS:
                logger.warning(f"Slack rate limited, retrying in {retry_after}s "
                               f"(attempt {attempt}/{MAX_ATTEMPTS})")
                await asyncio.sleep(retry_after)

        raise SlackPostError('ratelimited', 429)


def _retry_after(response, data: dict) -> float:
    value = response.headers.get('Retry-After') or data.get('retry_after')
    try:
        return float(value) if value is not None else DEFAULT_RETRY_AFTER
    except (TypeError, ValueError):
        return DEFAULT_RETRY_AFTER
