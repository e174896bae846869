import os
import struct
import zlib

import pytest

from discord_webhook_kit import (
    Attachment,
    AsyncWebhookClient,
    Embed,
    EmbedField,
    EmbedImage,
    Message,
    RateLimited,
    Succeeded,
    WebhookClient,
)

DISCORD_WEBHOOK_URL = os.environ.get("DISCORD_WEBHOOK_URL")


def _tiny_png() -> bytes:
    def chunk(kind: bytes, data: bytes) -> bytes:
        return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", zlib.crc32(kind + data))

    header = struct.pack(">IIBBBBB", 1, 1, 8, 2, 0, 0, 0)
    pixels = zlib.compress(b"\x00\x58\x65\xf2")
    return b"\x89PNG\r\n\x1a\n" + chunk(b"IHDR", header) + chunk(b"IDAT", pixels) + chunk(b"IEND", b"")


@pytest.mark.skipif(not DISCORD_WEBHOOK_URL, reason="DISCORD_WEBHOOK_URL not set")
class TestRealWebhook:
    """
    Integration tests that send real messages to Discord.

    To run these tests:
        DISCORD_WEBHOOK_URL="https://discord.com/api/webhooks/..." pytest -v -k TestRealWebhook
    """

    GITHUB_ACTOR = os.environ.get("GITHUB_ACTOR", "local-dev")
    GITHUB_SHA = os.environ.get("GITHUB_SHA", "unknown")[:7]
    GITHUB_REF_NAME = os.environ.get("GITHUB_REF_NAME", "local")
    GITHUB_RUN_NUMBER = os.environ.get("GITHUB_RUN_NUMBER", "0")

    def test_send_simple_message(self) -> None:
        assert DISCORD_WEBHOOK_URL is not None
        content = f"🧪 Test run #{self.GITHUB_RUN_NUMBER} by **{self.GITHUB_ACTOR}** on `{self.GITHUB_REF_NAME}`"
        with WebhookClient() as client:
            outcome = client.send_message(DISCORD_WEBHOOK_URL, Message(content=content))
        assert isinstance(outcome, (Succeeded, RateLimited))

    def test_send_embed_with_attachment(self) -> None:
        assert DISCORD_WEBHOOK_URL is not None
        image = Attachment("pixel.png", _tiny_png(), description="one blurple pixel")
        message = Message(
            content="📊 CI Status Report",
            embeds=[
                Embed(
                    description=f"Commit `{self.GITHUB_SHA}`",
                    color=0x5865F2,
                    thumbnail=EmbedImage(image.reference),
                    fields=[EmbedField(name="🔀 Branch", value=self.GITHUB_REF_NAME, inline=True)],
                )
            ],
            attachments=[image],
        )
        with WebhookClient(default_username=f"CI Bot ({self.GITHUB_REF_NAME})") as client:
            outcome = client.send_message(DISCORD_WEBHOOK_URL, message)
        assert isinstance(outcome, (Succeeded, RateLimited))
        if isinstance(outcome, Succeeded):
            assert outcome.message_id

    @pytest.mark.asyncio
    async def test_send_with_async_client(self) -> None:
        assert DISCORD_WEBHOOK_URL is not None
        content = f"✅ Async client is operational at `{self.GITHUB_SHA}`."
        async with AsyncWebhookClient() as client:
            outcome = await client.send_message(DISCORD_WEBHOOK_URL, Message(content=content))
        assert isinstance(outcome, (Succeeded, RateLimited))
