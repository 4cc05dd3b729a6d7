import asyncio
from typing import Awaitable, Callable, Optional

from app.core.config import Settings, settings as default_settings

Sleep = Callable[[float], Awaitable[None]]


class FixedIntervalPacer:
    """Fixed pauses between Shopify calls, records and batches.

    Delays are in seconds; a delay of 0 disables that pause.
    """

    def __init__(self, metafield_delay: float = 0.2, record_delay: float = 0.35,
                 batch_delay: float = 1.0, sleep: Optional[Sleep] = None):
        self.metafield_delay = metafield_delay
        self.record_delay = record_delay
        self.batch_delay = batch_delay
        self._sleep = sleep or asyncio.sleep

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "FixedIntervalPacer":
        settings = settings or default_settings
        return cls(
            metafield_delay=settings.migration_metafield_delay,
            record_delay=settings.migration_record_delay,
            batch_delay=settings.migration_batch_delay,
        )

    async def _pause(self, seconds: float) -> None:
        if seconds > 0:
            await self._sleep(seconds)

    async def after_metafield(self) -> None:
        await self._pause(self.metafield_delay)

    async def after_record(self) -> None:
        await self._pause(self.record_delay)

    async def after_batch(self) -> None:
        await self._pause(self.batch_delay)
