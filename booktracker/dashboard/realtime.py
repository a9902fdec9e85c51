"""books 테이블 변경 이벤트 구독"""
from typing import Any, Callable, Optional

from loguru import logger
from supabase import AsyncClient

ChangeCallback = Callable[[dict[str, Any]], None]


class BookChangeFeed:
    """Supabase realtime 채널로 books 테이블의 INSERT/UPDATE/DELETE 이벤트를 전달

    이벤트는 서버에서 사용자별로 걸러지지 않습니다. 테이블 어디서든 변경이
    일어나면 콜백이 호출되고, 콜백 쪽에서 소유자 범위의 목록을 다시 가져옵니다.
    """

    CHANNEL_NAME = "realtime-books"

    def __init__(self, client: AsyncClient, table: str = "books", schema: str = "public"):
        self.client = client
        self.table = table
        self.schema = schema
        self._channel = None

    @property
    def is_subscribed(self) -> bool:
        return self._channel is not None

    async def subscribe(self, callback: ChangeCallback) -> None:
        """Start forwarding every change event on the table to ``callback``."""
        if self._channel is not None:
            return

        def _on_change(payload: dict[str, Any]) -> None:
            logger.debug(f"Realtime change on {self.schema}.{self.table}: {payload.get('eventType')}")
            callback(payload)

        channel = self.client.channel(self.CHANNEL_NAME)
        channel.on_postgres_changes(
            "*",
            callback=_on_change,
            table=self.table,
            schema=self.schema,
        )
        await channel.subscribe()
        self._channel = channel
        logger.info(f"Subscribed to changes on {self.schema}.{self.table}")

    async def close(self) -> None:
        channel: Optional[Any] = self._channel
        if channel is None:
            return
        self._channel = None
        await self.client.remove_channel(channel)
        logger.info(f"Unsubscribed from {self.schema}.{self.table}")
