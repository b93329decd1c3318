import asyncio

from src.config.logger import logger


class RateLimiter:
    """
    Ограничитель числа запросов к GitHub в секунду.

    Слоты выдаются семафором и возвращаются фоновой задачей раз в секунду.
    Повторов и backoff нет: лимитер только выравнивает темп исходящих запросов.

    :param rate_limit: Максимальное число запросов в секунду (RPS)
    :return:
    """

    def __init__(self, rate_limit: int):
        if rate_limit <= 0:
            raise ValueError("rate_limit must be positive")

        self._rate_limit = rate_limit
        self._slots = asyncio.Semaphore(rate_limit)
        self._taken = 0

        logger.info("Инициализация RateLimiter", extra={"rate_limit": rate_limit})

        self._reset_task = asyncio.create_task(self._reset_loop())

    async def _reset_loop(self) -> None:
        """
        Раз в секунду возвращает все израсходованные слоты.
        """
        while True:
            await asyncio.sleep(1)
            released, self._taken = self._taken, 0
            for _ in range(released):
                self._slots.release()

            if released:
                logger.debug(
                    "RateLimiter тик",
                    extra={"released": released, "rate_limit": self._rate_limit},
                )

    async def acquire(self) -> None:
        """
        Получение одного слота лимита.

        :return:
        """
        await self._slots.acquire()
        self._taken += 1

    async def close(self) -> None:
        """
        Останавливает фоновый цикл.

        :return:
        """
        logger.info("Закрытие RateLimiter")
        self._reset_task.cancel()

        try:
            await self._reset_task
        except asyncio.CancelledError:
            pass
