import asyncio
import json
from typing import Any

from aiohttp import ClientError, ClientSession, ClientTimeout

from src.advisory.config import (
    ADVISORY_API_KEY,
    ADVISORY_MODEL,
    ADVISORY_TIMEOUT,
    ADVISORY_URL,
)
from src.advisory.errors import AdvisoryServiceError
from src.advisory.models import Advice
from src.config.logger import logger
from src.github_profile.models.analysis import Analysis

SYSTEM_PROMPT = "You are a career advisor AI. Return only valid JSON."


def build_prompt(analysis: Analysis) -> str:
    """
    Формирует краткую сводку анализа для сервиса рекомендаций.

    :param analysis: Результат анализа профиля
    :return: Текст запроса
    """
    account = analysis.account
    return f"""Analyze this developer profile and provide career insights.

GitHub Data:
- Username: {account.login}
- Name: {account.name or "N/A"}
- Bio: {account.bio or "N/A"}
- Repos: {len(analysis.repos)}
- Followers: {account.followers}
- Languages: {", ".join(share.name for share in analysis.languages)}
- Active Repos (6mo): {analysis.contribution_stats.active_repos}
- GitHub Strengths: {"; ".join(analysis.strengths)}
- GitHub Weaknesses: {"; ".join(analysis.weaknesses)}

Provide a JSON response with:
1. recommendations: Array of 5 objects with {{ id, title, description, priority (high/medium/low), category, impact }}
2. roadmap: Array of 3 phases (7-day, 30-day, 90-day) each with items array of {{ task, howTo, expectedOutcome }}
3. careerPredictions: Array of 4 objects with {{ role, confidence (0-100), reasoning, skillsNeeded (array) }}

Be specific and actionable. Return only valid JSON."""


class AdvisoryClient:
    """
    Клиент сервиса рекомендаций (OpenAI-совместимый chat completions).

    Один запрос на анализ, без повторов.

    :param api_key: Ключ доступа к сервису
    :param url: URL chat completions
    :param model: Имя модели
    :return:
    """

    def __init__(
        self,
        api_key: str | None = ADVISORY_API_KEY,
        *,
        url: str = ADVISORY_URL,
        model: str = ADVISORY_MODEL,
        timeout: float = ADVISORY_TIMEOUT,
    ):
        self._api_key = api_key
        self._url = url
        self._model = model
        self._session = ClientSession(timeout=ClientTimeout(total=timeout))

        logger.info(
            "Инициализация AdvisoryClient",
            extra={"url": url, "model": model, "configured": bool(api_key)},
        )

    async def __aenter__(self):
        """
        Вход в контекстный менеджер.

        :return: self
        """
        return self

    async def __aexit__(self, exc_type, exc, tb):
        """
        Выход из контекстного менеджера. Закрывает HTTP-сессию.

        :param exc_type: Тип исключения
        :param exc: Исключение
        :param tb: Traceback
        :return:
        """
        await self.close()

    async def _complete(self, prompt: str) -> dict[str, Any]:
        """
        Отправляет запрос и возвращает тело ответа.

        :param prompt: Текст запроса пользователя
        :return: JSON-ответ сервиса
        """
        if not self._api_key:
            raise AdvisoryServiceError("ADVISORY_API_KEY is not configured")

        payload = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "response_format": {"type": "json_object"},
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}

        try:
            async with self._session.post(self._url, json=payload, headers=headers) as resp:
                if resp.status >= 400:
                    text = await resp.text()
                    logger.error(
                        "Ошибка сервиса рекомендаций",
                        extra={"status": resp.status, "response": text[:500]},
                    )
                    raise AdvisoryServiceError(f"AI analysis failed (status={resp.status})")

                return await resp.json(content_type=None)

        except (ClientError, asyncio.TimeoutError) as e:
            logger.error("Сетевая ошибка сервиса рекомендаций", extra={"error": str(e)})
            raise AdvisoryServiceError(f"AI analysis failed: {e}") from e

        except ValueError as e:
            raise AdvisoryServiceError("Advisory response was not JSON") from e

    async def advise(self, analysis: Analysis) -> Advice:
        """
        Получение рекомендаций по результату анализа.

        :param analysis: Результат анализа профиля
        :return: Advice
        """
        logger.info("Запрос рекомендаций", extra={"login": analysis.account.login})

        data = await self._complete(build_prompt(analysis))

        try:
            content = data["choices"][0]["message"]["content"]
            parsed = json.loads(content)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.error("Не удалось разобрать ответ сервиса рекомендаций", extra={"error": str(e)})
            raise AdvisoryServiceError("Advisory response content is not valid JSON") from e

        try:
            advice = Advice.from_api(parsed)
        except (TypeError, ValueError, AttributeError) as e:
            logger.error("Ответ сервиса рекомендаций имеет неверную структуру", extra={"error": str(e)})
            raise AdvisoryServiceError("Advisory response content has an unexpected shape") from e

        logger.info(
            "Рекомендации получены",
            extra={
                "recommendations": len(advice.recommendations),
                "phases": len(advice.roadmap),
                "predictions": len(advice.career_predictions),
            },
        )
        return advice

    async def close(self):
        """
        Закрытие HTTP-сессии сервиса рекомендаций.

        :return:
        """
        await self._session.close()
