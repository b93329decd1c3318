class AdvisoryServiceError(RuntimeError):
    """
    Ошибка сервиса рекомендаций: неуспешный ответ, сетевая ошибка или
    ответ, который не удалось разобрать.
    """
