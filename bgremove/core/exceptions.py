"""Иерархия исключений приложения.

Все ошибки ограничены текущей сессией и не фатальны для процесса.
"""


class BgRemoveError(Exception):
    """Базовое исключение BG Remove."""
    pass


class InvalidFileType(BgRemoveError):
    """Файл не является изображением (MIME не начинается с `image/`)."""
    pass


class DecodeError(BgRemoveError):
    """Файл повреждён или не декодируется как изображение."""
    pass


class RemovalError(BgRemoveError):
    """Любой сбой сервиса удаления фона (нормализованный)."""
    pass


class ResourceRevokedError(BgRemoveError):
    """Обращение к уже отозванному или неизвестному дескриптору."""
    pass


class ExportError(BgRemoveError):
    """Не удалось сохранить результат на диск."""
    pass
