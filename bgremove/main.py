"""Точка входа в приложение."""
from bgremove.app import BgRemoveApp
from bgremove.core.config import get_settings
from bgremove.core.logging import setup_logging


def main() -> None:
    """Настраивает логирование, создаёт и запускает главное окно приложения."""
    settings = get_settings()
    logger = setup_logging(level=settings.log_level)
    logger.info("Starting %s (rembg model: %s)", settings.window_title, settings.rembg_model)
    app = BgRemoveApp(settings)
    app.mainloop()


if __name__ == "__main__":
    main()
