"""Точка входа в приложение."""
from image_combine import config
from image_combine.app import ImageCombineApp


def main() -> None:
    """Создаёт и запускает главное окно приложения."""
    config.configure_logging()
    app = ImageCombineApp()
    app.mainloop()


if __name__ == "__main__":
    main()
