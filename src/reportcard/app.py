import flet as ft

from reportcard.config.logger import get_logger
from reportcard.config.settings import settings
from reportcard.ui.views.report_card_view import build_report_card_view


log = get_logger("app")


def main(page: ft.Page) -> None:
    page.title = "Student Report Card"
    page.scroll = ft.ScrollMode.AUTO
    page.views.clear()
    page.views.append(build_report_card_view(page))
    page.update()


def run() -> None:
    log.info("Starting report card app (scorer: %s)", settings.scorer_url)
    ft.app(
        target=main,
        view=ft.AppView.WEB_BROWSER if settings.web_mode else ft.AppView.FLET_APP,
        port=settings.port,
    )


if __name__ == "__main__":
    run()
