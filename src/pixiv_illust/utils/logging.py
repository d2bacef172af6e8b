# FILE: src/pixiv_illust/utils/logging.py
from pathlib import Path

from loguru import logger
from rich.logging import RichHandler

PACKAGE_NAME = "pixiv_illust"
LOG_FILE_NAME = "pixiv_illust_{time}.log"

# bind() で渡された文脈のうち、値を伏せ字にするキー
_SECRET_KEYS = frozenset({"password", "client_secret", "access_token", "authorization"})


def _redact_secrets(record) -> None:
    extra = record["extra"]
    for key in _SECRET_KEYS.intersection(extra):
        extra[key] = "***"


def _console_handler() -> RichHandler:
    return RichHandler(
        rich_tracebacks=True,
        show_path=False,
        markup=True,
        log_time_format="[%X]",
    )


def setup_logging(
    level: str = "INFO",
    serialize_to_file: bool = False,
    log_dir: Path = Path("logs"),
) -> None:
    """
    CLI用にLoguruを設定します。
    コンソールにはRichで出力し、serialize_to_file が真なら log_dir にJSON形式でも記録する。
    パッケージのimport時に無効化されたロガーはここで有効化される。
    """
    logger.remove()
    logger.configure(patcher=_redact_secrets)
    logger.enable(PACKAGE_NAME)

    # 書式はRichHandlerに任せる
    logger.add(
        _console_handler(),
        level=level.upper(),
        format="{message}",
        backtrace=False,
        diagnose=False,
    )

    if serialize_to_file:
        logger.add(
            log_dir / LOG_FILE_NAME,
            level="DEBUG",
            serialize=True,
            enqueue=True,
            rotation="10 MB",
            retention="7 days",
            diagnose=False,  # 変数の値(認証情報)をログに残さない
        )

    logger.bind(level=level.upper(), log_dir=str(log_dir)).debug(
        "ロガーを設定しました。"
    )
