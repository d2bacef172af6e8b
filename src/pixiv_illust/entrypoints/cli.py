# FILE: src/pixiv_illust/entrypoints/cli.py
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from ..infrastructure.providers.pixiv.client import PixivApiClient
from ..models.pixiv import IllustDetailResponse, IllustListResponse
from ..shared.constants import PATTERNS
from ..shared.exceptions import (
    AuthenticationError,
    InvalidInputError,
    PixivIllustError,
    SettingsError,
)
from ..shared.settings import Settings
from ..utils.logging import setup_logging

app = typer.Typer(
    help='Pixivのイラストを取得・検索・ダウンロードするコマンドラインツールです。',
    rich_markup_mode='markdown',
)
console = Console()


def _initialize_settings(config_file: Path | None, log_level: str) -> Settings:
    """設定オブジェクトを初期化するヘルパー関数。"""
    try:
        return Settings(_config_file=config_file, log_level=log_level)
    except SettingsError as e:
        logger.bind(error=str(e)).error('❌ 設定エラーが発生しました。')
        raise typer.Exit(code=1) from e


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option(
            '-v',
            '--verbose',
            help='詳細なデバッグログを有効にします。',
            show_default=False,
        ),
    ] = False,
    config: Annotated[
        Path | None,
        typer.Option(
            '-c',
            '--config',
            help='カスタム設定TOMLファイルへのパス。',
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            resolve_path=True,
        ),
    ] = None,
    log_file: Annotated[
        bool,
        typer.Option(
            '--log-file',
            help='ログをJSON形式でファイルに出力します。',
            show_default=False,
        ),
    ] = False,
) -> None:
    """
    Pixiv Illust Client
    """
    log_level = 'DEBUG' if verbose else 'INFO'
    setup_logging(log_level, serialize_to_file=log_file)

    settings = _initialize_settings(config, log_level)
    try:
        client = PixivApiClient.from_settings(settings)
    except SettingsError as e:
        logger.bind(error=str(e)).error('❌ 設定エラーが発生しました。')
        raise typer.Exit(code=1) from e
    ctx.obj = client
    ctx.call_on_close(client.close)


def _client(ctx: typer.Context) -> PixivApiClient:
    return ctx.obj


@app.command()
def detail(
    ctx: typer.Context,
    illust_id: Annotated[int, typer.Argument(help='イラストの作品ID。')],
) -> None:
    """イラストの詳細情報を表示します。"""
    body = _client(ctx).illust_detail(illust_id)
    illust = IllustDetailResponse.model_validate(body).illust

    console.print(f'[bold]{illust.title}[/] (ID: {illust.id})')
    console.print(f'投稿者: {illust.user.name} (@{illust.user.account})')
    console.print('タグ: ' + ', '.join(tag.name for tag in illust.tags))
    console.print(f'ページ数: {illust.page_count}  閲覧数: {illust.total_view}')
    if illust.image_urls.large:
        console.print(f'画像URL: {illust.image_urls.large}')


@app.command()
def search(
    ctx: typer.Context,
    keyword: Annotated[str, typer.Argument(help='検索するタグキーワード。')],
    limit: Annotated[
        int, typer.Option('-n', '--limit', help='表示する最大件数。', min=1)
    ] = 10,
) -> None:
    """キーワードでイラストを検索し、結果を一覧表示します。"""
    body = _client(ctx).get_illusts_by_keyword(keyword)
    page = IllustListResponse.model_validate(body)

    if not page.illusts:
        logger.warning('検索結果がありませんでした。')
        return

    table = Table(title=f'検索結果: {keyword}')
    table.add_column('ID', justify='right')
    table.add_column('タイトル')
    table.add_column('投稿者')
    table.add_column('ブックマーク', justify='right')
    for illust in page.illusts[:limit]:
        table.add_row(
            str(illust.id),
            illust.title,
            illust.user.name,
            str(illust.total_bookmarks),
        )
    console.print(table)


@app.command('image-url')
def image_url(
    ctx: typer.Context,
    keyword: Annotated[str, typer.Argument(help='検索するタグキーワード。')],
) -> None:
    """キーワード検索の先頭結果の画像URLを表示します。"""
    url = _client(ctx).get_image_by_keyword(keyword)
    if url is None:
        logger.warning('画像URLが見つかりませんでした。')
        return
    console.print(url)


@app.command()
def download(
    ctx: typer.Context,
    url: Annotated[
        str,
        typer.Argument(help='illust_id を含むPixivの作品URL。', metavar='URL'),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            '-o',
            '--output',
            help='保存先のファイルパス。省略時は <illust_id>.jpg に保存します。',
            dir_okay=False,
            resolve_path=True,
        ),
    ] = None,
) -> None:
    """作品URLから large 画像をダウンロードして保存します。"""
    try:
        data = _client(ctx).download_from_illust_url(url)
    except InvalidInputError as e:
        logger.bind(error=str(e)).error('❌ 入力されたURLが不正です。')
        raise typer.Exit(code=1) from e

    if data is None:
        logger.warning('作品が存在しないか、ダウンロード可能な画像がありません。')
        return

    if output is None:
        # 上のダウンロードで URL の形式は検証済み
        illust_id = PATTERNS.ILLUST_ID_QUERY.search(url).group(1)
        output = Path(f'{illust_id}.jpg')
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(data)
    logger.bind(path=str(output)).success('✅ 画像を保存しました。')


@logger.catch(exclude=PixivIllustError)
def run_app() -> None:
    """
    アプリケーション全体を@logger.catchでラップし、
    制御下の例外は個別処理、それ以外をLoguruに記録させるためのラッパー関数。
    """
    try:
        app()
    except AuthenticationError as e:
        logger.bind(error=str(e)).error('❌ 認証エラーが発生しました。')
        logger.info('設定されたユーザー名・パスワードを確認してください。')
        raise SystemExit(1) from e
    except PixivIllustError as e:
        logger.bind(error=str(e)).error('❌ 処理中にエラーが発生しました。')
        raise SystemExit(1) from e
