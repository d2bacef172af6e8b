"""
Pixiv アプリAPIのイラスト取得用クライアントライブラリ。
"""

from loguru import logger

from .infrastructure.providers.pixiv.client import PixivApiClient
from .shared.enums import VendorErrorKind
from .shared.exceptions import (
    ApiError,
    AuthenticationError,
    ContentNotFoundError,
    InvalidInputError,
    PixivIllustError,
    ProviderError,
    SettingsError,
)
from .shared.settings import Settings

# ライブラリとして利用される場合、ログ出力はアプリケーション側に委ねる
logger.disable('pixiv_illust')

__version__ = '0.1.0'

__all__ = [
    'ApiError',
    'AuthenticationError',
    'ContentNotFoundError',
    'InvalidInputError',
    'PixivApiClient',
    'PixivIllustError',
    'ProviderError',
    'Settings',
    'SettingsError',
    'VendorErrorKind',
]
