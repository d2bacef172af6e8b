# src/pixiv_illust/shared/constants.py
import re
from dataclasses import dataclass, field
from typing import Final


# --- 1. Endpoints ---
@dataclass(frozen=True)
class Endpoints:
    """
    Pixiv APIのエンドポイント定義。
    BASE_URL と AUTH_TOKEN_URL は settings.py のデフォルト値としても使われる。
    """

    BASE_URL: str = 'https://app-api.pixiv.net'
    AUTH_TOKEN_URL: str = 'https://oauth.secure.pixiv.net/auth/token'
    ILLUST_DETAIL: str = '/v1/illust/detail'
    # アプリAPIの実質的なタグ検索はこのエンドポイントで行う
    SEARCH: str = '/v1/manga/recommended'


ENDPOINTS: Final = Endpoints()


# --- 2. Request Parameters ---
@dataclass(frozen=True)
class RequestDefaults:
    """リクエストに常に付与される固定値。"""

    IMAGE_REFERER: str = 'http://www.pixiv.net/'
    GRANT_TYPE: str = 'password'
    GET_SECURE_URL: int = 1
    SEARCH_TARGET: str = 'partial_match_for_tags'
    SEARCH_SORT: str = 'date_desc'
    BASE_HEADERS: dict[str, str] = field(
        default_factory=lambda: {
            'accept-type': 'application/json',
            'content-type': 'application/x-www-form-urlencoded',
        }
    )


REQUEST_DEFAULTS: Final = RequestDefaults()


# --- 3. Vendor Error Markers ---
@dataclass(frozen=True)
class VendorMarkers:
    """
    APIのエラーメッセージを分類するための部分文字列。
    APIは構造化されたエラーコードを返さないため、メッセージ本文で判定する。
    """

    OAUTH: str = 'OAuth'
    DELETED_WORK: str = '該当作品は削除されたか、存在しない作品IDです'
    JSON_CONTENT_TYPE: str = 'application/json'


VENDOR_MARKERS: Final = VendorMarkers()


# --- 4. URL Patterns ---
@dataclass(frozen=True)
class Patterns:
    """URL解析用のコンパイル済み正規表現"""

    ILLUST_ID_QUERY: re.Pattern = re.compile(r'illust_id=([0-9]+)')


PATTERNS: Final = Patterns()


# --- 5. Environment Keys ---
@dataclass(frozen=True)
class EnvKeys:
    """
    Pydantic BaseSettings (settings.py) と連動する環境変数キー。
    """

    _PREFIX: str = 'PIXIV_ILLUST_'
    _DELIMITER: str = '__'

    PIXIV_USERNAME: str = f'{_PREFIX}PIXIV{_DELIMITER}USERNAME'
    PIXIV_PASSWORD: str = f'{_PREFIX}PIXIV{_DELIMITER}PASSWORD'
    PIXIV_CLIENT_ID: str = f'{_PREFIX}PIXIV{_DELIMITER}CLIENT_ID'
    PIXIV_CLIENT_SECRET: str = f'{_PREFIX}PIXIV{_DELIMITER}CLIENT_SECRET'


ENV_KEYS: Final = EnvKeys()
