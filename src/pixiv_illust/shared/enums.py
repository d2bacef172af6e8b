# src/pixiv_illust/shared/enums.py
from enum import Enum


class VendorErrorKind(str, Enum):
    """
    Pixiv APIの `error` オブジェクトを分類した種別。
    strを継承することで、ログ出力時にそのまま値を表示できる。
    """

    AUTH_EXPIRED = 'auth_expired'  # アクセストークンの期限切れ・無効
    RESOURCE_DELETED = 'resource_deleted'  # 作品が削除済み、または存在しない
    OTHER = 'other'


class HttpMethod(str, Enum):
    GET = 'GET'
    POST = 'POST'
