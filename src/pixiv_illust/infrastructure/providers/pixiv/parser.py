# FILE: src/pixiv_illust/infrastructure/providers/pixiv/parser.py
"""
Pixiv APIのレスポンスエンベロープを解釈し、例外へ変換するモジュール。
APIはエラーの種類を構造化して返さないため、メッセージ本文の部分一致で分類する。
"""

from typing import Any

from ....shared.constants import VENDOR_MARKERS
from ....shared.enums import VendorErrorKind
from ....shared.exceptions import ApiError, ContentNotFoundError


def classify_vendor_error(error: dict[str, Any]) -> VendorErrorKind:
    """`error` オブジェクトを VendorErrorKind に分類します。"""
    message = error.get('message') or ''
    # 削除判定は例外メッセージとして表示される文字列(user_message優先)に対して行う
    displayed = error.get('user_message') or message

    if VENDOR_MARKERS.OAUTH in message:
        return VendorErrorKind.AUTH_EXPIRED
    if VENDOR_MARKERS.DELETED_WORK in displayed:
        return VendorErrorKind.RESOURCE_DELETED
    return VendorErrorKind.OTHER


def build_system_error(message: str) -> ApiError:
    """`has_error` のシステムメッセージから送出すべき例外を組み立てます。"""
    kind = (
        VendorErrorKind.RESOURCE_DELETED
        if VENDOR_MARKERS.DELETED_WORK in message
        else VendorErrorKind.OTHER
    )
    return build_api_error({'message': message}, kind)


def system_error_message(body: dict[str, Any]) -> str | None:
    """`has_error` が立っている場合、errors.system.message を返します。"""
    if not body.get('has_error'):
        return None
    return body.get('errors', {}).get('system', {}).get('message', '')


def build_api_error(error: dict[str, Any], kind: VendorErrorKind) -> ApiError:
    """
    `error` オブジェクトから送出すべき例外を組み立てます。
    メッセージは user_message を優先し、無ければ message を使う。
    """
    vendor_message = error.get('message')
    user_message = error.get('user_message')
    message = user_message or vendor_message or ''
    error_cls = (
        ContentNotFoundError if kind is VendorErrorKind.RESOURCE_DELETED else ApiError
    )
    return error_cls(
        message,
        kind=kind,
        vendor_message=vendor_message,
        user_message=user_message,
    )


def select_large_image_url(illust: dict[str, Any] | None) -> str | None:
    """イラストレコードから large サイズの画像URLを取り出します。"""
    if not illust:
        return None
    return (illust.get('image_urls') or {}).get('large') or None
