# FILE: src/pixiv_illust/shared/exceptions.py
from .enums import VendorErrorKind


class PixivIllustError(Exception):
    """アプリケーションの基底例外クラス。"""

    pass


class SettingsError(PixivIllustError):
    """設定関連のエラー。認証情報の不足もここに含まれる。"""

    pass


class InvalidInputError(PixivIllustError):
    """不正なキーワードやURLが入力された場合のエラー。"""

    pass


class ProviderError(PixivIllustError):
    """Pixiv API側で発生したエラーの基底クラス。"""

    pass


class AuthenticationError(ProviderError):
    """認証に関するエラー。"""

    pass


class ApiError(ProviderError):
    """
    Pixiv APIがエラーエンベロープを返した場合のエラー。
    メッセージはAPIから返されたものをそのまま保持する。
    """

    def __init__(
        self,
        message: str,
        kind: VendorErrorKind = VendorErrorKind.OTHER,
        vendor_message: str | None = None,
        user_message: str | None = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.vendor_message = vendor_message
        self.user_message = user_message


class ContentNotFoundError(ApiError):
    """要求された作品が削除済み、または存在しないエラー。"""

    pass
