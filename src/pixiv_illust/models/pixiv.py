# FILE: src/pixiv_illust/models/pixiv.py
"""
Pixiv アプリAPIのJSONレスポンスをマッピングするためのPydanticデータモデル。
このモジュールは外部APIの仕様に依存します。
クライアント自体は生の辞書を返すため、これらのモデルは呼び出し側が任意で利用する。
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PixivBaseModel(BaseModel):
    """すべてのPixivモデルで共通の設定を持つ基底クラス。"""

    model_config = ConfigDict(
        populate_by_name=True,
        extra='ignore',  # モデルにない余分なフィールドは無視する
    )


class ImageUrls(PixivBaseModel):
    px_50x50: str | None = None
    px_128x128: str | None = None
    px_480mw: str | None = None
    small: str | None = None
    medium: str | None = None
    large: str | None = None
    square_small: str | None = None
    square_medium: str | None = None
    square_large: str | None = None


class Tag(PixivBaseModel):
    name: str
    translated_name: str | None = None


class MetaPage(PixivBaseModel):
    image_urls: ImageUrls = Field(default_factory=ImageUrls)


class MetaSinglePage(PixivBaseModel):
    original_image_url: str | None = None


class User(PixivBaseModel):
    id: int
    account: str
    name: str
    is_followed: bool = False
    is_following: bool | None = None
    is_follower: bool | None = None
    is_friend: bool | None = None
    is_premium: bool | None = None
    profile_image_urls: ImageUrls = Field(default_factory=ImageUrls)
    stats: Any = None
    profile: Any = None


class Series(PixivBaseModel):
    id: int
    title: str


class PixivIllustration(PixivBaseModel):
    """イラスト(または漫画)作品1件分のレコード。"""

    id: int
    title: str
    caption: str = ''
    restrict: int = 0
    tags: list[Tag] = Field(default_factory=list)
    tools: list[str] = Field(default_factory=list)
    image_urls: ImageUrls = Field(default_factory=ImageUrls)
    width: int = 0
    height: int = 0
    stats: Any = None
    publicity: int = 0
    age_limit: str | None = None
    created_time: str | None = None
    reuploaded_time: str | None = None
    user: User
    is_manga: bool = False
    is_liked: bool = False
    favorite_id: int | None = None
    page_count: int = 1
    book_style: Literal['right_to_left', 'left_to_right'] | None = None
    type: str | None = None
    series: Series | None = None
    metadata: Any = None
    meta_pages: list[MetaPage] = Field(default_factory=list)
    meta_single_page: MetaSinglePage = Field(default_factory=MetaSinglePage)
    content_type: Any = None
    is_bookmarked: bool = False
    total_view: int = 0
    total_bookmarks: int = 0
    visible: bool = True
    total_comments: int = 0
    is_muted: bool = False
    x_restrict: int = 0
    sanity_level: int = 0

    @field_validator('series', mode='before')
    @classmethod
    def empty_series_to_none(cls, v: object) -> object:
        """APIがシリーズ未設定の作品に `series: []` や `{}` を返す場合に対応する。"""
        if not v:
            return None
        return v


class IllustDetailResponse(PixivBaseModel):
    """`/v1/illust/detail` からの応答データ全体を格納します。"""

    illust: PixivIllustration


class IllustListResponse(PixivBaseModel):
    """検索APIからの応答データ全体を格納します。"""

    illusts: list[PixivIllustration] = Field(default_factory=list)
    ranking_illusts: list[Any] = Field(default_factory=list)
    next_url: str | None = None
