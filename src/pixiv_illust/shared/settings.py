# FILE: src/pixiv_illust/shared/settings.py

import tomllib
from pathlib import Path
from typing import Any, cast

from pydantic import (
    BaseModel,
    Field,
    SecretStr,
    ValidationError,
    field_validator,
)
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from .constants import ENDPOINTS, REQUEST_DEFAULTS
from .exceptions import SettingsError

_PLACEHOLDER_MARKER = 'your_'


def read_toml(toml_file: Path, section: tuple[str, ...] = ()) -> dict[str, Any]:
    """
    TOMLファイルを読み込み、section で指定したテーブルを返します。
    ファイルまたはテーブルが無い場合は空の辞書を返す。
    """
    if not toml_file.is_file():
        return {}
    try:
        with toml_file.open('rb') as f:
            data: Any = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise SettingsError(
            f"設定ファイル '{toml_file}' の解析に失敗しました: {e}"
        ) from e

    for key in section:
        data = data.get(key, {}) if isinstance(data, dict) else {}
    return cast(dict[str, Any], data)


class TomlSectionSource(PydanticBaseSettingsSource):
    """
    TOMLファイル(またはその中の1テーブル)を丸ごと設定値として返すソース。
    --config のファイルと pyproject.toml の [tool.pixiv_illust] の両方に使う。
    """

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        toml_file: Path | None,
        section: tuple[str, ...] = (),
    ):
        super().__init__(settings_cls)
        self._values = read_toml(toml_file, section) if toml_file else {}

    def get_field_value(self, field: object, field_name: str) -> tuple[Any, str, bool]:
        # フィールド単位の解決は行わず、__call__ でまとめて返す
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        return self._values


# --- 設定モデル定義 ---


class PixivCredentialSettings(BaseModel):
    """Pixivのパスワード認証に必要な認証情報。"""

    username: SecretStr | None = Field(
        default=None, description='Pixivアカウントのユーザー名。'
    )
    password: SecretStr | None = Field(
        default=None, description='Pixivアカウントのパスワード。'
    )
    client_id: SecretStr | None = Field(
        default=None, description='Pixiv APIのクライアントID。'
    )
    client_secret: SecretStr | None = Field(
        default=None, description='Pixiv APIのクライアントシークレット。'
    )

    @field_validator('username', 'password', 'client_id', 'client_secret')
    @classmethod
    def validate_not_placeholder(cls, value: SecretStr | None) -> SecretStr | None:
        if value is None:
            return None
        secret_value = value.get_secret_value()
        if not secret_value:
            return None
        if secret_value.startswith(_PLACEHOLDER_MARKER):
            raise ValueError(
                'プレースホルダーの認証情報が検出されました。設定を更新してください。'
            )
        return value

    @property
    def is_complete(self) -> bool:
        """4つの認証情報がすべて揃っているかを返します。"""
        return all(
            (self.username, self.password, self.client_id, self.client_secret)
        )


class CircuitBreakerSettings(BaseModel):
    """サーキットブレーカーに関する設定。"""

    enabled: bool = Field(
        default=False,
        description='HTTP呼び出しをサーキットブレーカーで保護するかどうか。',
    )
    fail_max: int = Field(
        default=5,
        description='何回連続で失敗したらサーキットをOpen状態にするか。',
    )
    reset_timeout: int = Field(
        default=60,
        description='サーキットがOpenしてからHalf-Open状態に移行するまでの秒数。',
    )


class ApiSettings(BaseModel):
    """API通信に関する設定。"""

    base_url: str = Field(
        default=ENDPOINTS.BASE_URL, description='Pixiv アプリAPIのベースURL。'
    )
    auth_token_url: str = Field(
        default=ENDPOINTS.AUTH_TOKEN_URL,
        description='認証トークン取得エンドポイント。',
    )
    image_referer: str = Field(
        default=REQUEST_DEFAULTS.IMAGE_REFERER,
        description='画像CDNから取得する際に送るRefererヘッダー。',
    )
    max_auth_retries: int = Field(
        default=1,
        ge=0,
        description='OAuthエラー時に再認証してリトライする最大回数。',
    )
    timeout: float | None = Field(
        default=None,
        description='HTTPリクエストのタイムアウト(秒)。未指定の場合はトランスポートの既定値。',
    )
    circuit_breaker: CircuitBreakerSettings = Field(
        default_factory=CircuitBreakerSettings
    )


class Settings(BaseSettings):
    """
    アプリケーションの階層的設定管理クラス。
    以下の優先順位で設定を読み込みます:
    1. Pythonコードからの直接初期化
    2. --config で指定されたカスタムTOMLファイル
    3. 環境変数 (例: PIXIV_ILLUST_PIXIV__USERNAME=...)
    4. .env ファイル
    5. pyproject.toml内の [tool.pixiv_illust] セクション
    6. モデルで定義されたデフォルト値
    """

    pixiv: PixivCredentialSettings = Field(default_factory=PixivCredentialSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)
    log_level: str = 'INFO'

    _config_file: Path | None = None

    def __init__(self, **values: object):
        config_file_path = values.pop('_config_file', None)
        require_auth = values.pop('require_auth', True)
        config_file = (
            Path(cast(Path | str, config_file_path)) if config_file_path else None
        )

        try:
            # _config_file は settings_customise_sources で参照された後、extra='ignore' により破棄される
            super().__init__(_config_file=config_file, **values)  # type: ignore [arg-type]
        except (ValidationError, ValueError) as e:
            raise SettingsError(f'設定の検証に失敗しました:\n{e}') from e
        self._config_file = config_file

        if require_auth and not self.pixiv.is_complete:
            raise SettingsError(
                'Pixivの認証情報(username, password, client_id, client_secret)が不足しています。'
                ' 設定ファイル、.env、または環境変数で設定してください。'
            )

    model_config = SettingsConfigDict(
        env_nested_delimiter='__',
        env_prefix='PIXIV_ILLUST_',
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        config_file_path = getattr(init_settings, 'init_kwargs', {}).get(
            '_config_file'
        )
        if config_file_path and not isinstance(config_file_path, Path):
            config_file_path = Path(config_file_path)

        return (
            init_settings,
            TomlSectionSource(settings_cls, config_file_path),
            env_settings,
            dotenv_settings,
            TomlSectionSource(
                settings_cls, Path.cwd() / 'pyproject.toml', ('tool', 'pixiv_illust')
            ),
        )
