# FILE: src/pixiv_illust/infrastructure/providers/pixiv/client.py
from collections.abc import Mapping
from typing import Any

import requests
from loguru import logger
from pybreaker import CircuitBreaker

from ....shared.constants import (
    ENDPOINTS,
    PATTERNS,
    REQUEST_DEFAULTS,
    VENDOR_MARKERS,
)
from ....shared.enums import HttpMethod, VendorErrorKind
from ....shared.exceptions import (
    AuthenticationError,
    ContentNotFoundError,
    InvalidInputError,
    SettingsError,
)
from ....shared.settings import Settings
from ..base_client import BaseApiClient
from .parser import (
    build_api_error,
    build_system_error,
    classify_vendor_error,
    select_large_image_url,
    system_error_message,
)


class PixivApiClient(BaseApiClient):
    """
    Pixiv アプリAPIと通信するためのクライアント。

    アクセストークンは最初のAPI呼び出し時に取得され(遅延認証)、
    APIがOAuthエラーを返した場合は再認証して置き換えられる。
    トークンはインスタンスごとに保持され、永続化はされない。
    """

    def __init__(
        self,
        username: str | None,
        password: str | None,
        client_id: str | None,
        client_secret: str | None,
        *,
        session: requests.Session | None = None,
        breaker: CircuitBreaker | None = None,
        base_url: str = ENDPOINTS.BASE_URL,
        auth_token_url: str = ENDPOINTS.AUTH_TOKEN_URL,
        image_referer: str = REQUEST_DEFAULTS.IMAGE_REFERER,
        max_auth_retries: int = 1,
        timeout: float | None = None,
    ):
        if not username or not password:
            raise SettingsError('Username and password required')
        if not client_id or not client_secret:
            raise SettingsError('ClientID and clientSecret required')

        super().__init__(session=session, breaker=breaker, timeout=timeout)
        self._username = username
        self._password = password
        self._client_id = client_id
        self._client_secret = client_secret
        self.base_url = base_url.rstrip('/')
        self.auth_token_url = auth_token_url
        self.image_referer = image_referer
        self.max_auth_retries = max_auth_retries
        self._access_token: str | None = None

    @classmethod
    def from_settings(
        cls, settings: Settings, session: requests.Session | None = None
    ) -> 'PixivApiClient':
        """Settings オブジェクトからクライアントを構築します。"""
        creds = settings.pixiv
        api = settings.api

        def _secret(value: Any) -> str | None:
            return value.get_secret_value() if value else None

        breaker = None
        if api.circuit_breaker.enabled:
            breaker = CircuitBreaker(
                fail_max=api.circuit_breaker.fail_max,
                reset_timeout=api.circuit_breaker.reset_timeout,
            )

        return cls(
            _secret(creds.username),
            _secret(creds.password),
            _secret(creds.client_id),
            _secret(creds.client_secret),
            session=session,
            breaker=breaker,
            base_url=api.base_url,
            auth_token_url=api.auth_token_url,
            image_referer=api.image_referer,
            max_auth_retries=api.max_auth_retries,
            timeout=api.timeout,
        )

    # --- 認証情報 (読み取り専用) ---

    @property
    def username(self) -> str:
        return self._username

    @property
    def password(self) -> str:
        return self._password

    @property
    def client_id(self) -> str:
        return self._client_id

    @property
    def client_secret(self) -> str:
        return self._client_secret

    @property
    def is_authenticated(self) -> bool:
        return self._access_token is not None

    # --- 公開API ---

    def illust_detail(
        self, illust_id: int | str | None, options: Mapping[str, Any] | None = None
    ) -> dict:
        """イラストの詳細データを取得します。"""
        params = {**(options or {}), 'illust_id': illust_id}
        return self._request(ENDPOINTS.ILLUST_DETAIL, HttpMethod.GET, params=params)

    def get_illusts_by_keyword(
        self, keyword: str | None, options: Mapping[str, Any] | None = None
    ) -> dict:
        """キーワードでイラストを検索し、検索結果ページ全体を返します。"""
        if keyword is None:
            raise InvalidInputError('Keyword required')
        return self._search_illusts(keyword, options)

    def get_image_by_keyword(self, keyword: str | None) -> str | None:
        """キーワード検索の先頭結果の large 画像URLを返します。無ければ None。"""
        if keyword is None:
            raise InvalidInputError('Keyword required')
        page = self._search_illusts(keyword)
        illusts = page.get('illusts') or []
        if not illusts:
            return None
        return select_large_image_url(illusts[0])

    def download_from_illust_url(self, url: str | None) -> bytes | None:
        """
        illust_id を含むPixivのURLから作品の large 画像をダウンロードします。

        作品が削除済み、または存在しない場合は例外ではなく None を返す。
        詳細データに large 画像URLが無い場合も None を返す。
        """
        if url is None:
            raise InvalidInputError('URL required')
        if 'illust_id' not in url:
            raise InvalidInputError('URL must be a pixiv image URL.')

        match = PATTERNS.ILLUST_ID_QUERY.search(url)
        if not match:
            raise InvalidInputError(f'URL does not contain a numeric illust_id: {url}')
        illust_id = match.group(1)

        try:
            detail = self.illust_detail(illust_id)
        except ContentNotFoundError:
            logger.bind(illust_id=illust_id).info(
                '作品は削除されたか、存在しません。ダウンロードをスキップします。'
            )
            return None

        image_url = select_large_image_url(detail.get('illust'))
        if not image_url:
            logger.bind(illust_id=illust_id).debug('large 画像URLがありません。')
            return None
        return self._fetch_image(image_url)

    # --- 内部処理 ---

    def _search_illusts(
        self, word: str, options: Mapping[str, Any] | None = None
    ) -> dict:
        params = {
            **(options or {}),
            'search_target': REQUEST_DEFAULTS.SEARCH_TARGET,
            'sort': REQUEST_DEFAULTS.SEARCH_SORT,
            'word': word,
        }
        return self._request(ENDPOINTS.SEARCH, HttpMethod.GET, params=params)

    def _fetch_image(self, url: str) -> bytes:
        """画像CDNからバイナリを取得します。CDNはRefererが無いと拒否する。"""
        logger.bind(url=url).debug('画像をダウンロード中...')
        response = self._send(
            HttpMethod.GET.value, url, headers={'Referer': self.image_referer}
        )
        response.raise_for_status()
        return response.content

    def _authenticate(self) -> None:
        """パスワードグラントでアクセストークンを取得し、保持しているトークンを置き換えます。"""
        data = {
            'client_id': self._client_id,
            'client_secret': self._client_secret,
            'get_secure_url': REQUEST_DEFAULTS.GET_SECURE_URL,
            'grant_type': REQUEST_DEFAULTS.GRANT_TYPE,
            'password': self._password,
            'username': self._username,
        }
        logger.debug('Pixiv APIの認証を開始します...')
        response = self._send(
            HttpMethod.POST.value,
            self.auth_token_url,
            data=data,
            headers=dict(REQUEST_DEFAULTS.BASE_HEADERS),
        )
        body = response.json()

        message = system_error_message(body)
        if message is not None:
            raise AuthenticationError(message)

        self._access_token = body['response']['access_token']
        logger.debug('Pixiv APIの認証が完了しました。')

    def _request(
        self,
        path: str,
        method: HttpMethod = HttpMethod.GET,
        params: Mapping[str, Any] | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> Any:
        """
        認証付きでAPIを呼び出します。

        JSONレスポンスの場合はエラーエンベロープを検査し、成功時は辞書を返す。
        それ以外のレスポンスはバイナリをそのまま返す。
        OAuthエラーの場合は再認証し、max_auth_retries 回までリトライする。
        """
        if self._access_token is None:
            self._authenticate()

        url = f'{self.base_url}{path}'
        attempt = 0
        while True:
            headers = {
                **REQUEST_DEFAULTS.BASE_HEADERS,
                'authorization': f'Bearer {self._access_token}',
            }
            log = logger.bind(method=method.value, path=path, attempt=attempt + 1)
            log.debug('APIリクエストを送信します。')

            response = self._send(
                method.value,
                url,
                params=dict(params) if params else None,
                data=dict(options) if options else None,
                headers=headers,
            )

            content_type = response.headers.get('content-type') or ''
            if VENDOR_MARKERS.JSON_CONTENT_TYPE not in content_type:
                return response.content

            body = response.json()
            message = system_error_message(body)
            if message is not None:
                raise build_system_error(message)

            error = body.get('error')
            if not error:
                return body

            kind = classify_vendor_error(error)
            if kind is not VendorErrorKind.AUTH_EXPIRED:
                raise build_api_error(error, kind)

            if attempt >= self.max_auth_retries:
                log.error('再認証後もOAuthエラーが解消しませんでした。')
                raise AuthenticationError(error.get('message') or '')

            attempt += 1
            log.warning('アクセストークンが無効です。再認証してリトライします。')
            self._authenticate()
