# FILE: src/pixiv_illust/infrastructure/providers/base_client.py
from typing import Any, Callable

import requests
from loguru import logger
from pybreaker import CircuitBreaker, CircuitBreakerError

from ...shared.exceptions import ApiError


class BaseApiClient:
    """
    HTTPトランスポートの共通処理を実装する基底クラス。
    サーキットブレーカーが設定されている場合、すべてのHTTP呼び出しをそれ経由で実行する。
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        breaker: CircuitBreaker | None = None,
        timeout: float | None = None,
    ):
        self.session = session if session is not None else requests.Session()
        self.breaker = breaker
        self.timeout = timeout

    def _send(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """HTTPリクエストを送信します。トランスポートの例外はそのまま伝播させる。"""
        if self.timeout is not None:
            kwargs.setdefault('timeout', self.timeout)
        return self._guarded(self.session.request, method, url, **kwargs)

    def _guarded(self, func: Callable, *args: Any, **kwargs: Any) -> Any:
        if self.breaker is None:
            return func(*args, **kwargs)
        try:
            return self.breaker.call(func, *args, **kwargs)
        except CircuitBreakerError as e:
            logger.error('サーキットブレーカー作動中。API呼び出しを中止しました。')
            raise ApiError(
                'サービスが一時的に利用不可のようです。しばらくしてから再試行してください (サーキットブレーカー作動中)。'
            ) from e

    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
