"""Typed client for the Ark custom resource API."""

from __future__ import annotations

import os
from dataclasses import dataclass

from ark_client.errors import ServerRequestError, SubmissionError
from ark_client.logging_utils import LOG
from ark_client.restore import API_VERSION

ARK_TOKEN_ENV_VAR = "ARK_TOKEN"


@dataclass
class ArkClient:
    base_url: str
    token: str | None = None
    timeout: float = 30.0
    verify_tls: bool = True

    def __post_init__(self) -> None:
        try:
            import requests
        except Exception as exc:  # pragma: no cover
            raise SubmissionError(f"requests stack unavailable: {exc}") from exc

        self._session = requests.Session()
        self._session.verify = self.verify_tls
        if self.token is None:
            env_token = os.getenv(ARK_TOKEN_ENV_VAR)
            self.token = env_token.strip() or None if env_token else None

    def _url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, *, json_payload: dict | None = None) -> dict:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        url = self._url(path)
        LOG.debug("%s %s", method, url)
        try:
            response = self._session.request(
                method,
                url,
                json=json_payload,
                headers=headers,
                timeout=self.timeout,
            )
        except Exception as exc:
            raise SubmissionError(str(exc)) from exc

        LOG.debug("%s %s -> %s", method, url, response.status_code)
        if response.status_code >= 400:
            body: object | None = None
            try:
                body = response.json()
            except Exception:
                body = None
            message: object | None = None
            reason: str | None = None
            if isinstance(body, dict):
                message = body.get("message")
                raw_reason = body.get("reason")
                reason = raw_reason if isinstance(raw_reason, str) else None
            if not isinstance(message, str) or not message:
                message = f"{response.status_code} {response.text}".strip()
            raise ServerRequestError(
                message,
                status_code=response.status_code,
                reason=reason,
                body=body,
            )
        try:
            payload = response.json()
        except Exception as exc:
            raise SubmissionError(f"invalid response from server: {exc}") from exc
        if not isinstance(payload, dict):
            raise SubmissionError(
                f"invalid response from server: expected a JSON object, got {type(payload).__name__}"
            )
        return payload

    def restores_path(self, namespace: str) -> str:
        return f"/apis/{API_VERSION}/namespaces/{namespace}/restores"

    def create_restore(self, namespace: str, body: dict) -> dict:
        return self._request("POST", self.restores_path(namespace), json_payload=body)


__all__ = ["ArkClient", "ARK_TOKEN_ENV_VAR"]
