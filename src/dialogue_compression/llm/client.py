"""
Client HTTPX pour l'API Messages d'Anthropic, avec retry.

- Les erreurs réseau (connect/read/timeout) sont retentées avec backoff
  exponentiel.
- Les réponses 4xx/5xx ne sont jamais retentées: elles deviennent des
  ProviderError.
"""
import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional

import httpx

from ..core.exceptions import ProviderError
from ..config.settings import AnthropicConfig

logger = logging.getLogger(__name__)

PROVIDER_NAME = "anthropic"


@dataclass
class MessageResponse:
    """Réponse normalisée d'un appel au backend."""
    text: str
    input_tokens: int = 0
    output_tokens: int = 0
    response_time: int = 0  # millisecondes
    model: Optional[str] = None
    usage: Dict[str, Any] = field(default_factory=dict)


class AnthropicClient:
    """
    Client HTTP vers l'API Messages.

    Gère:
    - En-têtes d'authentification et de version
    - Retry avec backoff exponentiel sur erreurs réseau
    - Normalisation des erreurs en ProviderError
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.anthropic.com",
        api_version: str = "2023-06-01",
        timeout: float = 60.0,
        max_retries: int = 2,
        retry_delay: float = 1.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.api_version = api_version
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_config(
        cls,
        config: AnthropicConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> "AnthropicClient":
        """Crée un client depuis la section [anthropic] de la configuration."""
        return cls(
            api_key=config.api_key if config.has_api_key else "",
            base_url=config.base_url,
            api_version=config.api_version,
            timeout=config.timeout,
            max_retries=config.max_retries,
            retry_delay=config.retry_delay,
            transport=transport
        )

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    def build_headers(self) -> Dict[str, str]:
        return {
            "x-api-key": self.api_key,
            "anthropic-version": self.api_version,
            "Content-Type": "application/json"
        }

    def build_body(
        self,
        model: str,
        messages: List[Dict[str, str]],
        max_tokens: int,
        temperature: float,
        system: Optional[str] = None
    ) -> Dict[str, Any]:
        body = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": messages
        }
        if system:
            body["system"] = system
        return body

    async def create_message(
        self,
        model: str,
        messages: List[Dict[str, str]],
        max_tokens: int = 2000,
        temperature: float = 0.7,
        system: Optional[str] = None
    ) -> MessageResponse:
        """
        Envoie une requête à l'API Messages.

        Args:
            model: Nom du modèle
            messages: Messages {role, content}
            max_tokens: Limite de tokens en sortie
            temperature: Température d'échantillonnage
            system: Prompt système optionnel

        Returns:
            Réponse normalisée

        Raises:
            ProviderError: Clé absente, erreur HTTP, réseau ou réponse invalide
        """
        if not self.has_api_key:
            raise ProviderError("Clé API Anthropic non configurée", provider=PROVIDER_NAME)

        body = self.build_body(model, messages, max_tokens, temperature, system)
        start = time.monotonic()
        response = await self._post_with_retry(f"{self.base_url}/v1/messages", body)
        elapsed_ms = int((time.monotonic() - start) * 1000)

        if response.status_code >= 400:
            raise self._error_from_response(response)

        try:
            data = response.json()
            text = data["content"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ProviderError(
                f"Réponse invalide du provider: {e}",
                provider=PROVIDER_NAME,
                status_code=response.status_code
            ) from e

        usage = data.get("usage") or {}
        return MessageResponse(
            text=text,
            input_tokens=usage.get("input_tokens", 0) or 0,
            output_tokens=usage.get("output_tokens", 0) or 0,
            response_time=elapsed_ms,
            model=data.get("model", model),
            usage=usage
        )

    def _get_http_client(self) -> httpx.AsyncClient:
        """Client HTTPX partagé entre les tours (pool de connexions)."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout, connect=10.0),
                limits=httpx.Limits(
                    max_keepalive_connections=20,
                    max_connections=50
                ),
                transport=self._transport
            )
        return self._client

    async def aclose(self):
        """Ferme le pool de connexions (arrêt de l'application)."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _post_with_retry(self, url: str, body: Dict[str, Any]) -> httpx.Response:
        client = self._get_http_client()
        last_error = None

        for attempt in range(self.max_retries + 1):
            try:
                return await client.post(url, headers=self.build_headers(), json=body)

            except (httpx.ReadError, httpx.ConnectError, httpx.TimeoutException) as e:
                last_error = e
                if attempt < self.max_retries:
                    delay = self.retry_delay * (2 ** attempt)
                    logger.warning(
                        "⚠️ [CLIENT] Retry %d/%d après %.1fs: %s",
                        attempt + 1, self.max_retries, delay, e
                    )
                    await asyncio.sleep(delay)
                    continue

            except httpx.HTTPError as e:
                last_error = e
                break

        raise ProviderError(
            f"Erreur réseau vers le provider: {last_error}",
            provider=PROVIDER_NAME,
            error_type="network_error"
        )

    def _error_from_response(self, response: httpx.Response) -> ProviderError:
        message = f"HTTP {response.status_code}"
        error_type = None
        try:
            error = response.json().get("error", {})
            message = error.get("message", message)
            error_type = error.get("type")
        except (ValueError, AttributeError):
            pass
        logger.warning("⚠️ [CLIENT] Erreur API %s: %s", response.status_code, message)
        return ProviderError(
            message,
            provider=PROVIDER_NAME,
            status_code=response.status_code,
            error_type=error_type or "unknown"
        )


def create_anthropic_client(
    config: AnthropicConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> AnthropicClient:
    """
    Crée un client Anthropic.

    Args:
        config: Section [anthropic] de la configuration
        transport: Transport HTTPX optionnel (tests)

    Returns:
        Instance de AnthropicClient
    """
    return AnthropicClient.from_config(config, transport=transport)
