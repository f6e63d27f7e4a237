"""
Dataclasses pour la configuration.
"""
from dataclasses import dataclass, field
from typing import Dict, Any

from ..core.constants import (
    DEFAULT_COMPRESSION_CONFIG,
    DEFAULT_CHAT_CONFIG,
    DEFAULT_ANTHROPIC_CONFIG,
    DEFAULT_SESSION_TTL_SECONDS,
    DEFAULT_SWEEP_INTERVAL_SECONDS,
    DEFAULT_HOST,
    DEFAULT_PORT,
)
from ..core.exceptions import ConfigurationError


@dataclass
class CompressionConfig:
    """Configuration de compression du dialogue."""
    messages_before_compression: int = DEFAULT_COMPRESSION_CONFIG["messages_before_compression"]
    messages_to_keep: int = DEFAULT_COMPRESSION_CONFIG["messages_to_keep"]
    model: str = DEFAULT_COMPRESSION_CONFIG["model"]
    temperature: float = DEFAULT_COMPRESSION_CONFIG["temperature"]
    max_tokens: int = DEFAULT_COMPRESSION_CONFIG["max_tokens"]
    enabled_by_default: bool = DEFAULT_COMPRESSION_CONFIG["enabled_by_default"]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CompressionConfig":
        """Crée une instance depuis un dictionnaire."""
        defaults = DEFAULT_COMPRESSION_CONFIG
        return cls(
            messages_before_compression=data.get(
                "messages_before_compression", defaults["messages_before_compression"]
            ),
            messages_to_keep=data.get("messages_to_keep", defaults["messages_to_keep"]),
            model=data.get("model", defaults["model"]),
            temperature=data.get("temperature", defaults["temperature"]),
            max_tokens=data.get("max_tokens", defaults["max_tokens"]),
            enabled_by_default=data.get("enabled_by_default", defaults["enabled_by_default"])
        )

    def validate(self):
        """
        Vérifie la cohérence des valeurs.

        Raises:
            ConfigurationError: Si une valeur est invalide
        """
        if self.messages_before_compression < 1:
            raise ConfigurationError(
                "Le seuil de compression doit être >= 1",
                config_key="compression.messages_before_compression"
            )
        if not 0 <= self.messages_to_keep < self.messages_before_compression:
            raise ConfigurationError(
                "messages_to_keep doit être >= 0 et inférieur au seuil de compression",
                config_key="compression.messages_to_keep"
            )
        if not 0.0 <= self.temperature <= 1.0:
            raise ConfigurationError(
                "La température doit être comprise entre 0 et 1",
                config_key="compression.temperature"
            )
        if self.max_tokens <= 0:
            raise ConfigurationError(
                "max_tokens doit être positif",
                config_key="compression.max_tokens"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "messages_before_compression": self.messages_before_compression,
            "messages_to_keep": self.messages_to_keep,
            "model": self.model,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "enabled_by_default": self.enabled_by_default
        }


@dataclass
class ChatConfig:
    """Paramètres de génération pour les réponses de l'assistant."""
    model: str = DEFAULT_CHAT_CONFIG["model"]
    temperature: float = DEFAULT_CHAT_CONFIG["temperature"]
    max_tokens: int = DEFAULT_CHAT_CONFIG["max_tokens"]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChatConfig":
        """Crée une instance depuis un dictionnaire."""
        return cls(
            model=data.get("model", DEFAULT_CHAT_CONFIG["model"]),
            temperature=data.get("temperature", DEFAULT_CHAT_CONFIG["temperature"]),
            max_tokens=data.get("max_tokens", DEFAULT_CHAT_CONFIG["max_tokens"])
        )

    def validate(self):
        if not 0.0 <= self.temperature <= 1.0:
            raise ConfigurationError(
                "La température doit être comprise entre 0 et 1",
                config_key="chat.temperature"
            )
        if self.max_tokens <= 0:
            raise ConfigurationError("max_tokens doit être positif", config_key="chat.max_tokens")


@dataclass
class AnthropicConfig:
    """Connexion au backend Anthropic."""
    api_key: str = DEFAULT_ANTHROPIC_CONFIG["api_key"]
    base_url: str = DEFAULT_ANTHROPIC_CONFIG["base_url"]
    api_version: str = DEFAULT_ANTHROPIC_CONFIG["api_version"]
    timeout: float = DEFAULT_ANTHROPIC_CONFIG["timeout"]
    max_retries: int = DEFAULT_ANTHROPIC_CONFIG["max_retries"]
    retry_delay: float = DEFAULT_ANTHROPIC_CONFIG["retry_delay"]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnthropicConfig":
        """Crée une instance depuis un dictionnaire."""
        defaults = DEFAULT_ANTHROPIC_CONFIG
        return cls(
            api_key=data.get("api_key", defaults["api_key"]),
            base_url=data.get("base_url", defaults["base_url"]).rstrip("/"),
            api_version=data.get("api_version", defaults["api_version"]),
            timeout=data.get("timeout", defaults["timeout"]),
            max_retries=data.get("max_retries", defaults["max_retries"]),
            retry_delay=data.get("retry_delay", defaults["retry_delay"])
        )

    @property
    def has_api_key(self) -> bool:
        """Une variable ${VAR} non résolue compte comme absente."""
        return bool(self.api_key) and not self.api_key.startswith("${")

    def validate(self):
        if self.timeout <= 0:
            raise ConfigurationError("Le timeout doit être positif", config_key="anthropic.timeout")
        if self.max_retries < 0:
            raise ConfigurationError(
                "max_retries ne peut pas être négatif",
                config_key="anthropic.max_retries"
            )


@dataclass
class SessionConfig:
    """Durée de vie des sessions inactives."""
    ttl_seconds: float = DEFAULT_SESSION_TTL_SECONDS
    sweep_interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SessionConfig":
        return cls(
            ttl_seconds=data.get("ttl_seconds", DEFAULT_SESSION_TTL_SECONDS),
            sweep_interval_seconds=data.get("sweep_interval_seconds", DEFAULT_SWEEP_INTERVAL_SECONDS)
        )

    def validate(self):
        if self.ttl_seconds <= 0:
            raise ConfigurationError("ttl_seconds doit être positif", config_key="sessions.ttl_seconds")
        if self.sweep_interval_seconds <= 0:
            raise ConfigurationError(
                "sweep_interval_seconds doit être positif",
                config_key="sessions.sweep_interval_seconds"
            )


@dataclass
class Settings:
    """Configuration globale de l'application."""
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    compression: CompressionConfig = field(default_factory=CompressionConfig)
    chat: ChatConfig = field(default_factory=ChatConfig)
    anthropic: AnthropicConfig = field(default_factory=AnthropicConfig)
    sessions: SessionConfig = field(default_factory=SessionConfig)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "Settings":
        """Crée une instance depuis la configuration chargée, puis la valide."""
        server = config.get("server", {})
        settings = cls(
            host=server.get("host", DEFAULT_HOST),
            port=server.get("port", DEFAULT_PORT),
            compression=CompressionConfig.from_dict(config.get("compression", {})),
            chat=ChatConfig.from_dict(config.get("chat", {})),
            anthropic=AnthropicConfig.from_dict(config.get("anthropic", {})),
            sessions=SessionConfig.from_dict(config.get("sessions", {}))
        )
        settings.validate()
        return settings

    def validate(self):
        """Valide toutes les sections."""
        self.compression.validate()
        self.chat.validate()
        self.anthropic.validate()
        self.sessions.validate()
