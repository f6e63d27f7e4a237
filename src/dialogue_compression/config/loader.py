"""src.dialogue_compression.config.loader

Chargement de la configuration TOML.

Note d'architecture:
- Le package `config/` est consommé par les couches Services et API.
- Il ne dépend que de `core/`.
"""
import os
import re
import tomllib
from pathlib import Path
from typing import Dict, Any, Optional

from ..core.exceptions import ConfigurationError
from .settings import Settings

CONFIG_ENV_VAR = "DIALOGUE_COMPRESSION_CONFIG"

# Cache global de configuration
_config_cache: Optional[Dict[str, Any]] = None


def _expand_env_vars(obj: Any) -> Any:
    """
    Récursivement étend les variables d'environnement ${VAR} dans la config.

    Args:
        obj: Valeur à traiter (str, dict, list)

    Returns:
        Valeur avec variables d'environnement expansées
    """
    if isinstance(obj, str):
        def replace_env_var(match):
            var_name = match.group(1)
            return os.environ.get(var_name, match.group(0))
        return re.sub(r'\$\{([^}]+)\}', replace_env_var, obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    return obj


def _clear_config_cache():
    """Vide le cache de configuration."""
    global _config_cache
    _config_cache = None


def default_config_path() -> str:
    """
    Chemin par défaut: variable d'environnement, sinon config.toml à la racine
    du projet (parent de src/).
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return env_path
    # Structure: project/src/dialogue_compression/config/loader.py
    current_file = os.path.abspath(__file__)
    project_dir = os.path.dirname(os.path.dirname(os.path.dirname(os.path.dirname(current_file))))
    return os.path.join(project_dir, "config.toml")


def load_config(config_path: str = None) -> Dict[str, Any]:
    """
    Charge la configuration depuis config.toml.

    Args:
        config_path: Chemin vers le fichier config (optionnel)

    Returns:
        Dictionnaire de configuration

    Raises:
        ConfigurationError: Si le fichier n'existe pas ou est invalide
    """
    global _config_cache

    if _config_cache is not None and config_path is None:
        return _config_cache

    path = Path(config_path or default_config_path())
    if not path.exists():
        raise ConfigurationError(
            message=f"Fichier de configuration non trouvé: {path}",
            config_key="config_path"
        )

    try:
        with open(path, "rb") as f:
            raw_config = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(
            message=f"Fichier de configuration invalide: {e}",
            config_key="config_path"
        ) from e

    _config_cache = _expand_env_vars(raw_config)
    return _config_cache


def reload_config(config_path: str = None) -> Dict[str, Any]:
    """
    Recharge la configuration depuis le fichier.

    Returns:
        Nouvelle configuration chargée
    """
    _clear_config_cache()
    return load_config(config_path)


def get_config() -> Dict[str, Any]:
    """
    Retourne la configuration en cache.

    Returns:
        Configuration actuelle
    """
    if _config_cache is None:
        return load_config()
    return _config_cache


def load_settings(config_path: str = None) -> Settings:
    """
    Charge et valide les paramètres typés.

    Raises:
        ConfigurationError: Si le fichier est absent ou une valeur invalide
    """
    config = load_config(config_path) if config_path else get_config()
    return Settings.from_config(config)
