"""
Point d'entrée pour `python -m dialogue_compression`.
"""
import argparse
import logging
import os

import uvicorn

from .config.loader import load_settings, CONFIG_ENV_VAR


def main():
    """Fonction principale."""
    parser = argparse.ArgumentParser(description="Dialogue Compression")
    parser.add_argument("--config", default=None, help="Chemin vers config.toml")
    parser.add_argument("--host", default=None, help="Host (défaut: config)")
    parser.add_argument("--port", type=int, default=None, help="Port (défaut: config)")
    parser.add_argument("--reload", action="store_true", help="Activer le reload auto")
    parser.add_argument("--log-level", default="info", help="Niveau de log (défaut: info)")

    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    if args.config:
        # Relu par create_app (y compris dans le process de reload)
        os.environ[CONFIG_ENV_VAR] = os.path.abspath(args.config)

    settings = load_settings(args.config)
    host = args.host or settings.host
    port = args.port or settings.port

    logging.getLogger(__name__).info(
        "🚀 Démarrage de Dialogue Compression sur %s:%s", host, port
    )

    uvicorn.run(
        "dialogue_compression.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=args.reload,
        log_level=args.log_level.lower()
    )


if __name__ == "__main__":
    main()
