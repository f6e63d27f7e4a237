"""
Exceptions personnalisées pour Dialogue Compression.
"""


class DialogueCompressionError(Exception):
    """Exception de base pour toutes les erreurs du service."""

    def __init__(self, message: str, code: str = None, details: dict = None):
        super().__init__(message)
        self.message = message
        self.code = code or "unknown_error"
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"[{self.code}] {self.message} - Détails: {self.details}"
        return f"[{self.code}] {self.message}"


class ConfigurationError(DialogueCompressionError):
    """Erreur de configuration (fichier manquant, valeur invalide)."""

    def __init__(self, message: str, config_key: str = None):
        super().__init__(
            message=message,
            code="config_error",
            details={"key": config_key} if config_key else {}
        )


class SessionNotFoundError(DialogueCompressionError):
    """La session référencée n'existe pas (ou a été évincée)."""

    def __init__(self, session_id: str):
        super().__init__(
            message="Session non trouvée",
            code="session_not_found",
            details={"session_id": session_id}
        )
        self.session_id = session_id


class ProviderError(DialogueCompressionError):
    """Erreur liée au backend de génération (clé API, HTTP, réponse invalide)."""

    def __init__(
        self,
        message: str,
        provider: str = None,
        status_code: int = None,
        error_type: str = None
    ):
        details = {}
        if provider:
            details["provider"] = provider
        if status_code is not None:
            details["status_code"] = status_code
        if error_type:
            details["error_type"] = error_type
        super().__init__(
            message=message,
            code="provider_error",
            details=details
        )
        self.status_code = status_code
        self.error_type = error_type


class SummarizationError(DialogueCompressionError):
    """Le résumé n'a pas pu être produit: la session reste inchangée."""

    def __init__(self, message: str, session_id: str = None):
        super().__init__(
            message=message,
            code="summarization_failed",
            details={"session_id": session_id} if session_id else {}
        )
