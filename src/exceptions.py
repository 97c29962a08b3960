"""Erros do atualizador de velocity"""


class VelocityError(Exception):
    """Erro base do atualizador de velocity"""


class ConfigurationError(VelocityError):
    """Configuração ausente ou inválida"""


class CredentialInvalidError(VelocityError):
    """O serviço remoto rejeitou a credencial armazenada"""

    def __init__(self, service: str, detail: str = ""):
        self.service = service
        self.detail = detail
        message = f"Credencial inválida para {service}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class CredentialFileCorruptError(VelocityError):
    """Arquivo de credencial local ilegível"""

    def __init__(self, path, reason: str = ""):
        self.path = path
        super().__init__(f"Arquivo de credencial corrompido: {path} {reason}".strip())


class ListNotFoundError(VelocityError):
    """Nenhuma lista do board corresponde à categoria pedida"""

    def __init__(self, category: str):
        self.category = category
        super().__init__(f"Nenhuma lista encontrada para a categoria '{category}'")


class NoActiveSprintError(VelocityError):
    """Nenhuma sprint da planilha contém a data de hoje"""

    def __init__(self, today):
        self.today = today
        super().__init__(f"Nenhuma sprint ativa em {today.isoformat()}")
