import json
from pathlib import Path
from typing import Optional
from loguru import logger
from pydantic import ValidationError

from ..exceptions import CredentialFileCorruptError
from ..models.entities import MemberToken


class TokenStore:
    """Persistência de uma credencial em um arquivo JSON local"""

    def __init__(self, path: Path):
        """
        Inicializa o armazenamento

        Args:
            path: Caminho do arquivo de credencial
        """
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def _parse(self) -> dict:
        """Lê e decodifica o arquivo, sem tratar corrupção"""
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise CredentialFileCorruptError(self.path, str(e)) from e
        if not isinstance(data, dict):
            raise CredentialFileCorruptError(self.path, "conteúdo não é um objeto JSON")
        return data

    def load(self) -> Optional[dict]:
        """
        Carrega a credencial armazenada

        Returns:
            Optional[dict]: Conteúdo do arquivo, ou None se ausente ou corrompido
        """
        if not self.exists():
            logger.debug(f"Arquivo de credencial {self.path} não encontrado")
            return None
        try:
            return self._parse()
        except CredentialFileCorruptError as e:
            logger.warning(f"{e}. Removendo arquivo")
            self.delete()
            return None

    def load_member_token(self) -> Optional[str]:
        """Carrega o token de membro do Trello, descartando arquivos fora do formato"""
        data = self.load()
        if data is None:
            return None
        try:
            return MemberToken(**data).member_token
        except ValidationError:
            logger.warning(f"Arquivo de credencial {self.path} fora do formato esperado. Removendo arquivo")
            self.delete()
            return None

    def save(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")
        logger.info(f"Credencial salva em {self.path}")

    def save_member_token(self, token: str) -> None:
        self.save(MemberToken(member_token=token).model_dump())

    def delete(self) -> None:
        """Remove o arquivo de credencial, se existir"""
        self.path.unlink(missing_ok=True)
        logger.info(f"Credencial removida: {self.path}")
