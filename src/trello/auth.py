from typing import Callable, Optional
from urllib.parse import urlencode
from loguru import logger

from ..auth.token_store import TokenStore

AUTHORIZE_URL = "https://trello.com/1/authorize"

Prompt = Callable[[str], str]


class TrelloAuthorizer:
    """Obtém e mantém o token de membro do Trello"""

    def __init__(self, api_key: str, store: TokenStore, prompt: Prompt, app_name: str = "Sprint Velocity"):
        """
        Inicializa o autorizador

        Args:
            api_key: Chave da API do Trello
            store: Armazenamento local do token
            prompt: Função que exibe uma mensagem e devolve o que o usuário digitou
            app_name: Nome exibido na tela de autorização do Trello
        """
        self.api_key = api_key
        self.store = store
        self.prompt = prompt
        self.app_name = app_name
        self._token: Optional[str] = None

    @property
    def authorize_url(self) -> str:
        params = {
            "expiration": "never",
            "name": self.app_name,
            "scope": "read",
            "response_type": "token",
            "key": self.api_key,
        }
        return f"{AUTHORIZE_URL}?{urlencode(params)}"

    def token(self) -> str:
        """
        Retorna o token de membro, pedindo autorização se necessário

        Returns:
            str: Token de membro
        """
        if self._token:
            return self._token

        token = self.store.load_member_token()
        if token:
            logger.debug("Usando token do Trello armazenado")
        else:
            token = self._authorize()
            self.store.save_member_token(token)

        self._token = token
        return token

    def _authorize(self) -> str:
        """Executa o fluxo interativo de autorização"""
        logger.info("Autorização do Trello necessária")
        while True:
            token = self.prompt(
                f"Acesse {self.authorize_url} e cole aqui o token gerado"
            ).strip()
            if token:
                return token
            logger.warning("Token vazio, tente novamente")

    def invalidate(self) -> None:
        """Descarta o token em memória e o arquivo local"""
        logger.warning("Descartando token do Trello")
        self._token = None
        self.store.delete()
