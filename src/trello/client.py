from typing import List
import requests
from loguru import logger

from ..exceptions import CredentialInvalidError
from ..models.entities import Board, BoardList, Card
from .auth import TrelloAuthorizer

API_URL = "https://api.trello.com/1"


class TrelloClient:
    """Cliente para leitura de boards do Trello"""

    def __init__(self, authorizer: TrelloAuthorizer, timeout: float = 30, session: requests.Session = None):
        """
        Inicializa o cliente do Trello

        Args:
            authorizer: Fornece a chave da API e o token de membro
            timeout: Timeout das requisições em segundos
            session: Sessão HTTP (padrão: nova sessão)
        """
        self.authorizer = authorizer
        self.timeout = timeout
        self.session = session or requests.Session()

        logger.info("Cliente Trello inicializado")

    def _get(self, path: str, **params) -> list:
        """
        Executa um GET autenticado na API

        Raises:
            CredentialInvalidError: Se o Trello rejeitar o token
            requests.HTTPError: Para qualquer outra falha HTTP
        """
        params.update({"key": self.authorizer.api_key, "token": self.authorizer.token()})
        response = self.session.get(f"{API_URL}{path}", params=params, timeout=self.timeout)
        if response.status_code == 401:
            raise CredentialInvalidError("Trello", response.text.strip())
        response.raise_for_status()
        return response.json()

    def get_board(self, board_id: str) -> Board:
        """
        Obtém as listas abertas de um board com seus cards

        Args:
            board_id: Identificador do board

        Returns:
            Board: Board com listas e cards na ordem do Trello
        """
        raw_lists = self._get(
            f"/boards/{board_id}/lists",
            cards="open",
            card_fields="name",
            fields="name",
        )
        board = Board(id=board_id, lists=self.convert_to_lists(raw_lists))
        cards_count = sum(len(board_list.cards) for board_list in board.lists)
        logger.info(f"Obtidas {len(board.lists)} listas e {cards_count} cards do board {board_id}")
        return board

    @staticmethod
    def convert_to_lists(raw_lists: List[dict]) -> List[BoardList]:
        """Converte a resposta da API para entidades do sistema"""
        return [
            BoardList(
                name=item.get("name", ""),
                cards=[Card(title=card.get("name", "")) for card in item.get("cards") or []],
            )
            for item in raw_lists
        ]
