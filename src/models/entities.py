import re
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field

# Primeiro número entre parênteses no título do card, ex: "Login (5)"
POINTS_PATTERN = re.compile(r"\((\d+)\)")


class ListCategory(str, Enum):
    """Categorias semânticas das listas do board"""
    DONE = "done"
    TODO = "todo"
    DOING = "doing"
    READY = "ready"
    ACCEPTED = "accepted"

    @property
    def pattern(self) -> re.Pattern:
        """Padrão usado para reconhecer o nome da lista"""
        return LIST_PATTERNS[self]

    @classmethod
    def carryover(cls) -> List["ListCategory"]:
        """Categorias cujos pontos ainda não foram entregues"""
        return [cls.TODO, cls.DOING, cls.READY, cls.ACCEPTED]


# Ancorados no início do nome, sem diferenciar maiúsculas
LIST_PATTERNS = {
    ListCategory.DONE: re.compile(r"^done\s*:", re.IGNORECASE),
    ListCategory.TODO: re.compile(r"^to\s*do", re.IGNORECASE),
    ListCategory.DOING: re.compile(r"^doing", re.IGNORECASE),
    ListCategory.READY: re.compile(r"^ready", re.IGNORECASE),
    ListCategory.ACCEPTED: re.compile(r"^accepted", re.IGNORECASE),
}


def extract_points(title: str) -> int:
    """
    Extrai os story points do título de um card

    Args:
        title: Título do card

    Returns:
        int: Valor do primeiro número entre parênteses, ou 0 se não houver
    """
    match = POINTS_PATTERN.search(title or "")
    if not match:
        return 0
    return int(match.group(1))


class Card(BaseModel):
    """Modelo de um card do Trello"""
    title: str

    @property
    def points(self) -> int:
        """Story points declarados no título"""
        return extract_points(self.title)


class BoardList(BaseModel):
    """Modelo de uma lista do board"""
    name: str
    cards: List[Card] = Field(default_factory=list)

    @property
    def category(self) -> Optional[ListCategory]:
        """Categoria da lista, ou None se o nome não corresponde a nenhuma"""
        for category in ListCategory:
            if category.pattern.match(self.name):
                return category
        return None

    @property
    def total_points(self) -> int:
        """Soma dos pontos de todos os cards da lista"""
        return sum(card.points for card in self.cards)


class Board(BaseModel):
    """Modelo de um board do Trello"""
    id: str
    lists: List[BoardList] = Field(default_factory=list)

    def get_lists_by_category(self, category: ListCategory) -> List[BoardList]:
        """Retorna todas as listas de uma categoria, na ordem do board"""
        return [board_list for board_list in self.lists if board_list.category == category]


class PointsResult(BaseModel):
    """Pontos concluídos e pontos que ficaram para a próxima sprint"""
    done: int
    carryover: int

    def as_row(self) -> List[List[int]]:
        """Formato esperado pela planilha: uma linha com duas colunas"""
        return [[self.done, self.carryover]]


class MemberToken(BaseModel):
    """Token de membro do Trello persistido localmente"""
    member_token: str = Field(..., min_length=1)
