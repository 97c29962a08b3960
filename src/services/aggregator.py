from typing import Dict, List
from loguru import logger

from ..exceptions import ListNotFoundError
from ..models.entities import Board, BoardList, ListCategory, PointsResult


class BoardPointsAggregator:
    """Serviço responsável pela soma dos pontos das listas do board"""

    def __init__(self, board: Board):
        """
        Inicializa o agregador

        Args:
            board: Board já obtido do Trello
        """
        self.board = board
        self._lists: Dict[ListCategory, BoardList] = {}

    def find_list(self, category: ListCategory) -> BoardList:
        """
        Retorna a primeira lista do board que corresponde à categoria

        Args:
            category: Categoria procurada

        Returns:
            BoardList: Lista encontrada

        Raises:
            ListNotFoundError: Se nenhuma lista corresponder
        """
        if category in self._lists:
            return self._lists[category]

        matches = self.board.get_lists_by_category(category)
        if not matches:
            raise ListNotFoundError(category.value)
        if len(matches) > 1:
            names = ", ".join(f"'{m.name}'" for m in matches)
            logger.warning(f"Várias listas correspondem à categoria {category.value} ({names}); usando '{matches[0].name}'")

        self._lists[category] = matches[0]
        return matches[0]

    def _sum(self, categories: List[ListCategory]) -> int:
        return sum(self.find_list(category).total_points for category in categories)

    def points_done(self) -> int:
        """Pontos dos cards na lista de concluídos"""
        return self._sum([ListCategory.DONE])

    def points_carryover(self) -> int:
        """Pontos dos cards ainda não concluídos"""
        return self._sum(ListCategory.carryover())

    def result(self) -> PointsResult:
        points = PointsResult(done=self.points_done(), carryover=self.points_carryover())
        logger.info(f"Pontos concluídos: {points.done}, pontos pendentes: {points.carryover}")
        return points
