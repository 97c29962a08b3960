from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence
from loguru import logger

from ..exceptions import NoActiveSprintError

SPRINT_LENGTH = timedelta(days=14)


def parse_sprint_dates(rows: Sequence[Sequence[str]], date_format: str = "%Y-%m-%d") -> List[Optional[date]]:
    """
    Converte as linhas lidas da planilha em datas de início de sprint

    Args:
        rows: Linhas do intervalo de datas, uma célula por linha
        date_format: Formato das datas na planilha

    Returns:
        List[Optional[date]]: Uma entrada por linha; None para células vazias ou inválidas
    """
    dates = []
    for index, row in enumerate(rows):
        value = row[0].strip() if row and row[0] else ""
        if not value:
            dates.append(None)
            continue
        try:
            dates.append(datetime.strptime(value, date_format).date())
        except ValueError:
            logger.debug(f"Linha {index} ignorada: data inválida '{value}'")
            dates.append(None)
    return dates


def resolve_row(sprint_start_dates: Sequence[Optional[date]], today: date) -> int:
    """
    Determina a linha da planilha a ser atualizada

    A sprint atual é a primeira cuja janela [início, início + 13 dias] contém
    hoje. No primeiro dia de uma sprint a linha é a da sprint que acabou de
    terminar. No primeiro dia da primeira sprint não existe sprint anterior e
    a linha devolvida é a 1, normalmente o cabeçalho da planilha.

    Args:
        sprint_start_dates: Datas de início das sprints, em ordem crescente
        today: Data de referência

    Returns:
        int: Número da linha (base 1)

    Raises:
        NoActiveSprintError: Se nenhuma sprint contém a data de referência
    """
    for index, start in enumerate(sprint_start_dates):
        if start is None:
            continue
        if start <= today < start + SPRINT_LENGTH:
            if today == start:
                if index == 0:
                    logger.warning(
                        f"{today.isoformat()} é o primeiro dia da primeira sprint; "
                        "não há sprint anterior e a linha 1 será usada"
                    )
                return index + 1
            return index + 2
    raise NoActiveSprintError(today)
