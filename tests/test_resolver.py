import pytest
from datetime import date
from loguru import logger
from src.exceptions import NoActiveSprintError
from src.services.resolver import parse_sprint_dates, resolve_row


@pytest.fixture
def start_dates():
    """Fixture com três sprints consecutivas"""
    return [date(2024, 1, 1), date(2024, 1, 15), date(2024, 1, 29)]


def test_resolve_row_middle_of_sprint(start_dates):
    """Testa uma data no meio da segunda sprint"""
    assert resolve_row(start_dates, date(2024, 1, 20)) == 3


def test_resolve_row_first_day_targets_previous_sprint(start_dates):
    """Testa o primeiro dia de uma sprint, que fecha a sprint anterior"""
    assert resolve_row(start_dates, date(2024, 1, 15)) == 2


def test_resolve_row_last_day_of_sprint(start_dates):
    """Testa o último dia da primeira sprint"""
    assert resolve_row(start_dates, date(2024, 1, 14)) == 2


def test_resolve_row_first_day_of_first_sprint(start_dates):
    """Testa o primeiro dia da primeira sprint"""
    assert resolve_row(start_dates, date(2024, 1, 1)) == 1


def test_resolve_row_last_sprint(start_dates):
    """Testa o último dia da última sprint"""
    assert resolve_row(start_dates, date(2024, 2, 11)) == 4


def test_resolve_row_is_pure(start_dates):
    """Testa que entradas iguais produzem a mesma linha"""
    results = {resolve_row(start_dates, date(2024, 1, 20)) for _ in range(5)}
    assert results == {3}


@pytest.mark.parametrize("today", [date(2023, 12, 31), date(2024, 2, 12)])
def test_resolve_row_no_active_sprint(start_dates, today):
    """Testa datas fora de qualquer sprint"""
    with pytest.raises(NoActiveSprintError):
        resolve_row(start_dates, today)


def test_resolve_row_skips_blank_entries():
    """Testa que células vazias mantêm a posição mas nunca correspondem"""
    start_dates = [date(2024, 1, 1), None, date(2024, 1, 15)]
    assert resolve_row(start_dates, date(2024, 1, 20)) == 4


def test_parse_sprint_dates():
    """Testa a conversão das linhas da planilha"""
    rows = [["2024-01-01"], [], [""], ["data"], [" 2024-01-29 "]]

    dates = parse_sprint_dates(rows)

    assert dates == [date(2024, 1, 1), None, None, None, date(2024, 1, 29)]


def test_parse_sprint_dates_custom_format():
    """Testa a conversão com formato brasileiro"""
    dates = parse_sprint_dates([["15/01/2024"]], "%d/%m/%Y")
    assert dates == [date(2024, 1, 15)]


def test_resolve_row_first_day_of_first_sprint_warns(start_dates):
    """Testa o aviso quando não existe sprint anterior a ser fechada"""
    messages = []
    handler_id = logger.add(messages.append, level="WARNING")
    try:
        assert resolve_row(start_dates, date(2024, 1, 1)) == 1
    finally:
        logger.remove(handler_id)

    assert any("primeira sprint" in str(m) for m in messages)


def test_resolve_row_boundary_of_later_sprint_does_not_warn(start_dates):
    """Testa que o fechamento de uma sprint anterior não gera aviso"""
    messages = []
    handler_id = logger.add(messages.append, level="WARNING")
    try:
        assert resolve_row(start_dates, date(2024, 1, 15)) == 2
    finally:
        logger.remove(handler_id)

    assert messages == []
