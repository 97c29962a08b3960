"""
Velocity de Sprint Trello

Este pacote calcula a velocity de um time ágil a partir de um board do Trello,
somando os story points dos cards concluídos e dos que ficaram pendentes, e
grava o resultado na linha da sprint atual de uma planilha do Google Sheets.
"""

__version__ = "1.0.0"
