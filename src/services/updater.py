from datetime import date
from typing import Optional
from loguru import logger
from pydantic import BaseModel

from ..auth.token_store import TokenStore
from ..models.config import Settings
from ..models.entities import Board, PointsResult
from ..sheets.auth import FlowRunner, SheetsAuthorizer, run_local_server
from ..sheets.client import SheetsClient
from ..trello.auth import Prompt, TrelloAuthorizer
from ..trello.client import TrelloClient
from .aggregator import BoardPointsAggregator
from .resolver import parse_sprint_dates, resolve_row
from .retry import retry_once


class UpdateOutcome(BaseModel):
    """Resultado de uma execução do atualizador"""
    points: PointsResult
    row: int
    target_range: str
    written: bool


class VelocityUpdater:
    """Serviço que calcula a velocity do board e a grava na linha da sprint atual"""

    def __init__(
        self,
        settings: Settings,
        trello_authorizer: TrelloAuthorizer,
        trello_client: TrelloClient,
        sheets_authorizer: Optional[SheetsAuthorizer] = None,
        sheets_client: Optional[SheetsClient] = None,
    ):
        """
        Inicializa o atualizador

        Args:
            settings: Configurações da execução
            trello_authorizer: Autorizador do Trello
            trello_client: Cliente do Trello
            sheets_authorizer: Autorizador do Google Sheets
            sheets_client: Cliente do Google Sheets
        """
        self.settings = settings
        self.trello_authorizer = trello_authorizer
        self.trello_client = trello_client
        self.sheets_authorizer = sheets_authorizer
        self.sheets_client = sheets_client
        self._board: Optional[Board] = None
        self._points: Optional[PointsResult] = None

    @classmethod
    def from_settings(cls, settings: Settings, prompt: Prompt, run_flow: FlowRunner = run_local_server) -> "VelocityUpdater":
        """Monta o atualizador e seus colaboradores a partir das configurações"""
        trello_authorizer = TrelloAuthorizer(
            api_key=settings.trello_api_key,
            store=TokenStore(settings.trello_token_file),
            prompt=prompt,
            app_name=settings.trello_app_name,
        )
        sheets_authorizer = SheetsAuthorizer(
            client_secret_file=settings.google_client_secret_file,
            store=TokenStore(settings.google_token_file),
            run_flow=run_flow,
        )
        return cls(
            settings=settings,
            trello_authorizer=trello_authorizer,
            trello_client=TrelloClient(trello_authorizer, timeout=settings.trello_timeout),
            sheets_authorizer=sheets_authorizer,
            sheets_client=SheetsClient(settings.spreadsheet_id, sheets_authorizer),
        )

    @property
    def board(self) -> Board:
        """Board da execução, obtido uma única vez"""
        if self._board is None:
            logger.info(f"Obtendo listas do board {self.settings.trello_board_id}...")
            self._board = retry_once(
                lambda: self.trello_client.get_board(self.settings.trello_board_id),
                self.trello_authorizer.invalidate,
            )
        return self._board

    def compute_points(self) -> PointsResult:
        if self._points is None:
            self._points = BoardPointsAggregator(self.board).result()
        return self._points

    def _reauthorize_sheets(self) -> None:
        self.sheets_authorizer.invalidate()
        self.sheets_client.reset()

    def _require_sheets(self) -> SheetsClient:
        if self.sheets_client is None:
            raise RuntimeError("Cliente do Google Sheets não configurado")
        return self.sheets_client

    def resolve_target_row(self, today: date) -> int:
        """
        Determina a linha da sprint atual a partir das datas da planilha

        Args:
            today: Data de referência

        Returns:
            int: Linha a ser atualizada
        """
        sheets = self._require_sheets()
        rows = retry_once(
            lambda: sheets.read_range(self.settings.sprint_dates_range),
            self._reauthorize_sheets,
        )
        start_dates = parse_sprint_dates(rows, self.settings.sprint_date_format)
        row = resolve_row(start_dates, today)
        logger.info(f"Linha da sprint para {today.isoformat()}: {row}")
        return row

    def target_range(self, row: int) -> str:
        first, last = self.settings.column_bounds
        return f"{self.settings.velocity_sheet}!{first}{row}:{last}{row}"

    def run(self, today: Optional[date] = None, dry_run: bool = False) -> UpdateOutcome:
        """
        Executa a atualização completa

        Args:
            today: Data de referência (padrão: hoje)
            dry_run: Se True, calcula tudo mas não grava na planilha

        Returns:
            UpdateOutcome: Pontos, linha e intervalo da execução
        """
        today = today or date.today()
        points = self.compute_points()
        row = self.resolve_target_row(today)
        a1_range = self.target_range(row)

        if dry_run:
            logger.info(f"Simulação: nada gravado em {a1_range}")
        else:
            sheets = self._require_sheets()
            retry_once(
                lambda: sheets.write_range(a1_range, points.as_row()),
                self._reauthorize_sheets,
            )

        return UpdateOutcome(points=points, row=row, target_range=a1_range, written=not dry_run)
