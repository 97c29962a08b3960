from typing import List, Optional
import gspread
from google.auth.exceptions import RefreshError
from gspread.exceptions import APIError
from loguru import logger

from ..exceptions import CredentialInvalidError
from .auth import SheetsAuthorizer

USER_ENTERED = "USER_ENTERED"


class SheetsClient:
    """Cliente para leitura e escrita de intervalos de uma planilha"""

    def __init__(self, spreadsheet_id: str, authorizer: SheetsAuthorizer):
        """
        Inicializa o cliente do Google Sheets

        Args:
            spreadsheet_id: Identificador da planilha
            authorizer: Fornece as credenciais OAuth
        """
        self.spreadsheet_id = spreadsheet_id
        self.authorizer = authorizer
        self._spreadsheet: Optional[gspread.Spreadsheet] = None

    @property
    def spreadsheet(self) -> gspread.Spreadsheet:
        if self._spreadsheet is None:
            client = gspread.authorize(self.authorizer.credentials())
            self._spreadsheet = client.open_by_key(self.spreadsheet_id)
            logger.info(f"Planilha {self.spreadsheet_id} aberta")
        return self._spreadsheet

    def reset(self) -> None:
        """Descarta a conexão atual para que seja reaberta com novas credenciais"""
        self._spreadsheet = None

    def read_range(self, a1_range: str) -> List[List[str]]:
        """
        Lê um intervalo como linhas de texto

        Args:
            a1_range: Intervalo em notação A1, ex: Velocity!A2:A

        Returns:
            List[List[str]]: Linhas do intervalo (linhas vazias no fim são omitidas pela API)
        """
        try:
            response = self.spreadsheet.values_get(a1_range)
        except APIError as e:
            _raise_if_unauthorized(e)
            raise
        except RefreshError as e:
            raise CredentialInvalidError("Google Sheets", str(e)) from e
        rows = response.get("values", [])
        logger.info(f"Lidas {len(rows)} linhas de {a1_range}")
        return rows

    def write_range(self, a1_range: str, values: List[List]) -> None:
        """
        Grava um bloco de valores como se tivessem sido digitados pelo usuário

        Args:
            a1_range: Intervalo de destino em notação A1
            values: Linhas a serem gravadas
        """
        try:
            self.spreadsheet.values_update(
                a1_range,
                params={"valueInputOption": USER_ENTERED},
                body={"values": values},
            )
        except APIError as e:
            _raise_if_unauthorized(e)
            raise
        except RefreshError as e:
            raise CredentialInvalidError("Google Sheets", str(e)) from e
        logger.info(f"Valores {values} gravados em {a1_range}")


def _raise_if_unauthorized(error: APIError) -> None:
    if error.response is not None and error.response.status_code == 401:
        raise CredentialInvalidError("Google Sheets", str(error)) from error
