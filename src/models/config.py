import os
import re
from pathlib import Path
from typing import Mapping, Optional, Tuple
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..exceptions import ConfigurationError

# Variável de ambiente -> campo das configurações
ENV_FIELDS = {
    "TRELLO_API_KEY": "trello_api_key",
    "TRELLO_BOARD_ID": "trello_board_id",
    "SPREADSHEET_ID": "spreadsheet_id",
    "TRELLO_TOKEN_FILE": "trello_token_file",
    "GOOGLE_TOKEN_FILE": "google_token_file",
    "GOOGLE_CLIENT_SECRET_FILE": "google_client_secret_file",
    "SPRINT_DATES_RANGE": "sprint_dates_range",
    "VELOCITY_SHEET": "velocity_sheet",
    "VELOCITY_COLUMNS": "velocity_columns",
    "SPRINT_DATE_FORMAT": "sprint_date_format",
    "TRELLO_APP_NAME": "trello_app_name",
    "TRELLO_TIMEOUT": "trello_timeout",
}

REQUIRED_ENV = ("TRELLO_API_KEY", "TRELLO_BOARD_ID", "SPREADSHEET_ID")

COLUMNS_PATTERN = re.compile(r"^([A-Z]+):([A-Z]+)$")


class Settings(BaseModel):
    """Configuração do atualizador, lida uma única vez do ambiente"""

    model_config = ConfigDict(frozen=True)

    trello_api_key: str
    trello_board_id: str
    spreadsheet_id: str
    trello_token_file: Path = Path("config/trello_token.json")
    google_token_file: Path = Path("config/google_token.json")
    google_client_secret_file: Path = Path("config/client_secret.json")
    sprint_dates_range: str = "Velocity!A2:A"
    velocity_sheet: str = "Velocity"
    velocity_columns: str = "B:C"
    sprint_date_format: str = "%Y-%m-%d"
    trello_app_name: str = "Sprint Velocity"
    trello_timeout: float = Field(default=30, gt=0)

    @field_validator("velocity_columns")
    @classmethod
    def validate_columns(cls, v: str) -> str:
        """Valida o par de colunas no formato X:Y"""
        v = v.strip().upper()
        if not COLUMNS_PATTERN.match(v):
            raise ValueError(f"Colunas inválidas: {v}. Formato esperado: B:C")
        return v

    @property
    def column_bounds(self) -> Tuple[str, str]:
        """Primeira e última coluna onde os pontos são gravados"""
        first, last = COLUMNS_PATTERN.match(self.velocity_columns).groups()
        return first, last

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, env_file: Optional[Path] = None) -> "Settings":
        """
        Carrega as configurações a partir de variáveis de ambiente

        Args:
            environ: Mapeamento a ser lido (padrão: os.environ)
            env_file: Arquivo .env opcional carregado antes da leitura

        Returns:
            Settings: Configurações validadas

        Raises:
            ConfigurationError: Se faltar variável obrigatória ou algum valor for inválido
        """
        if environ is None:
            load_dotenv(env_file)
            environ = os.environ

        missing = [name for name in REQUIRED_ENV if not environ.get(name)]
        if missing:
            raise ConfigurationError(f"Variáveis de ambiente obrigatórias ausentes: {', '.join(missing)}")

        values = {
            field: environ[name]
            for name, field in ENV_FIELDS.items()
            if environ.get(name)
        }
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Configuração inválida: {e}") from e
