import json
from pathlib import Path
from typing import Callable, List, Optional
from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from loguru import logger

from ..auth.token_store import TokenStore
from ..exceptions import ConfigurationError

SCOPES: List[str] = ["https://www.googleapis.com/auth/spreadsheets"]

FlowRunner = Callable[[InstalledAppFlow], Credentials]


def run_local_server(flow: InstalledAppFlow) -> Credentials:
    """Abre o navegador e aguarda o retorno da autorização"""
    return flow.run_local_server(port=0)


class SheetsAuthorizer:
    """Obtém e mantém as credenciais OAuth do Google Sheets"""

    def __init__(self, client_secret_file: Path, store: TokenStore, run_flow: FlowRunner = run_local_server):
        """
        Inicializa o autorizador

        Args:
            client_secret_file: Arquivo de client secret do Google
            store: Armazenamento local das credenciais autorizadas
            run_flow: Estratégia que executa o fluxo interativo de autorização
        """
        self.client_secret_file = Path(client_secret_file)
        self.store = store
        self.run_flow = run_flow
        self._credentials: Optional[Credentials] = None

    def credentials(self) -> Credentials:
        """
        Retorna credenciais válidas, autorizando novamente se necessário

        Returns:
            Credentials: Credenciais OAuth do usuário
        """
        if self._credentials and self._credentials.valid:
            return self._credentials

        creds = self._load_stored()
        if creds is None:
            creds = self._authorize()
            self.store.save(_to_dict(creds))

        self._credentials = creds
        return creds

    def _load_stored(self) -> Optional[Credentials]:
        """Carrega as credenciais salvas, renovando-as se expiradas"""
        data = self.store.load()
        if data is None:
            return None
        try:
            creds = Credentials.from_authorized_user_info(data, SCOPES)
        except ValueError as e:
            logger.warning(f"Credencial do Google fora do formato esperado ({e}). Removendo arquivo")
            self.store.delete()
            return None

        if creds.valid:
            return creds
        if creds.expired and creds.refresh_token:
            try:
                creds.refresh(Request())
            except RefreshError as e:
                logger.warning(f"Falha ao renovar credencial do Google: {e}")
                self.store.delete()
                return None
            self.store.save(_to_dict(creds))
            logger.info("Credencial do Google renovada")
            return creds

        self.store.delete()
        return None

    def _authorize(self) -> Credentials:
        """Executa o fluxo de autorização do aplicativo instalado"""
        if not self.client_secret_file.is_file():
            raise ConfigurationError(f"Arquivo de client secret não encontrado: {self.client_secret_file}")
        logger.info("Autorização do Google Sheets necessária")
        flow = InstalledAppFlow.from_client_secrets_file(str(self.client_secret_file), scopes=SCOPES)
        return self.run_flow(flow)

    def invalidate(self) -> None:
        """Descarta as credenciais em memória e o arquivo local"""
        logger.warning("Descartando credencial do Google")
        self._credentials = None
        self.store.delete()


def _to_dict(creds: Credentials) -> dict:
    return json.loads(creds.to_json())
