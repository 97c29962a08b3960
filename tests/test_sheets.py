import json
import pytest
from unittest.mock import Mock, patch
from google.auth.exceptions import RefreshError
from gspread.exceptions import APIError
from src.auth.token_store import TokenStore
from src.exceptions import ConfigurationError, CredentialInvalidError
from src.sheets.auth import SCOPES, SheetsAuthorizer
from src.sheets.client import SheetsClient


def api_error(status_code):
    """Cria um APIError do gspread com a resposta informada"""
    response = Mock()
    response.status_code = status_code
    response.text = "erro"
    response.json.return_value = {
        "error": {"code": status_code, "message": "erro da API", "status": "ERROR"}
    }
    return APIError(response)


@pytest.fixture
def client_secret(tmp_path):
    """Fixture para o arquivo de client secret"""
    path = tmp_path / "client_secret.json"
    path.write_text('{"installed": {}}', encoding="utf-8")
    return path


@pytest.fixture
def store(tmp_path):
    """Fixture para o armazenamento das credenciais do Google"""
    return TokenStore(tmp_path / "google_token.json")


@pytest.fixture
def new_credentials():
    """Fixture para credenciais obtidas no fluxo interativo"""
    creds = Mock()
    creds.valid = True
    creds.to_json.return_value = json.dumps({"token": "novo", "refresh_token": "r"})
    return creds


def test_authorizer_uses_stored_credentials(client_secret, store):
    """Testa o uso das credenciais armazenadas"""
    store.save({"token": "salvo"})
    stored = Mock(valid=True)
    run_flow = Mock()

    with patch("src.sheets.auth.Credentials.from_authorized_user_info", return_value=stored) as loader:
        authorizer = SheetsAuthorizer(client_secret, store, run_flow)
        assert authorizer.credentials() is stored

    loader.assert_called_once_with({"token": "salvo"}, SCOPES)
    run_flow.assert_not_called()


def test_authorizer_runs_flow_when_file_corrupt(client_secret, store, new_credentials):
    """Testa que um arquivo corrompido leva ao fluxo interativo"""
    store.path.write_text("{corrompido", encoding="utf-8")
    flow = Mock()
    run_flow = Mock(return_value=new_credentials)

    with patch("src.sheets.auth.InstalledAppFlow.from_client_secrets_file", return_value=flow) as from_file:
        authorizer = SheetsAuthorizer(client_secret, store, run_flow)
        assert authorizer.credentials() is new_credentials

    from_file.assert_called_once_with(str(client_secret), scopes=SCOPES)
    run_flow.assert_called_once_with(flow)
    assert store.load() == {"token": "novo", "refresh_token": "r"}


def test_authorizer_refreshes_expired_credentials(client_secret, store):
    """Testa a renovação de credenciais expiradas"""
    store.save({"token": "velho", "refresh_token": "r"})
    stored = Mock(valid=False, expired=True, refresh_token="r")
    stored.to_json.return_value = json.dumps({"token": "renovado", "refresh_token": "r"})
    run_flow = Mock()

    with patch("src.sheets.auth.Credentials.from_authorized_user_info", return_value=stored), \
         patch("src.sheets.auth.Request"):
        authorizer = SheetsAuthorizer(client_secret, store, run_flow)
        assert authorizer.credentials() is stored

    stored.refresh.assert_called_once()
    run_flow.assert_not_called()
    assert store.load()["token"] == "renovado"


def test_authorizer_refresh_failure_reauthorizes(client_secret, store, new_credentials):
    """Testa que uma renovação rejeitada leva ao fluxo interativo"""
    store.save({"token": "velho", "refresh_token": "revogado"})
    stored = Mock(valid=False, expired=True, refresh_token="revogado")
    stored.refresh.side_effect = RefreshError("invalid_grant")
    run_flow = Mock(return_value=new_credentials)

    with patch("src.sheets.auth.Credentials.from_authorized_user_info", return_value=stored), \
         patch("src.sheets.auth.Request"), \
         patch("src.sheets.auth.InstalledAppFlow.from_client_secrets_file"):
        authorizer = SheetsAuthorizer(client_secret, store, run_flow)
        assert authorizer.credentials() is new_credentials

    run_flow.assert_called_once()
    assert store.load()["token"] == "novo"


def test_authorizer_missing_client_secret(tmp_path, store):
    """Testa a falta do arquivo de client secret"""
    authorizer = SheetsAuthorizer(tmp_path / "inexistente.json", store, Mock())

    with pytest.raises(ConfigurationError, match="client secret"):
        authorizer.credentials()


def test_authorizer_invalidate(client_secret, store):
    """Testa o descarte das credenciais"""
    store.save({"token": "salvo"})
    authorizer = SheetsAuthorizer(client_secret, store, Mock())

    authorizer.invalidate()

    assert not store.exists()


@pytest.fixture
def spreadsheet():
    """Fixture para mock da planilha do gspread"""
    spreadsheet = Mock()
    spreadsheet.values_get.return_value = {
        "range": "Velocity!A2:A4",
        "values": [["2024-01-01"], [], ["2024-01-29"]],
    }
    return spreadsheet


@pytest.fixture
def sheets_client(spreadsheet):
    """Fixture para o cliente com a planilha já aberta"""
    authorizer = Mock()
    with patch("src.sheets.client.gspread.authorize") as authorize:
        authorize.return_value.open_by_key.return_value = spreadsheet
        client = SheetsClient("planilha-1", authorizer)
        yield client


def test_read_range(sheets_client, spreadsheet):
    """Testa a leitura de um intervalo"""
    rows = sheets_client.read_range("Velocity!A2:A")

    assert rows == [["2024-01-01"], [], ["2024-01-29"]]
    spreadsheet.values_get.assert_called_once_with("Velocity!A2:A")


def test_read_empty_range(sheets_client, spreadsheet):
    """Testa a leitura de um intervalo sem valores"""
    spreadsheet.values_get.return_value = {"range": "Velocity!A2:A"}
    assert sheets_client.read_range("Velocity!A2:A") == []


def test_write_range_user_entered(sheets_client, spreadsheet):
    """Testa a gravação com valores interpretados como digitados"""
    sheets_client.write_range("Velocity!B3:C3", [[21, 8]])

    spreadsheet.values_update.assert_called_once_with(
        "Velocity!B3:C3",
        params={"valueInputOption": "USER_ENTERED"},
        body={"values": [[21, 8]]},
    )


def test_unauthorized_becomes_credential_error(sheets_client, spreadsheet):
    """Testa que um 401 vira erro de credencial"""
    spreadsheet.values_get.side_effect = api_error(401)

    with pytest.raises(CredentialInvalidError):
        sheets_client.read_range("Velocity!A2:A")


def test_other_api_errors_propagate(sheets_client, spreadsheet):
    """Testa que outros erros da API são propagados"""
    spreadsheet.values_update.side_effect = api_error(403)

    with pytest.raises(APIError):
        sheets_client.write_range("Velocity!B3:C3", [[1, 2]])


def test_reset_reopens_spreadsheet():
    """Testa que a planilha é reaberta depois de descartar a conexão"""
    authorizer = Mock()
    with patch("src.sheets.client.gspread.authorize") as authorize:
        authorize.return_value.open_by_key.return_value.values_get.return_value = {}
        client = SheetsClient("planilha-1", authorizer)
        client.read_range("A1")
        client.reset()
        client.read_range("A1")

    assert authorize.call_count == 2
    assert authorizer.credentials.call_count == 2


def test_revoked_grant_on_read_becomes_credential_error(sheets_client, spreadsheet):
    """Testa que uma renovação rejeitada durante a leitura vira erro de credencial"""
    spreadsheet.values_get.side_effect = RefreshError("invalid_grant: Token has been expired or revoked.")

    with pytest.raises(CredentialInvalidError, match="invalid_grant"):
        sheets_client.read_range("Velocity!A2:A")


def test_revoked_grant_on_write_becomes_credential_error(sheets_client, spreadsheet):
    """Testa que uma renovação rejeitada durante a gravação vira erro de credencial"""
    spreadsheet.values_update.side_effect = RefreshError("invalid_grant")

    with pytest.raises(CredentialInvalidError):
        sheets_client.write_range("Velocity!B3:C3", [[1, 2]])
