import sys
from datetime import date, datetime
from pathlib import Path
from typing import Optional
import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

# Configurando o ambiente
WORKSPACE_ROOT = Path(__file__).parent.parent
sys.path.append(str(WORKSPACE_ROOT))

# Importando módulos do projeto
from src.exceptions import VelocityError
from src.models.config import Settings
from src.models.entities import PointsResult
from src.services.updater import VelocityUpdater

app = typer.Typer(help="Velocity da Sprint - Trello para Google Sheets")
console = Console()


def configurar_logger(output_dir: Path = Path("logs")):
    """Configura o sistema de logs"""
    output_dir.mkdir(exist_ok=True)

    logger.remove()  # Remove handlers padrão
    logger.add(
        output_dir / "velocity_{time}.log",
        rotation="1 day",
        retention="7 days",
        level="INFO",
        encoding='utf-8'
    )
    logger.add(lambda msg: console.print(msg, style="blue", end=""), level="INFO")


def perguntar(mensagem: str) -> str:
    """Exibe a mensagem e aguarda a resposta do usuário"""
    return typer.prompt(mensagem)


def parse_data(valor: Optional[str]) -> Optional[date]:
    """Converte a data informada na linha de comando"""
    if valor is None:
        return None
    try:
        return datetime.strptime(valor, "%Y-%m-%d").date()
    except ValueError:
        raise typer.BadParameter(f"Data inválida: {valor}. Formato esperado: YYYY-MM-DD")


def carregar_atualizador(env_file: Optional[Path]) -> VelocityUpdater:
    settings = Settings.from_env(env_file=env_file)
    logger.info(f"Board {settings.trello_board_id}, planilha {settings.spreadsheet_id}")
    return VelocityUpdater.from_settings(settings, prompt=perguntar)


def exibir_pontos(points: PointsResult, row: Optional[int] = None, target_range: Optional[str] = None):
    """Exibe o resumo da execução"""
    table = Table(title="Velocity da Sprint")
    table.add_column("Concluídos", justify="right")
    table.add_column("Pendentes", justify="right")
    if row is not None:
        table.add_column("Linha", justify="right")
        table.add_column("Intervalo")
        table.add_row(str(points.done), str(points.carryover), str(row), target_range)
    else:
        table.add_row(str(points.done), str(points.carryover))
    console.print(table)


@app.command()
def atualizar(
    data: Optional[str] = typer.Option(
        None,
        "--data",
        help="Data de referência (YYYY-MM-DD); padrão: hoje"
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Calcula os pontos e a linha sem gravar na planilha"
    ),
    env_file: Optional[Path] = typer.Option(
        None,
        "--env-file",
        help="Arquivo .env com as configurações",
        dir_okay=False
    )
):
    """Calcula a velocity do board e grava na linha da sprint atual"""
    today = parse_data(data)
    configurar_logger()
    try:
        logger.info("Iniciando atualização da velocity")
        updater = carregar_atualizador(env_file)
        outcome = updater.run(today=today, dry_run=dry_run)
        exibir_pontos(outcome.points, outcome.row, outcome.target_range)
        logger.info("Processo concluído com sucesso!")
    except VelocityError as e:
        logger.error(f"Erro durante execução: {str(e)}")
        raise typer.Exit(1)
    except Exception as e:
        logger.exception(f"Erro inesperado durante execução: {str(e)}")
        raise typer.Exit(1)


@app.command()
def pontos(
    env_file: Optional[Path] = typer.Option(
        None,
        "--env-file",
        help="Arquivo .env com as configurações",
        dir_okay=False
    )
):
    """Apenas calcula os pontos do board, sem acessar a planilha"""
    configurar_logger()
    try:
        updater = carregar_atualizador(env_file)
        exibir_pontos(updater.compute_points())
    except VelocityError as e:
        logger.error(f"Erro durante execução: {str(e)}")
        raise typer.Exit(1)
    except Exception as e:
        logger.exception(f"Erro inesperado durante execução: {str(e)}")
        raise typer.Exit(1)


if __name__ == "__main__":
    # Configura e executa a aplicação
    app()
