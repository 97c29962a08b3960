from typing import Callable, Tuple, Type, TypeVar, Union
from loguru import logger

from ..exceptions import CredentialInvalidError

T = TypeVar("T")


def retry_once(
    operation: Callable[[], T],
    recover: Callable[[], None],
    retry_on: Union[Type[Exception], Tuple[Type[Exception], ...]] = CredentialInvalidError,
) -> T:
    """
    Executa uma operação, recuperando e repetindo uma única vez em caso de falha

    Args:
        operation: Operação a ser executada
        recover: Passo de recuperação executado antes da nova tentativa
        retry_on: Tipos de erro que disparam a recuperação

    Returns:
        Resultado da operação

    Raises:
        Qualquer erro da segunda tentativa, ou erros da primeira que não estejam em retry_on
    """
    try:
        return operation()
    except retry_on as e:
        logger.warning(f"{e}. Reautorizando e tentando novamente")
        recover()
    return operation()
