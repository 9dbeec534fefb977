"""Configuração de logging da API de flashcards.

Configura o root logger uma única vez, no startup da aplicação. Cada módulo
loga via ``logging.getLogger(__name__)``.
"""

import logging
import sys
from typing import Optional, Union

DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(
    log_level: Union[int, str] = logging.INFO,
    log_format: str = DEFAULT_LOG_FORMAT,
    log_file: Optional[str] = None,
) -> None:
    """Configura o root logger.

    Args:
        log_level: Nível mínimo, constante do logging ou o nome ("DEBUG").
        log_format: Formato das mensagens.
        log_file: Caminho opcional de um arquivo que recebe uma cópia da saída.
    """
    if isinstance(log_level, str):
        log_level = logging.getLevelName(log_level.upper())
        if not isinstance(log_level, int):
            log_level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # O reload do uvicorn chama isso de novo; evita handlers duplicados
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
            logging.info(f"Logging to file: {log_file}")
        except OSError as e:
            logging.error(f"Failed to set up file logging to {log_file}: {e}")

    logging.info(f"Logging configured. Level={logging.getLevelName(log_level)}")
