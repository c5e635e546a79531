from dataclasses import dataclass
import logging

logger = logging.getLogger("gglayers")

frozen_dataclass = dataclass(frozen=True)


def warning(msg: str) -> None:
    logger.warning(msg)
