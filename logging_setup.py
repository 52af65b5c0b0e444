import logging
import os
from typing import Any, Dict, List


def setup_logging(cfg: Dict[str, Any]) -> logging.Logger:
    """
    コンソール出力 + （log_file 指定時のみ）ファイル出力
    """
    handlers: List[logging.Handler] = [logging.StreamHandler()]

    logfile = cfg.get("log_file")
    if logfile:
        logdir = os.path.dirname(logfile)
        if logdir:
            os.makedirs(logdir, exist_ok=True)
        handlers.append(logging.FileHandler(logfile, encoding="utf-8"))

    logging.basicConfig(
        level=str(cfg.get("log_level", "INFO")).upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=handlers,
    )
    return logging.getLogger("string_queue")
