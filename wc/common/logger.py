import logging
from pathlib import Path
from logging.handlers import RotatingFileHandler
from wc.common.setup import PATHS
from datetime import datetime

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(filename)s:%(lineno)d] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# weekclock.log rolls over at 5 MB, keeping 5 old files
LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 5

# Adds the handler under the given name unless the logger already has one by that name (get_logger may run twice).
def _attach(logger, handler_name, handler, level, fmt):
    if any(h.get_name() == handler_name for h in logger.handlers):
        handler.close()
        return
    handler.setLevel(level)
    handler.setFormatter(fmt)
    handler.set_name(handler_name)
    logger.addHandler(handler)

# Removes all but the newest `keep` per-run debug logs.
def _prune_run_logs(debug_dir: Path, name, keep):
    runs = sorted(debug_dir.glob(f"{name}_*.log"),key=lambda p: p.stat().st_mtime,reverse=True)
    for run in runs[keep:]:
        try: run.unlink()
        except OSError: pass

def get_logger(
        name = "weekclock",
        level = logging.INFO,
        log_dir: Path | None = None,
        console = False,
        historical_debugs: int = 10
) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.propagate = False
    logger.setLevel(level)

    log_dir = log_dir or PATHS.logs
    log_dir.mkdir(parents=True,exist_ok=True)
    fmt = logging.Formatter(LOG_FORMAT,LOG_DATE_FORMAT)

    if not any(h.get_name() == f"{name}:persistent" for h in logger.handlers):
        _attach(logger, f"{name}:persistent", RotatingFileHandler(
            log_dir / f"{name}.log", maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8"),
            level, fmt)

    # latest.log only ever holds the current run
    if not any(h.get_name() == f"{name}:latest" for h in logger.handlers):
        _attach(logger, f"{name}:latest", logging.FileHandler(log_dir / "latest.log", mode="w", encoding="utf-8"),
                level, fmt)

    # Full debug output for each run, one file per run
    if historical_debugs > 0 and not any(h.get_name() == f"{name}:historical_debug" for h in logger.handlers):
        debug_dir = log_dir / "debug"
        debug_dir.mkdir(parents=True,exist_ok=True)
        run_log = debug_dir / f"{name}_{datetime.now():%Y-%m-%d_%H-%M-%S}.log"
        _attach(logger, f"{name}:historical_debug", logging.FileHandler(run_log, encoding="utf-8"),
                logging.DEBUG, fmt)
        _prune_run_logs(debug_dir, name, historical_debugs)

    if console:
        _attach(logger, f"{name}:console", logging.StreamHandler(), level, fmt)

    return logger

log = get_logger(level=logging.DEBUG,console=False,historical_debugs=10)
log.info("=== WEEKCLOCK STARTED ===")
