import sys
from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "run={extra[run_id]} | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


class LoggerManager:
    def __init__(self):
        self.console_sink_id = None
        self.file_sink_id = None

        # Always remove the default handler
        logger.remove()
        # Records logged outside a pipeline run carry a placeholder run id
        logger.configure(extra={"run_id": "-"})

    def enable_console(self, level: str = "INFO"):
        if self.console_sink_id is None:
            self.console_sink_id = logger.add(sys.stdout, level=level, format=LOG_FORMAT, colorize=True)

    def disable_console(self):
        if self.console_sink_id is not None:
            logger.remove(self.console_sink_id)
            self.console_sink_id = None

    def enable_file(self, path: str, level: str = "INFO", rotation: str = "10 MB", retention_days: int = 7):
        if self.file_sink_id is None:
            self.file_sink_id = logger.add(
                path,
                level=level,
                format=LOG_FORMAT,
                rotation=rotation,
                retention=f"{retention_days} days",
                enqueue=True,
            )

    def disable_file(self):
        if self.file_sink_id is not None:
            logger.remove(self.file_sink_id)
            self.file_sink_id = None

    def configure(self, logging_config):
        """Apply a LoggingConfig: console always, file sink when enabled."""
        self.disable_console()
        self.enable_console(level=logging_config.level)
        if logging_config.enable_file_logging and logging_config.log_file:
            self.disable_file()
            self.enable_file(
                logging_config.log_file,
                level=logging_config.level,
                rotation=logging_config.max_file_size,
                retention_days=logging_config.retention_days,
            )


log_manager = LoggerManager()
