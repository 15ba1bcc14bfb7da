import logging
import sys


class LoggerSetup:
    def __init__(self, log_format: str, level: int = logging.INFO):
        self.log_format = log_format
        self.level = level
        self.setup_logging()

    def setup_logging(self) -> None:
        """Setup logging configuration on the root logger."""
        root_logger = logging.getLogger()
        root_logger.setLevel(self.level)
        if not root_logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(logging.Formatter(self.log_format))
            root_logger.addHandler(handler)
        # botocore logs every request at DEBUG
        logging.getLogger("botocore").setLevel(max(self.level, logging.INFO))

    def get_logger(self, name: str) -> logging.Logger:
        return logging.getLogger(name) if name else logging.getLogger()
