import sys
import logging


JIVE_ALERT_LEVEL = logging.CRITICAL + 1
JIVE_ALERT_LEVEL_NAME = "JIVE_ALERT"


def jive_alert(self, message, *args, **kwargs):
    if self.isEnabledFor(JIVE_ALERT_LEVEL):
        self._log(JIVE_ALERT_LEVEL, message, args, **kwargs)


def setup_logger(level: int = logging.INFO):
    if getattr(logging.Logger, "jalert", None):
        return
    logging.addLevelName(JIVE_ALERT_LEVEL, JIVE_ALERT_LEVEL_NAME)
    logging.Logger.jalert = jive_alert

    class CustomHandler(logging.Handler):
        def emit(self, record):
            level = "[INFO]"
            if record.levelno == logging.DEBUG:
                level = "[DEBUG]"
            elif record.levelno == logging.WARNING:
                level = "[WARN] ⚠️ "
            elif record.levelno in [logging.ERROR, logging.CRITICAL]:
                level = "[ERROR] 🛑"
            elif record.levelno == JIVE_ALERT_LEVEL:
                level = "[JIVE] 🚀 "
            log_entry = self.format(record)
            log_entry = log_entry.replace("!!LEVEL!!", level, 1)
            sys.stderr.write(log_entry)
            sys.stderr.write("\n")
            sys.stderr.flush()

    handler = CustomHandler()
    handler.setFormatter(logging.Formatter('%(asctime)s.%(msecs)03d %(name)s !!LEVEL!! %(message)s', datefmt='%Y%m%d %H:%M:%S'))

    root = logging.getLogger()
    root.handlers = []
    root.addHandler(handler)
    root.setLevel(level)

    for noisy in ["httpx", "httpcore"]:
        noisy_logger = logging.getLogger(noisy)
        noisy_logger.handlers = []
        noisy_logger.propagate = False
        noisy_logger.setLevel(logging.WARNING)
