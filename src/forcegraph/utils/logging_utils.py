# src/forcegraph/utils/logging_utils.py
"""
提供與日誌記錄相關的通用工具和過濾器。
"""

# 1. 標準庫導入
import logging

# 2. 第三方庫導入
# (無)

# 3. 本專案導入
# (無)

TICK_MARKER = "[tick]"


class TickNoiseFilter(logging.Filter):
    """
    一個自訂的日誌過濾器，用於攔截模擬每一步產生的 '[tick]' 除錯訊息。
    """

    def __init__(self, allow_ticks: bool = False):
        super().__init__()
        self.allow_ticks = allow_ticks

    def filter(self, record: logging.LogRecord) -> bool:
        """
        如果允許 tick 訊息，或日誌訊息不包含 '[tick]'，則回傳 True。
        """
        return self.allow_ticks or TICK_MARKER not in record.getMessage()


def configure_root_logger(level: int = logging.DEBUG, allow_ticks: bool = False) -> logging.Logger:
    """為根日誌器掛上主控台輸出；已有 handler 時只更新過濾器設定。"""
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    if not root_logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
        console_handler.setFormatter(formatter)
        console_handler.addFilter(TickNoiseFilter(allow_ticks))
        root_logger.addHandler(console_handler)
    else:
        for handler in root_logger.handlers:
            for existing in handler.filters:
                if isinstance(existing, TickNoiseFilter):
                    existing.allow_ticks = allow_ticks
    return root_logger
