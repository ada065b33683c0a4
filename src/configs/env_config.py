import os
from dotenv import load_dotenv

load_dotenv()

class Env:
    # Thresholds (percent)
    VITALS_MEM = os.getenv("VITALS_MEM", "90")
    VITALS_DISK = os.getenv("VITALS_DISK", "80")
    VITALS_CPU = os.getenv("VITALS_CPU", "90")

    # Listener
    VITALS_PORT = os.getenv("VITALS_PORT", "10321")
    VITALS_BIND = os.getenv("VITALS_BIND", "0.0.0.0")

    # Access control
    VITALS_KEY = os.getenv("VITALS_KEY", "")
    VITALS_ALLOW = os.getenv("VITALS_ALLOW", "")
    VITALS_RATELIMIT = os.getenv("VITALS_RATELIMIT", "60")

    # Logging
    VITALS_LOG_DIR = os.getenv("VITALS_LOG_DIR", "logs")
    VITALS_LOG_LEVEL = os.getenv("VITALS_LOG_LEVEL", "info")

    @classmethod
    def int_value(cls, name: str) -> int:
        raw = getattr(cls, name)
        try:
            return int(str(raw).strip())
        except ValueError:
            raise ValueError(f"invalid {name} value {raw!r}: must be an integer") from None
