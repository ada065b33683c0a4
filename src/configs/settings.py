"""Validated, immutable startup settings built from env defaults and CLI flags."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from ipaddress import IPv4Network, IPv6Network, ip_network
from typing import Optional, Sequence, Tuple, Union

from configs.env_config import Env
from utils.logger.config import LogLevel

Network = Union[IPv4Network, IPv6Network]


def _check_range(flag: str, value: int, low: int, high: int) -> None:
    if value < low or value > high:
        raise ValueError(f"invalid -{flag} value {value}: must be between {low} and {high}")


@dataclass(frozen=True)
class ThresholdConfig:
    """Percent thresholds at or above which a metric is reported as failing."""

    mem_threshold: int = 90
    disk_threshold: int = 80
    cpu_threshold: int = 90

    def __post_init__(self) -> None:
        _check_range("mem", self.mem_threshold, 1, 100)
        _check_range("disk", self.disk_threshold, 1, 100)
        _check_range("cpu", self.cpu_threshold, 1, 100)


@dataclass(frozen=True)
class SecurityConfig:
    """Access-control settings shared by every request.

    ``api_key`` of ``None`` disables key checks, an empty ``allowed_networks``
    disables the allowlist and ``rate_limit`` of 0 disables rate limiting.
    """

    api_key: Optional[str] = None
    allowed_networks: Tuple[Network, ...] = ()
    rate_limit: int = 60

    def __post_init__(self) -> None:
        if self.rate_limit < 0:
            raise ValueError(f"invalid -ratelimit value {self.rate_limit}: must be >= 0")
        if self.api_key == "":
            object.__setattr__(self, "api_key", None)


@dataclass(frozen=True)
class ServerConfig:
    bind: str = "0.0.0.0"
    port: int = 10321
    log_dir: str = "logs"
    log_level: LogLevel = LogLevel.INFO

    def __post_init__(self) -> None:
        _check_range("port", self.port, 1, 65535)


@dataclass(frozen=True)
class Settings:
    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)
    server: ServerConfig = field(default_factory=ServerConfig)


def parse_allowed_networks(raw: str) -> Tuple[Network, ...]:
    """Parse a comma-separated CIDR allowlist.

    Bare addresses become single-host networks (``/32`` or ``/128``). Host
    bits are masked, so ``10.0.0.5/24`` yields ``10.0.0.0/24``. Duplicates
    are dropped while keeping first-seen order.

    :param raw: Comma-separated CIDR blocks or addresses; may be empty.
    :return: Tuple of parsed networks.
    :raises ValueError: If any entry is not a valid address or CIDR block.
    """
    networks: list[Network] = []
    if not raw:
        return ()
    for item in raw.split(","):
        cidr = item.strip()
        if not cidr:
            continue
        if "/" not in cidr:
            cidr += "/128" if ":" in cidr else "/32"
        try:
            network = ip_network(cidr, strict=False)
        except ValueError as exc:
            raise ValueError(f"invalid -allow CIDR {cidr!r}: {exc}") from None
        if network not in networks:
            networks.append(network)
    return tuple(networks)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vitals-glimpse",
        description="Serve memory, disk and CPU utilisation with okay/fail status for uptime monitors.",
    )
    parser.add_argument("-mem", "--mem", type=int, default=None, help="memory usage threshold percent (default 90)")
    parser.add_argument("-disk", "--disk", type=int, default=None, help="disk usage threshold percent (default 80)")
    parser.add_argument("-cpu", "--cpu", type=int, default=None, help="cpu usage threshold percent (default 90)")
    parser.add_argument("-port", "--port", type=int, default=None, help="server port (default 10321)")
    parser.add_argument("-bind", "--bind", default=None, help="address to bind to (default 0.0.0.0)")
    parser.add_argument("-key", "--key", default=None, help="API key required via X-API-Key header")
    parser.add_argument(
        "-allow", "--allow", default=None,
        help='comma-separated CIDR allowlist (e.g. "10.0.0.0/24,192.168.1.0/24")',
    )
    parser.add_argument(
        "-ratelimit", "--ratelimit", type=int, default=None,
        help="max requests per IP per minute, 0 to disable (default 60)",
    )
    parser.add_argument("-log-dir", "--log-dir", dest="log_dir", default=None, help="directory for log files, empty to disable")
    parser.add_argument("-log-level", "--log-level", dest="log_level", default=None, help="minimum log level (default info)")
    return parser


def load_settings(argv: Optional[Sequence[str]] = None) -> Settings:
    """Build :class:`Settings` from command-line flags over environment defaults.

    :param argv: Argument list without the program name; ``None`` reads ``sys.argv``.
    :return: Fully validated settings.
    :raises ValueError: If any value is out of range or malformed.
    """
    args = build_parser().parse_args(argv)

    def pick_int(value: Optional[int], env_name: str) -> int:
        return value if value is not None else Env.int_value(env_name)

    def pick_str(value: Optional[str], env_name: str) -> str:
        return value if value is not None else getattr(Env, env_name)

    thresholds = ThresholdConfig(
        mem_threshold=pick_int(args.mem, "VITALS_MEM"),
        disk_threshold=pick_int(args.disk, "VITALS_DISK"),
        cpu_threshold=pick_int(args.cpu, "VITALS_CPU"),
    )
    server = ServerConfig(
        bind=pick_str(args.bind, "VITALS_BIND"),
        port=pick_int(args.port, "VITALS_PORT"),
        log_dir=pick_str(args.log_dir, "VITALS_LOG_DIR"),
        log_level=LogLevel.parse(pick_str(args.log_level, "VITALS_LOG_LEVEL")),
    )
    security = SecurityConfig(
        api_key=pick_str(args.key, "VITALS_KEY") or None,
        allowed_networks=parse_allowed_networks(pick_str(args.allow, "VITALS_ALLOW")),
        rate_limit=pick_int(args.ratelimit, "VITALS_RATELIMIT"),
    )
    return Settings(thresholds=thresholds, security=security, server=server)
