#!/usr/bin/env python3
"""
Triad Arbitrage Scanner
=======================
Triangular arbitrage discovery over Uniswap V3 pools on Arbitrum

Commands:
- scan:    discover pools and store every A -> B -> C -> A route in Redis
- monitor: price the stored routes and report the profitable ones

Usage:
    python main.py scan
    python main.py monitor
"""
import argparse
import asyncio
import sys

from config.chains import ACTIVE_CHAIN
from config.settings import MULTICALL_BATCH_SIZE, REPORT_CSV_PATH, get_redis_url
from core.exceptions import ConfigurationError, EmptyRouteSetError
from core.network.multicall import Multicall
from core.triad_monitor import TriadMonitor
from core.triad_scanner import run_scan
from storage.route_store import RouteStore
from ui.terminal import render_report
from utils.csv_logger import OpportunityLogger
from utils.logger import setup_logging, get_logger
from utils.rpc_manager import rpc_manager
from validate_config import validate_settings

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_NO_ROUTES = 1
EXIT_CONFIG_ERROR = 2


async def scan(store: RouteStore, multicall: Multicall) -> int:
    result = await run_scan(multicall, store)
    logger.info(
        f"[green]Scan finished in {result.duration_s:.2f}s: "
        f"{result.queries} queries, {result.pool_index.pool_count} pools, "
        f"{result.stored} routes stored[/green]"
    )
    return EXIT_OK


async def monitor(store: RouteStore, multicall: Multicall) -> int:
    try:
        result = await TriadMonitor(multicall, store).run()
    except EmptyRouteSetError as e:
        logger.error(f"[red]❌ {e}[/red]")
        return EXIT_NO_ROUTES

    render_report(result)
    if REPORT_CSV_PATH:
        OpportunityLogger(REPORT_CSV_PATH).log(result.opportunities)
    return EXIT_OK


COMMANDS = {
    "scan": scan,
    "monitor": monitor,
}


async def main(command: str) -> int:
    """Main entry point"""
    try:
        validate_settings()
        store = RouteStore.from_url(get_redis_url())
    except ConfigurationError as e:
        logger.error(f"[red]Configuration error: {e}[/red]")
        return EXIT_CONFIG_ERROR

    try:
        web3 = await rpc_manager.get_web3()
        multicall = Multicall(web3, ACTIVE_CHAIN.multicall3, batch_size=MULTICALL_BATCH_SIZE)
        return await COMMANDS[command](store, multicall)
    except ConfigurationError as e:
        logger.error(f"[red]Configuration error: {e}[/red]")
        return EXIT_CONFIG_ERROR
    finally:
        await store.close()
        await rpc_manager.close()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Triangular arbitrage scanner for Uniswap V3 pools")
    parser.add_argument("command", choices=sorted(COMMANDS), help="pass to run")
    parser.add_argument("--log-level", default=None, help="override LOG_LEVEL")
    return parser.parse_args(argv)


def run():
    args = parse_args()
    setup_logging(args.log_level)
    try:
        sys.exit(asyncio.run(main(args.command)))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
