"""
Run one discovery from the command line and print what was found.

Usage:
    python -m mqtt_discovery --host broker.local --duration 10
    python -m mqtt_discovery --object-id kitchen --node-id hub -v
"""

import argparse
import asyncio
import logging
import sys

from rich.console import Console
from rich.table import Table

from .backends import MQTTConnection
from .components import AbstractComponent
from .config import settings
from .discovery import DiscoveryController, DiscoveryResult
from .topic import WILDCARD

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Discover Home Assistant MQTT components")
    parser.add_argument("--host", default=settings.mqtt.host, help="MQTT broker host")
    parser.add_argument("--port", type=int, default=settings.mqtt.port, help="MQTT broker port")
    parser.add_argument("--username", default=settings.mqtt.username, help="MQTT username")
    parser.add_argument("--password", default=settings.mqtt.password, help="MQTT password")
    parser.add_argument("--base-topic", default=settings.discovery.base_topic, help="Discovery prefix")
    parser.add_argument("--object-id", default=WILDCARD, help="Device object id ('+' for all)")
    parser.add_argument("--node-id", default="", help="Device node id")
    parser.add_argument(
        "--duration",
        type=float,
        default=settings.discovery.duration,
        help="Discovery window in seconds",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def render_components(components: list[AbstractComponent]) -> Table:
    table = Table(title=f"Discovered components ({len(components)})")
    table.add_column("Type", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Topic", style="dim")
    table.add_column("Channels")

    for component in sorted(components, key=lambda c: (c.component_type.value, c.uid)):
        table.add_row(
            component.component_type.value,
            component.name,
            component.ha_id.to_short_topic(),
            ", ".join(component.channels),
        )
    return table


async def run(args: argparse.Namespace) -> DiscoveryResult:
    connection = MQTTConnection(
        broker_host=args.host,
        broker_port=args.port,
        username=args.username,
        password=args.password,
        client_id=settings.mqtt.client_id,
        keepalive=settings.mqtt.keepalive,
    )
    await connection.connect()
    try:
        controller = DiscoveryController(connection, base_topic=args.base_topic)
        with console.status(f"Listening on {args.base_topic} for {args.duration:.0f}s..."):
            result = await controller.discover(
                object_id=args.object_id,
                node_id=args.node_id,
                duration=args.duration,
            )
        console.print(render_components(controller.list_components()))
        return result
    finally:
        await connection.disconnect()


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.duration <= 0:
        console.print("[red]--duration must be positive[/red]")
        return 2

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, settings.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        result = asyncio.run(run(args))
    except KeyboardInterrupt:
        return 130
    except Exception as e:
        console.print(f"[red]Discovery failed:[/red] {e}")
        return 1

    if not result.ok:
        console.print(f"[red]Discovery {result.status.value}:[/red] {result.error}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
