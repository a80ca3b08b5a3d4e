"""Command line entry for graphbridge."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from neo4j.exceptions import DriverError, Neo4jError

from graphbridge.core.exceptions import GraphBridgeError
from graphbridge.core.observability import setup_logging, setup_tracing
from graphbridge.orchestration.codec import decode_exchange, encode_reply
from graphbridge.orchestration.consumer import ExchangeConsumer
from graphbridge.orchestration.endpoint import GraphEndpoint
from graphbridge.orchestration.publisher import ReplyPublisher

logger = logging.getLogger(__name__)


def send(endpoint: GraphEndpoint, raw_message: str) -> int:
    """Dispatch one JSON message and print the reply document."""

    exchange = decode_exchange(raw_message)
    producer = endpoint.create_producer()
    try:
        producer.process(exchange)
    except GraphBridgeError as exc:
        print(json.dumps(encode_reply(exchange, exc)))
        return 1
    except (DriverError, Neo4jError) as exc:
        logger.error("Exchange %s failed in the graph store: %s", exchange.exchange_id, exc)
        reply = encode_reply(exchange)
        reply["error"] = {"error_code": "GRAPH_STORE_ERROR", "message": str(exc)}
        print(json.dumps(reply))
        return 1
    print(json.dumps(encode_reply(exchange)))
    return 0


async def consume(endpoint: GraphEndpoint) -> int:
    publisher = ReplyPublisher()
    consumer = ExchangeConsumer(endpoint.create_producer(), publisher)
    if not await consumer.start():
        return 1
    try:
        await consumer.wait()
    finally:
        await consumer.stop()
        await publisher.close()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="graphbridge", description="Route messages onto Neo4j graph operations.")
    parser.add_argument("--endpoint", help="Endpoint URI, e.g. neo4j:bolt://localhost:7687")
    subcommands = parser.add_subparsers(dest="command", required=True)

    send_parser = subcommands.add_parser("send", help="Dispatch a single JSON message")
    send_parser.add_argument("message", nargs="?", help="Message JSON; read from stdin when omitted")

    subcommands.add_parser("consume", help="Bridge the Kafka request topic to the graph")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()
    setup_tracing()

    endpoint = GraphEndpoint(uri=args.endpoint)
    try:
        if args.command == "send":
            return send(endpoint, args.message if args.message is not None else sys.stdin.read())
        return asyncio.run(consume(endpoint))
    except GraphBridgeError as exc:
        logger.error("%s", exc)
        return 2
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130
    finally:
        endpoint.database.close()


if __name__ == "__main__":
    sys.exit(main())
