import argparse
import logging
import sys

from dotenv import find_dotenv, load_dotenv

from .client import MemkvClient
from .config import ClientConfig
from .errors import ConfigError
from .result import Failure, Result, Success


DEMO_BODY = '{ "name" : "MemoryKV Example Body", "content" : "json"}'


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="memkv", description="Command line client for a MemoryKV server.")

    parser.add_argument("--host", type=str, default=None, help="Server URL (default: $MEMKV_HOST or http://localhost:8080).")
    parser.add_argument("--timeout", type=float, default=None, help="Per-request timeout in seconds.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")

    commands = parser.add_subparsers(dest="command", required=True)

    get_cmd = commands.add_parser("get", help="Fetch the value of a key.")
    get_cmd.add_argument("key")

    put_cmd = commands.add_parser("put", help="Store a value under a key.")
    put_cmd.add_argument("key")
    put_cmd.add_argument("value")

    delete_cmd = commands.add_parser("delete", help="Delete a key.")
    delete_cmd.add_argument("key")

    list_cmd = commands.add_parser("list", help="List keys, optionally filtered by prefix.")
    list_cmd.add_argument("--prefix", type=str, default=None)

    prefix_cmd = commands.add_parser("delete-prefix", help="Delete every key with a prefix.")
    prefix_cmd.add_argument("prefix")

    commands.add_parser("delete-all", help="Delete every key.")
    commands.add_parser("ping", help="Check that the server is up.")
    commands.add_parser("demo", help="Run the example session against the server.")

    return parser.parse_args(argv)


def print_result(result: Result) -> bool:
    match result:
        case Success(body=body):
            print(f"Success! Result: {body}")
            return True
        case Failure(error=error):
            print(f"Error: {error}", file=sys.stderr)
            return False


def run_demo(client: MemkvClient) -> bool:
    key, key2, key3 = "py_sdk", "py_sdk2", "a_sdk"
    print(f"This example will create, and delete in 3 keys: {key}, {key2} and {key3}")

    steps = [
        (f"Put Key '{key}'", lambda: client.put_key(key, DEMO_BODY)),
        ("List Keys", client.list_keys),
        (f"Get Key '{key}'", lambda: client.get_key(key)),
        (f"Put Key '{key2}'", lambda: client.put_key(key2, DEMO_BODY)),
        (f"Put Key '{key3}'", lambda: client.put_key(key3, DEMO_BODY)),
        (f"Put Key '{key3}' (again)", lambda: client.put_key(key3, DEMO_BODY)),
        ("List Keys With Prefix 'p'", lambda: client.list_keys_with_prefix("p")),
        ("List Keys With Prefix 'a'", lambda: client.list_keys_with_prefix("a")),
        ("Delete Keys With Prefix 'p'", lambda: client.delete_keys_with_prefix("p")),
        ("Delete all Keys", client.delete_all_keys),
        (f"Delete Key '{key3}'", lambda: client.delete_key(key3)),
        ("List Keys", client.list_keys),
    ]

    ok = True
    for title, step in steps:
        print(f"\n{title}")
        ok = print_result(step()) and ok
    return ok


def run_command(client: MemkvClient, args: argparse.Namespace) -> bool:
    if args.command == "demo":
        return run_demo(client)

    if args.command == "get":
        result = client.get_key(args.key)
    elif args.command == "put":
        result = client.put_key(args.key, args.value)
    elif args.command == "delete":
        result = client.delete_key(args.key)
    elif args.command == "list":
        result = client.list_keys_with_prefix(args.prefix) if args.prefix else client.list_keys()
    elif args.command == "delete-prefix":
        result = client.delete_keys_with_prefix(args.prefix)
    elif args.command == "delete-all":
        result = client.delete_all_keys()
    else:
        result = client.ping()

    return print_result(result)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    load_dotenv(find_dotenv(usecwd=True))

    try:
        config = ClientConfig.from_env()
        if args.host is not None or args.timeout is not None:
            config = ClientConfig(
                host=args.host or config.host,
                timeout=args.timeout if args.timeout is not None else config.timeout,
                max_body_bytes=config.max_body_bytes,
            )
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    client = MemkvClient(config)
    return 0 if run_command(client, args) else 1


if __name__ == "__main__":
    sys.exit(main())
