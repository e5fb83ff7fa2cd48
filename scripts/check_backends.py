#!/usr/bin/env python3
"""
Backend check tool for the 5FAN response core.

Shows which generation tier would answer right now, runs a one-line
self-test against each backend, or pushes a single message through the
full local -> cloud -> corpus chain.

Usage:
    python3 scripts/check_backends.py --status                   # local / cloud / active tier
    python3 scripts/check_backends.py --test                     # self-test both backends
    python3 scripts/check_backends.py --voice flow "rough week"  # one reply
    python3 scripts/check_backends.py --voice hear --json "hi"   # full reply record
    python3 scripts/check_backends.py --config my.yaml --status
"""

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from fivefan.config import load_config
from fivefan.errors import ConfigError
from fivefan.router import ResponseOrchestrator
from fivefan.voices import VOICE_NAMES


class C:
    BOLD = "\033[1m"
    DIM = "\033[2m"
    GREEN = "\033[32m"
    RED = "\033[31m"
    YELLOW = "\033[33m"
    RESET = "\033[0m"


def _flag(ok: bool) -> str:
    return f"{C.GREEN}up{C.RESET}" if ok else f"{C.RED}down{C.RESET}"


def show_status(router: ResponseOrchestrator):
    status = router.status()
    print(f"{C.BOLD}=== Backend status ==={C.RESET}")
    print(f"  provider mode : {router.provider}")
    print(f"  local         : {_flag(status['local'])}  ({router.local.settings.url}, {router.local.model})")
    cloud_note = router.cloud.provider_name() if router.cloud.configured else "not configured"
    print(f"  cloud         : {_flag(status['cloud'])}  ({cloud_note}, {router.cloud.model})")
    print(f"  active tier   : {C.YELLOW}{status['active']}{C.RESET}")


def run_self_tests(router: ResponseOrchestrator, as_json: bool):
    reports = [router.local.self_test(), router.cloud.self_test()]
    if as_json:
        print(json.dumps([asdict(r) for r in reports], indent=2))
        return
    print(f"{C.BOLD}=== Backend self-test ==={C.RESET}")
    for r in reports:
        print(f"  [{r.backend}] configured={r.configured} available={r.available}")
        if r.available:
            print(f"      model    : {r.model}")
            if r.models:
                print(f"      models   : {', '.join(r.models[:5])}{' ...' if len(r.models) > 5 else ''}")
            latency = f"{r.latency_ms:.0f}ms" if r.latency_ms is not None else "?"
            print(f"      response : {r.response!r} ({latency})")


def send_message(router: ResponseOrchestrator, voice: str, message: str, as_json: bool):
    reply = router.respond(voice, message)
    if as_json:
        print(json.dumps(reply.to_dict(), indent=2))
        return
    print(f"{C.DIM}[{reply.voice} via {reply.source}, {reply.response_type}]{C.RESET}")
    print(reply.message)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Check 5FAN generation backends")
    parser.add_argument("--config", help="Path to config.yaml")
    parser.add_argument("--status", action="store_true", help="Probe both backends")
    parser.add_argument("--test", action="store_true", help="Self-test both backends")
    parser.add_argument("--voice", choices=VOICE_NAMES, help="Voice for a single message")
    parser.add_argument("--json", action="store_true", help="JSON output")
    parser.add_argument("message", nargs="*", help="Message text (with --voice)")
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"{C.RED}{e}{C.RESET}", file=sys.stderr)
        return 2

    router = ResponseOrchestrator(config)

    if args.voice:
        send_message(router, args.voice, " ".join(args.message), args.json)
    elif args.test:
        run_self_tests(router, args.json)
    elif args.status:
        show_status(router)
    else:
        parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
