"""Command-line interface for x16remote.

Runs the control plane, submits input to a running control plane, or
previews how a piece of text will be replayed without any emulator.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="x16remote",
        description="Synthetic keyboard and joystick input for a retro-computer emulator",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/x16remote.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("serve", help="Start the HTTP control plane")

    type_parser = subparsers.add_parser("type", help="Send text to a running control plane")
    type_parser.add_argument("text", help="Text to type; backtick macros allowed")
    type_parser.add_argument("--rate", type=int, default=None, help="Typing rate in ms per key")
    type_parser.add_argument("--mode", choices=["ascii", "petscii", "raw"], default=None)

    joy_parser = subparsers.add_parser("joystick", help="Send joystick commands")
    joy_parser.add_argument("commands", help="e.g. 'up fire _500 left'")
    joy_parser.add_argument("-j", "--joystick", type=int, default=1, choices=[1, 2, 3, 4])

    subparsers.add_parser("status", help="Show scheduler status")
    subparsers.add_parser("flush", help="Drop all pending input")

    preview_parser = subparsers.add_parser(
        "preview", help="Translate text locally and print the replay timeline",
    )
    preview_parser.add_argument("text", help="Text to translate")
    preview_parser.add_argument("--rate", type=int, default=None, help="Typing rate in ms per key")
    preview_parser.add_argument("--mode", choices=["ascii", "petscii", "raw"], default=None)

    return parser.parse_args(argv)


def _serve(settings) -> None:
    import uvicorn

    from x16remote.injectors import create_injector
    from x16remote.server.app import create_app

    injector = create_injector(settings.injector.backend, hid_device=settings.injector.hid_device)
    app = create_app(
        injector=injector,
        frame_rate_hz=settings.server.frame_rate_hz,
        min_typing_rate_ms=settings.keyboard.min_rate_ms,
        default_typing_rate_ms=settings.keyboard.default_rate_ms,
        default_mode=settings.keyboard.default_mode,
        joystick_hold_ms=settings.keyboard.joystick_hold_ms,
    )
    uvicorn.run(app, host=settings.server.host, port=settings.server.port)


async def _remote(settings, args) -> dict:
    """Run one client command against the control plane."""
    from x16remote.client.http_client import RemoteKeyboard

    async with RemoteKeyboard(
        base_url=settings.client.base_url, timeout=settings.client.timeout,
    ) as kb:
        if args.command == "type":
            return await kb.send_text(
                args.text,
                typing_rate_ms=args.rate or settings.keyboard.default_rate_ms,
                mode=args.mode or settings.keyboard.default_mode.value,
            )
        if args.command == "joystick":
            return await kb.send_joystick(args.commands, joystick=args.joystick)
        if args.command == "flush":
            return await kb.flush()
        return await kb.status()


def _preview(settings, args) -> None:
    """Translate text and drain it against a recording injector on a simulated clock."""
    from x16remote.domain.models import JoystickEvent, KeyEvent, TypingMode
    from x16remote.injectors.recording import RecordingInjector
    from x16remote.input.keymap import code_to_key_name
    from x16remote.input.scheduler import InputScheduler, SimulatedClock
    from x16remote.input.translator import translate_text

    rate = args.rate or settings.keyboard.default_rate_ms
    mode = TypingMode(args.mode) if args.mode else settings.keyboard.default_mode

    queue = translate_text(args.text, typing_rate_ms=rate, mode=mode)
    print(f"{len(queue)} events (rate={rate}ms, mode={mode.value})")
    print("-" * 40)
    for index, event in enumerate(queue):
        if isinstance(event, KeyEvent):
            action = f"{code_to_key_name(event.code):<10} {'down' if event.is_down else 'up'}"
        elif isinstance(event, JoystickEvent):
            action = f"joy{event.joystick} btn{event.button} {'down' if event.is_down else 'up'}"
        else:
            action = f"wait {event.milliseconds}ms"
        print(f"[{index:3d}] +{event.delay_ms:5d}ms  {action}")

    clock = SimulatedClock()
    injector = RecordingInjector(clock=clock)
    scheduler = InputScheduler(injector=injector, clock=clock)
    scheduler.submit(queue)
    frame_ms = 1000.0 / settings.server.frame_rate_hz
    while scheduler.is_active:
        clock.advance(frame_ms)
        scheduler.tick()

    print("-" * 40)
    print(f"Injected {len(injector.events)} events over {clock.now:.0f}ms of simulated frames")


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the x16remote CLI."""
    args = parse_args(argv)

    if args.command is None:
        parse_args(["--help"])
        return

    from x16remote.config.settings import load_settings
    from x16remote.utils.logging import setup_logging

    settings = load_settings(args.config)

    if args.verbose:
        settings.logging.level = "DEBUG"

    setup_logging(settings.logging)

    if args.command == "serve":
        logger.info("Starting control plane on %s:%d", settings.server.host, settings.server.port)
        _serve(settings)

    elif args.command == "preview":
        _preview(settings, args)

    else:
        from x16remote.client.http_client import RemoteKeyboardError

        try:
            result = asyncio.run(_remote(settings, args))
        except RemoteKeyboardError as e:
            logger.error("%s", e)
            sys.exit(1)
        print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()
