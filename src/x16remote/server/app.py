"""REST control plane for the input scheduler.

Accepts typing and joystick submissions over HTTP and hands them to an
InputController, while a background task ticks the scheduler at the
host frame rate. Request handlers and the frame task share one asyncio
event loop, so submissions and draining never run concurrently.

    GET  /health           -> {"status": "ok", ...}
    GET  /status           -> scheduler state and pending event count
    POST /keyboard         <- {"text": "10 PRINT`RVS_ON`HI`ENTER`", "typing_rate_ms": 35, "mode": "ascii"}
    POST /joystick         <- {"commands": "up fire _500 left", "joystick": 1}
    POST /keyboard/flush   -> drop all pending input
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, HTTPException
from pydantic import AliasChoices, BaseModel, Field

from x16remote.domain.models import SubmissionReceipt, TypingMode
from x16remote.injectors import KeyInjector, LoggingInjector
from x16remote.input.controller import (
    DEFAULT_TYPING_RATE_MS,
    MIN_TYPING_RATE_MS,
    InputController,
)
from x16remote.input.joystick import DEFAULT_HOLD_MS, NUM_JOYSTICKS

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------

class KeyboardRequest(BaseModel):
    text: str = Field(description="Text to type, with optional backtick macros")
    typing_rate_ms: int | None = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("typing_rate_ms", "typing_rate"),
        description="Milliseconds per key (raised to the configured minimum)",
    )
    mode: TypingMode | None = Field(default=None, description="'ascii', 'petscii' or 'raw'")


class JoystickRequest(BaseModel):
    commands: str = Field(description="Whitespace-delimited joystick commands")
    joystick: int = Field(default=1, ge=1, le=NUM_JOYSTICKS, description="Joystick number")
    typing_rate_ms: int | None = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("typing_rate_ms", "typing_rate"),
    )


class SubmissionResponse(BaseModel):
    status: str = "ok"
    characters: int = 0
    receipt: SubmissionReceipt


class StatusResponse(BaseModel):
    status: str = "ok"
    active: bool = False
    pending_queues: int = 0
    pending_events: int = 0
    completed_queues: int = 0


class HealthResponse(BaseModel):
    status: str = "ok"
    injector: str = "log"
    frame_rate_hz: float = 60.0


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------

def create_app(
    controller: InputController | None = None,
    injector: KeyInjector | None = None,
    frame_rate_hz: float = 60.0,
    min_typing_rate_ms: int = MIN_TYPING_RATE_MS,
    default_typing_rate_ms: int = DEFAULT_TYPING_RATE_MS,
    default_mode: TypingMode = TypingMode.NATIVE_ASCII,
    joystick_hold_ms: int = DEFAULT_HOLD_MS,
    run_frame_loop: bool = True,
) -> FastAPI:
    """Create the control plane application.

    Args:
        controller: Optional pre-configured InputController (for testing).
        injector: Injector used when no controller is given.
        frame_rate_hz: How often the scheduler is ticked.
        min_typing_rate_ms: Floor applied to requested typing rates.
        default_typing_rate_ms: Rate used when a request omits one.
        default_mode: Typing mode used when a request omits one.
        joystick_hold_ms: How long joystick buttons stay pressed.
        run_frame_loop: Whether to start the background tick task.
    """
    if controller is None:
        controller = InputController(
            injector=injector if injector is not None else LoggingInjector(),
            min_typing_rate_ms=min_typing_rate_ms,
            joystick_hold_ms=joystick_hold_ms,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        task = None
        if run_frame_loop:
            task = asyncio.create_task(_frame_loop(app.state.controller, 1.0 / frame_rate_hz))
            logger.info("Frame loop started at %.1f Hz", frame_rate_hz)
        yield
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        app.state.controller.scheduler.injector.close()
        logger.info("Control plane stopped")

    app = FastAPI(
        title="x16remote",
        description="Synthetic keyboard and joystick input for the emulator",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.controller = controller

    @app.get("/health")
    async def health_check() -> HealthResponse:
        c: InputController = app.state.controller
        return HealthResponse(
            status="ok",
            injector=c.scheduler.injector.name,
            frame_rate_hz=frame_rate_hz,
        )

    @app.get("/status")
    async def status() -> StatusResponse:
        c: InputController = app.state.controller
        return StatusResponse(
            active=c.is_active,
            pending_queues=c.scheduler.pending_queue_count,
            pending_events=c.pending_event_count(),
            completed_queues=c.scheduler.completed_queue_count,
        )

    @app.post("/keyboard")
    async def keyboard(request: KeyboardRequest) -> SubmissionResponse:
        c: InputController = app.state.controller
        rate = request.typing_rate_ms
        if rate is None:
            rate = default_typing_rate_ms
        mode = request.mode if request.mode is not None else default_mode
        receipt = c.submit(request.text, typing_rate_ms=rate, mode=mode)
        return SubmissionResponse(characters=len(request.text), receipt=receipt)

    @app.post("/joystick")
    async def joystick(request: JoystickRequest) -> SubmissionResponse:
        c: InputController = app.state.controller
        rate = request.typing_rate_ms
        if rate is None:
            rate = default_typing_rate_ms
        try:
            receipt = c.submit_joystick(
                request.commands,
                joystick=request.joystick,
                typing_rate_ms=rate,
            )
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        return SubmissionResponse(characters=len(request.commands), receipt=receipt)

    @app.post("/keyboard/flush")
    async def flush() -> dict[str, int | str]:
        c: InputController = app.state.controller
        dropped = c.flush()
        return {"status": "ok", "dropped_events": dropped}

    return app


async def _frame_loop(controller: InputController, interval: float) -> None:
    """Tick the scheduler once per frame."""
    while True:
        try:
            controller.tick()
            await asyncio.sleep(interval)
        except asyncio.CancelledError:
            break
        except Exception as e:
            logger.error("Frame loop error: %s", e)
            await asyncio.sleep(interval)

