"""CLI entrypoint for the land parcel polygon workspace."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import random
import sys
from pathlib import Path
from typing import Any

from polygon_workspace.common.config_loader import DEFAULT_CONFIG_PATH, WorkspaceConfig, load_config
from polygon_workspace.common.constants import COMMANDS, EXIT_HARD_FAIL, EXIT_NOT_FOUND, EXIT_SUCCESS, LOG_LEVELS
from polygon_workspace.common.errors import WorkspaceError
from polygon_workspace.common.fs import read_bytes, read_text_input, write_bytes
from polygon_workspace.common.logging import build_logger, close_logger, log_event, log_failure
from polygon_workspace.common.models import points_to_payload
from polygon_workspace.common.time_utils import epoch_millis
from polygon_workspace.pipeline.aggregate import mean
from polygon_workspace.pipeline.polygon_format import format_points_for_display
from polygon_workspace.pipeline.stats import summarize_generations
from polygon_workspace.pipeline.workspace import GenerationWorkspace
from polygon_workspace.store.generation_store import GenerationStore


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=COMMANDS)
    parser.add_argument("record_id", nargs="?", type=int, default=None)
    parser.add_argument("--input", default=None, help="Coordinate text file, or '-' for stdin.")
    parser.add_argument("--ref", default=None, help="External parcel reference.")
    parser.add_argument("--code", default=None, help="Override the generated identifier code.")
    parser.add_argument("--attachment", default=None)
    parser.add_argument("--out", default=None)
    parser.add_argument("--job-code", default=None)
    parser.add_argument("--since", type=int, default=None)
    parser.add_argument("--until", type=int, default=None)
    parser.add_argument("--config", default=str(DEFAULT_CONFIG_PATH))
    parser.add_argument("--overlay-config", default=None)
    parser.add_argument("--session-id", default=None)
    parser.add_argument("--log-level", default=None, choices=LOG_LEVELS)
    return parser.parse_args(argv)


def new_session_id() -> str:
    # Names the session log file; millis keep ids in start order.
    return f"ws-{epoch_millis()}-{random.getrandbits(16):04x}"


def _emit(payload: Any) -> None:
    sys.stdout.write(json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True))
    sys.stdout.write("\n")


def _require_record_id(args: argparse.Namespace) -> int:
    if args.record_id is None:
        raise WorkspaceError(f"Command {args.command} requires a record id")
    return args.record_id


def _load_workspace(args: argparse.Namespace, logger: logging.Logger) -> GenerationWorkspace:
    workspace = GenerationWorkspace(external_ref=args.ref or "")
    text = read_text_input(args.input)
    points = workspace.load_text(text)
    log_event(
        logger,
        "coordinates parsed",
        operation="parse",
        event="PARSE",
        status="ok" if points else "empty",
        points_out=len(points),
    )
    return workspace


async def _list_records(store: GenerationStore, args: argparse.Namespace):
    if args.ref:
        return await store.get_by_external_ref(args.ref)
    if args.job_code:
        return await store.get_by_job_code(args.job_code)
    if args.since is not None or args.until is not None:
        start = args.since if args.since is not None else 0
        end = args.until if args.until is not None else sys.maxsize
        return await store.get_between(start, end)
    return await store.get_all()


async def execute_command(args: argparse.Namespace, config: WorkspaceConfig, logger: logging.Logger) -> int:
    command = args.command

    if command == "parse":
        workspace = _load_workspace(args, logger)
        _emit(
            {
                "count": len(workspace.points),
                "points": points_to_payload(workspace.points),
                "display": format_points_for_display(workspace.points),
            }
        )
        return EXIT_SUCCESS

    if command == "mean":
        workspace = _load_workspace(args, logger)
        result = workspace.calculate_mean() or mean(workspace.points)
        _emit(
            {
                "count": len(workspace.points),
                "mean": result.to_dict(),
                "polygon": workspace.qr_payload(),
            }
        )
        return EXIT_SUCCESS

    store = GenerationStore(config.store_path, echo=config.store_echo, event_logger=logger)
    async with store:
        if command == "generate":
            workspace = _load_workspace(args, logger)
            workspace.calculate_mean()
            if args.code is not None:
                workspace.set_editable_code(args.code)
            workspace.generate()
            attachment = read_bytes(Path(args.attachment)) if args.attachment else None
            record_id = await store.save(workspace.build_record(attachment=attachment))
            _emit(
                {
                    "id": record_id,
                    "job_code": workspace.job_code,
                    "code": workspace.editable_code,
                    "mean": workspace.mean.to_dict() if workspace.mean is not None else None,
                    "polygon": workspace.qr_payload(),
                    "export_filename": workspace.export_filename(config.filename_prefix),
                }
            )
            return EXIT_SUCCESS

        if command == "list":
            records = await _list_records(store, args)
            _emit([record.to_dict() for record in records])
            return EXIT_SUCCESS

        if command == "show":
            record = await store.get_by_id(_require_record_id(args))
            if record is None:
                return EXIT_NOT_FOUND
            _emit(record.to_dict())
            return EXIT_SUCCESS

        if command == "delete":
            await store.delete(_require_record_id(args))
            return EXIT_SUCCESS

        if command == "clear":
            await store.clear()
            return EXIT_SUCCESS

        if command == "stats":
            _emit(summarize_generations(await store.get_all()))
            return EXIT_SUCCESS

        if command == "export-attachment":
            record = await store.get_by_id(_require_record_id(args))
            if record is None or record.attachment is None:
                return EXIT_NOT_FOUND
            if not args.out:
                raise WorkspaceError("export-attachment requires --out")
            write_bytes(Path(args.out), record.attachment)
            return EXIT_SUCCESS

    raise ValueError(f"Unknown command: {command}")


def run_command(args: argparse.Namespace) -> int:
    session_id = args.session_id or new_session_id()
    overlay_path = Path(args.overlay_config) if args.overlay_config else None
    config = load_config(Path(args.config), overlay_path=overlay_path)

    logger = build_logger(session_id, log_dir=config.log_dir, level=args.log_level or config.log_level)
    log_event(logger, "command start", session_id=session_id, operation=args.command, event="COMMAND_START", status="ok")
    try:
        exit_code = asyncio.run(execute_command(args, config, logger))
        status = "ok" if exit_code == EXIT_SUCCESS else "not_found"
        log_event(logger, "command end", session_id=session_id, operation=args.command, event="COMMAND_END", status=status)
        return exit_code
    except WorkspaceError as exc:
        log_failure(
            logger,
            f"command {args.command} failed: {exc}",
            session_id=session_id,
            operation=args.command,
            event="COMMAND_FAIL",
            status="error",
            error_code=exc.error_code,
        )
        return EXIT_HARD_FAIL
    except Exception:
        log_failure(
            logger,
            f"unexpected failure in command {args.command}",
            session_id=session_id,
            operation=args.command,
            event="COMMAND_FAIL",
            status="error",
            error_code="UNEXPECTED_ERROR",
        )
        return EXIT_HARD_FAIL
    finally:
        close_logger(logger)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        return run_command(args)
    except WorkspaceError:
        return EXIT_HARD_FAIL
    except Exception:
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
