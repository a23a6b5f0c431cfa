"""
Navicam CLI - Command-line interface for the scene analyzer.

Usage:
    navicam replay <frames_file>   Replay recorded perception results
    navicam serve                  Run the HTTP/WebSocket API
    navicam config                 Print the effective configuration

Recorded frames are JSON lines, one frame per line:
    {"labels": [{"text": "cup", "confidence": 0.9}], "blocks": ["hello"]}
A line may carry "label_error" or "text_error" to replay a failed branch.
"""

import argparse
import asyncio
import json
import logging
import sys

from .config import load_config
from .errors import ConfigError


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Navicam - Scene change detection for camera perception streams",
        prog="navicam",
    )
    parser.add_argument("--config", "-c", help="Path to JSON config file")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Replay command
    replay_parser = subparsers.add_parser("replay", help="Replay recorded perception results")
    replay_parser.add_argument("frames_file", help="Path to JSON lines file of frames")
    replay_parser.add_argument(
        "--consumer-missing",
        action="store_true",
        help="Simulate a consumer that is not installed",
    )

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP/WebSocket API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port")

    # Config command
    subparsers.add_parser("config", help="Print the effective configuration")

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.command == "replay":
        cmd_replay(args, config)
    elif args.command == "serve":
        cmd_serve(args, config)
    elif args.command == "config":
        cmd_config(args, config)
    else:
        parser.print_help()
        sys.exit(1)


def load_frames(path: str) -> list[dict]:
    """Read recorded frames, skipping blank lines."""
    frames = []
    with open(path, "r", encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                frames.append(json.loads(line))
            except json.JSONDecodeError as e:
                raise ValueError(f"Line {line_number}: invalid JSON ({e})") from e
    return frames


def build_scripts(frames: list[dict]) -> tuple[dict, dict]:
    """Turn recorded frames into labeler and recognizer scripts keyed by frame id."""
    from .analysis.results import Label

    label_script = {}
    text_script = {}
    for frame_id, record in enumerate(frames, start=1):
        if record.get("label_error"):
            label_script[frame_id] = RuntimeError(record["label_error"])
        else:
            label_script[frame_id] = [
                Label(text=item["text"], confidence=float(item.get("confidence", 1.0)))
                for item in record.get("labels", [])
            ]
        if record.get("text_error"):
            text_script[frame_id] = RuntimeError(record["text_error"])
        else:
            text_script[frame_id] = list(record.get("blocks", []))
    return label_script, text_script


def cmd_replay(args, config):
    """Replay recorded frames through the full dispatcher."""
    from .emission import CallbackNotifier
    from .session import SceneSession
    from .vision import Frame, ScriptedObjectLabeler, ScriptedTextRecognizer

    try:
        frames = load_frames(args.frames_file)
    except FileNotFoundError:
        print(f"Error: File not found: {args.frames_file}")
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    label_script, text_script = build_scripts(frames)

    def print_payload(payload):
        print(json.dumps(payload.to_dict()))

    notifier = CallbackNotifier(
        consumer_check=lambda: not args.consumer_missing,
        transport=print_payload,
        user_notice=lambda message: print(f"# {message}"),
        consumer_name=config.consumer_name,
    )
    session = SceneSession(
        notifier=notifier,
        labeler=ScriptedObjectLabeler(
            label_script,
            confidence_threshold=config.label_confidence_threshold,
        ),
        recognizer=ScriptedTextRecognizer(text_script),
        config=config,
    )

    async def run():
        emissions = 0
        for frame_id in range(1, len(frames) + 1):
            report = await session.analyze(Frame(frame_id=frame_id))
            emissions += len(report.outcomes)
        return emissions

    emissions = asyncio.run(run())
    session.stop()

    print(f"\nFrames replayed: {len(frames)}")
    print(f"Emissions: {emissions}")
    state = session.current_state()
    print(f"Stable objects: {', '.join(state.object_list) or '-'}")
    print(f"Stable text blocks: {len(state.text_blocks)}")


def cmd_serve(args, config):
    """Run the API with uvicorn."""
    import uvicorn

    from .api import APIService, create_app

    app = create_app(APIService(config=config))
    uvicorn.run(app, host=args.host, port=args.port)


def cmd_config(args, config):
    """Print the effective configuration."""
    print(config.model_dump_json(indent=2))


if __name__ == "__main__":
    main()
