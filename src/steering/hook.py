#!/usr/bin/env python3
"""
Hook entry point for steering injection.

The steering-resolve command is called by a prompt-submit hook. It
resolves the user's prompt against the steering catalog and prints the
documents not yet loaded in this session, formatted for injection.
"""

import json
import sys
from pathlib import Path

from steering.catalog import build_registry, get_catalog_base
from steering.config import (
    configure_logging,
    get_catalog_path,
    get_session_store_dir,
    get_workspace_config,
    load_config,
)
from steering.content import FileContentLoader
from steering.injection import SteeringSession, format_injection
from steering.session import FileSessionStore
from steering.workspace import scan_workspace

DEFAULT_SESSION_ID = "default"


def read_hook_input(argv: list[str], stdin_data: str) -> dict:
    """
    Build the hook payload from command line args or stdin.

    The hook sends JSON:
        {"prompt": "user message", "session_id": "...", "cwd": "..."}

    Plain (non-JSON) stdin is treated as the prompt.
    """
    if argv:
        return {"prompt": " ".join(argv)}

    stdin_data = stdin_data.strip()
    if not stdin_data:
        return {}

    try:
        data = json.loads(stdin_data)
    except json.JSONDecodeError:
        return {"prompt": stdin_data}
    return data if isinstance(data, dict) else {"prompt": stdin_data}


def run_hook(payload: dict) -> str:
    """
    Resolve one hook payload and record the result in its session.

    Returns:
        Formatted injection text (empty when nothing new was selected)
    """
    project_dir = Path(payload.get("cwd") or Path.cwd())
    session_id = str(payload.get("session_id") or DEFAULT_SESSION_ID)

    config = load_config(project_dir=project_dir)
    configure_logging(config)

    catalog_path = get_catalog_path(config)
    registry = build_registry(catalog_path)
    loader = FileContentLoader(registry, get_catalog_base(catalog_path))

    store = FileSessionStore(get_session_store_dir(config, project_dir))
    session = SteeringSession(registry, loader, store.get(session_id))

    paths = scan_workspace(project_dir, **get_workspace_config(config))
    prompt = payload.get("prompt")
    # Hook payloads are untrusted JSON; a non-string prompt is read as text
    signal = prompt if isinstance(prompt, str) else ("" if prompt is None else str(prompt))
    documents = session.next_turn(signal, paths)

    if documents:
        store.save(session_id, session.loaded_set)
    return format_injection(documents)


def resolve_hook() -> None:
    """
    CLI entry point for hook-based steering.

    Usage:
        # Via prompt-submit hook (JSON on stdin)
        echo '{"prompt": "message", "session_id": "abc"}' | steering-resolve

        # Direct CLI usage (args)
        steering-resolve "user message here"

    Exit codes:
        0: Success (output, if any, printed to stdout)
        1: Error during resolution
    """
    stdin_data = "" if len(sys.argv) > 1 else sys.stdin.read()
    payload = read_hook_input(sys.argv[1:], stdin_data)

    try:
        output = run_hook(payload)
    except Exception as e:
        # Log error to stderr, don't pollute stdout
        print(f"Steering resolution error: {e}", file=sys.stderr)
        sys.exit(1)

    if output:
        print(output)


if __name__ == "__main__":
    resolve_hook()
