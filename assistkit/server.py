"""The HTTP server of the assistant: chat, history, log and task endpoints."""

from __future__ import annotations

import argparse
import logging
import mimetypes
import os
import time
from contextlib import suppress
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator, Optional, Union

from flask import Flask, Response, g, jsonify, redirect, request

from .memory import SimpleMemory, get_default_memory
from .messages import Message, concat_messages, user_message
from .prompt import UserMessage
from .task_storage import TaskStorage, get_default_storage
from .task_tool import TaskTool, request_from_dict

logger = logging.getLogger(__name__)

AGENT_CONFIG_KEY = "ASSISTKIT_AGENT"
AGENT_WEB_DIR_KEY = "ASSISTKIT_AGENT_WEB_DIR"
TASK_WEB_DIR_KEY = "ASSISTKIT_TASK_WEB_DIR"

_WEB_ROOT = Path(__file__).resolve().parent / "web"

Agent = Callable[[UserMessage], Iterable[Message]]


def tail_log(path: Union[os.PathLike, str], poll_interval: float = 0.1) -> Iterator[str]:
    """Follow a file from its current end, yielding each piece of text appended to it."""
    handle = open(path, encoding="utf-8", errors="replace")
    handle.seek(0, os.SEEK_END)

    def follow() -> Iterator[str]:
        try:
            while True:
                line = handle.readline()
                if line:
                    yield line
                else:
                    time.sleep(poll_interval)
        finally:
            handle.close()

    return follow()


def _sse_event(data: str) -> str:
    return "".join(f"data: {line}\n" for line in data.split("\n")) + "\n"


def _serve_file(directory: Union[os.PathLike, str], name: str, content_type: str = "") -> Response:
    try:
        content = (Path(directory) / name).read_bytes()
    except OSError:
        return Response("File not found", status=404, mimetype="text/plain")
    ctype = content_type or mimetypes.guess_type(name)[0] or "application/octet-stream"
    return Response(content, content_type=ctype)


def create_app(
    memory: SimpleMemory, storage: TaskStorage, log_path: Union[os.PathLike, str]
) -> Flask:
    """Build the application.

    The chat endpoint runs the callable set in app.config[AGENT_CONFIG_KEY], which
    takes a UserMessage and returns the streamed chunks of the reply.
    """
    log_file = Path(log_path)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    log_file.touch(exist_ok=True)
    task_tool = TaskTool(storage)

    app = Flask(__name__)
    app.config[AGENT_CONFIG_KEY] = None
    app.config[AGENT_WEB_DIR_KEY] = _WEB_ROOT / "agent"
    app.config[TASK_WEB_DIR_KEY] = _WEB_ROOT / "task"

    @app.before_request
    def _start_timer() -> None:
        g.request_started = time.perf_counter()

    @app.after_request
    def _log_request(response: Response) -> Response:
        latency = time.perf_counter() - g.get("request_started", time.perf_counter())
        logger.info(
            "[HTTP] %s %s %d %.3fms",
            request.method, request.path, response.status_code, latency * 1000,
        )
        return response

    @app.get("/")
    def root() -> Any:
        return redirect("/agent", code=302)

    @app.get("/agent/api/chat")
    def handle_chat() -> Any:
        conversation_id = request.args.get("id", "")
        text = request.args.get("message", "")
        if not conversation_id or not text:
            return jsonify(status="error", error="missing id or message parameter"), 400

        logger.info("[Chat] Starting chat with ID: %s, Message: %s", conversation_id, text)
        agent: Optional[Agent] = app.config.get(AGENT_CONFIG_KEY)
        if agent is None:
            return jsonify(status="error", error="agent is not configured"), 500
        conversation = memory.get_conversation(conversation_id, True)
        if conversation is None:
            return jsonify(status="error", error="failed to open conversation"), 500

        query = UserMessage(
            id=conversation_id, query=text, history=conversation.recent_messages()
        )
        try:
            chunks = iter(agent(query))
        except Exception as exc:
            logger.error("[Chat] Error running agent: %s", exc)
            return jsonify(status="error", error=str(exc)), 500

        def stream() -> Iterator[str]:
            received: list[Message] = []
            try:
                for chunk in chunks:
                    received.append(chunk)
                    yield _sse_event(chunk.content)
            except Exception as exc:
                logger.error("[Chat] Error receiving message: %s", exc)
            finally:
                conversation.append(user_message(text))
                try:
                    conversation.append(concat_messages(received))
                except ValueError as exc:
                    logger.error("error concatenating messages: %s", exc)
                logger.info("[Chat] Finished chat with ID: %s", conversation_id)

        return Response(
            stream(), mimetype="text/event-stream", headers={"Cache-Control": "no-cache"}
        )

    @app.get("/agent/api/log")
    def handle_log() -> Any:
        try:
            lines = tail_log(log_file)
        except OSError as exc:
            return jsonify(status="error", error=str(exc)), 500
        return Response(
            (_sse_event(line) for line in lines),
            mimetype="text/event-stream",
            headers={"Cache-Control": "no-cache"},
        )

    @app.get("/agent/api/history")
    def handle_history() -> Any:
        conversation_id = request.args.get("id", "")
        if not conversation_id:
            return jsonify(ids=memory.list_conversations())
        conversation = memory.get_conversation(conversation_id, False)
        if conversation is None:
            return jsonify(error="conversation not found"), 404
        return jsonify(conversation=conversation.to_dict())

    @app.delete("/agent/api/history")
    def handle_delete_history() -> Any:
        conversation_id = request.args.get("id", "")
        if not conversation_id:
            return jsonify(error="missing id parameter"), 400
        with suppress(OSError):
            memory.delete_conversation(conversation_id)
        return jsonify(status="success")

    @app.get("/agent/")
    def agent_index() -> Response:
        return _serve_file(app.config[AGENT_WEB_DIR_KEY], "index.html", "text/html")

    @app.get("/agent/<name>")
    def agent_file(name: str) -> Response:
        return _serve_file(app.config[AGENT_WEB_DIR_KEY], name)

    @app.post("/task/api")
    def handle_task() -> Any:
        body = request.get_json(silent=True)
        try:
            if body is None:
                raise ValueError("invalid request body")
            task_request = request_from_dict(body)
        except ValueError as exc:
            return jsonify(status="error", error=str(exc)), 400
        try:
            response = task_tool.invoke(task_request)
        except (OSError, ValueError) as exc:
            return jsonify(status="error", error=str(exc)), 500
        return jsonify(response.to_dict())

    @app.get("/task/")
    def task_index() -> Response:
        return _serve_file(app.config[TASK_WEB_DIR_KEY], "index.html", "text/html")

    @app.get("/task/<name>")
    def task_file(name: str) -> Response:
        return _serve_file(app.config[TASK_WEB_DIR_KEY], name)

    return app


def main(argv: Optional[list[str]] = None) -> None:
    """Run the server on the port given, or in $PORT, or 8080."""
    parser = argparse.ArgumentParser(description="Run the assistant's HTTP server.")
    parser.add_argument("--port", default=os.environ.get("PORT") or "8080")
    parser.add_argument("--log-file", default="log/eino.log")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)
    app = create_app(get_default_memory(), get_default_storage(), args.log_file)
    app.run(host="0.0.0.0", port=int(args.port), threaded=True)