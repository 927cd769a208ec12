# assistkit

Building blocks for a chat assistant that answers from indexed documents and
can act through a handful of tools.

## What is inside

- `assistkit.messages` – chat `Message` objects with a `Role`, conversion to
  and from JSON (`Message.to_dict`, `message_from_dict`), the helpers
  `user_message` and `system_message`, and `concat_messages`, which joins
  streamed chunks into one reply.
- `assistkit.toolinfo` – `ToolInfo` and `ParameterInfo` describe a tool and
  its parameters; `ToolInfo.to_json_schema()` returns them as a JSON schema.
- `assistkit.memory` – `SimpleMemory` keeps each `Conversation` in a JSON Lines
  file in one directory. `Conversation.recent_messages()` returns a sliding
  window of the latest messages; `get_default_memory()` stores conversations
  under `data/memory` with a window of 6.
- `assistkit.task_storage` – `TaskStorage`, a file-backed task list
  (`tasks.jsonl`) with add, update, soft delete and filtered listing: open
  tasks first, newest first. `update` and `delete` raise `TaskNotFoundError`
  for unknown or deleted tasks.
- `assistkit.task_tool` – `TaskTool`, a tool front end to the task storage
  driven by `TaskRequest` objects or plain dicts (`request_from_dict`).
- `assistkit.einotool` – `EinoAssistantTool`, which returns repository,
  documentation and example-project links and copies project templates from
  a templates directory into a base directory.
- `assistkit.gitclone` – `GitCloneTool`, which clones or pulls a repository
  with `git` into `<base_dir>/<group>/<repo>`.
- `assistkit.opener` – `OpenFileTool`, which opens a file, directory or URL
  with the system's `open` command.
- `assistkit.redis_index` – `init_redis_index` creates the vector search index
  through any client offering `ping()` and `execute_command(...)`;
  `document_from_fields` and `document_to_hashes` convert between `Document`
  objects and Redis hash fields.
- `assistkit.todo` – small demonstration todo tools (`add_todo`,
  `update_todo`, `list_todo`) with their `ToolInfo` descriptions.
- `assistkit.prompt` – the assistant's system prompt, `UserMessage`, and
  `build_chat_messages`, which fills the prompt with the date, related
  documents, history and the user's query.
- `assistkit.server` – `create_app`, a Flask application with chat, history,
  log and task endpoints, and `tail_log`, which follows a file as it grows.

## Installation

```
pip install .
```

## Running the server

```
assistkit-server --port 8080 --log-file log/eino.log
```

Without `--port` the port comes from the `PORT` environment variable, or 8080.
Conversations are kept in `data/memory` and tasks in `data/task`. `/`
redirects to `/agent`. The endpoints are:

- `GET /agent/api/chat?id=...&message=...` – run the configured agent and
  stream its reply as server-sent events; the user's message and the joined
  reply are added to the conversation.
- `GET /agent/api/history` – list conversation ids, or with `?id=` return one
  conversation.
- `DELETE /agent/api/history?id=...` – delete a conversation.
- `GET /agent/api/log` – follow the log file as server-sent events.
- `POST /task/api` – run a task request, for example
  `{"action": "add", "task": {"title": "write report"}}`.
- `GET /agent/<name>` and `GET /task/<name>` – static files from the
  directories in `app.config["ASSISTKIT_AGENT_WEB_DIR"]` and
  `app.config["ASSISTKIT_TASK_WEB_DIR"]`; missing files answer 404.

## Using the pieces from Python

```python
from assistkit.memory import SimpleMemory
from assistkit.messages import user_message

memory = SimpleMemory("data/memory", 6)
conversation = memory.get_conversation("42", True)
conversation.append(user_message("hello"))
print([m.content for m in conversation.recent_messages()])
```

```python
from assistkit.task_storage import TaskStorage
from assistkit.task_tool import TaskTool, request_from_dict

tool = TaskTool(TaskStorage("data/task"))
response = tool.invoke(request_from_dict({"action": "add", "task": {"title": "plan"}}))
print(response.to_dict())
```

Plugging an agent into the server:

```python
from assistkit.memory import get_default_memory
from assistkit.messages import Message, Role
from assistkit.server import AGENT_CONFIG_KEY, create_app
from assistkit.task_storage import get_default_storage

def echo_agent(query):
    yield Message(role=Role.ASSISTANT, content="you said: " + query.query)

app = create_app(get_default_memory(), get_default_storage(), "log/eino.log")
app.config[AGENT_CONFIG_KEY] = echo_agent
```

## What the package does not do

- It contains no chat model, embedding model or agent loop. The chat endpoint
  answers 500 ("agent is not configured") until a callable taking a
  `UserMessage` and returning message chunks is set in
  `app.config[AGENT_CONFIG_KEY]`; `assistkit-server` does not set one.
- It has no document loading, splitting or indexing pipeline. `redis_index`
  only creates the index and converts documents; a Redis client (for example
  from the `redis` distribution, installed separately) must be supplied.
- It ships no web pages or project templates. Static file routes and
  `EinoAssistantTool`'s `init_template` action need directories that hold
  them, given through the app config and the `templates_dir` argument.

## Tests

```
pip install .[test]
pytest
```