import json

import pytest

from assistkit.todo import (
    TodoAddParams,
    TodoUpdateParams,
    add_todo,
    add_todo_tool_info,
    list_todo,
    list_todo_tool_info,
    update_todo,
    update_todo_tool_info,
)


def test_add_todo_result():
    assert add_todo(TodoAddParams(content="learn")) == '{"msg": "add todo success"}'


def test_add_todo_accepts_dict():
    assert json.loads(add_todo({"content": "learn", "deadline": 1717488000})) == {
        "msg": "add todo success"
    }


def test_add_todo_rejects_other_types():
    with pytest.raises(TypeError):
        add_todo("learn")


def test_update_todo_result():
    assert update_todo(TodoUpdateParams(id="1", done=True)) == '{"msg": "update todo success"}'


def test_list_todo_result():
    data = json.loads(list_todo('{"finished": false}'))
    todo = data["todos"][0]
    assert todo["id"] == "1"
    assert todo["started_at"] == 1717401600
    assert todo["deadline"] == 1717488000
    assert todo["done"] is False


def test_add_tool_info():
    info = add_todo_tool_info()
    schema = info.to_json_schema()
    assert info.name == "add_todo"
    assert schema["required"] == ["content"]
    assert schema["properties"]["deadline"]["type"] == "integer"


def test_update_tool_info():
    info = update_todo_tool_info()
    schema = info.to_json_schema()
    assert info.name == "update_todo"
    assert schema["required"] == ["id"]
    assert schema["properties"]["done"]["type"] == "boolean"


def test_list_tool_info():
    info = list_todo_tool_info()
    schema = info.to_json_schema()
    assert info.name == "list_todo"
    assert schema["required"] == []
    assert schema["properties"]["finished"]["description"] == "filter todo items if finished"