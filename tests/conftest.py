"""Pytest configuration and fixtures for otguard tests."""

import copy

import pytest

from otguard.config.settings import GuardSettings
from otguard.features.collections import build_registry
from otguard.features.documents import DocumentSnapshot
from otguard.features.pipeline import (
    AgentContext,
    CreateData,
    OpData,
    OpRequest,
    PipelineOrchestrator,
    ReadSnapshotsRequest,
    SubmitRequest,
)


TEST_SCHEMA = {
    "type": "object",
    "properties": {
        "str_prop": {"type": "string", "minLength": 5},
        "num_prop": {"type": "number"},
        "arr_prop": {"type": "array", "items": {"type": "string"}},
        "someformat_prop": {"type": "string", "format": "someformat"},
        "obj_prop": {
            "type": "object",
            "properties": {"obj_key_prop": {"type": "string"}},
        },
    },
    "required": ["str_prop"],
}


def resolve_test_role(doc_id, doc, session, request):
    return request.agent.custom.get("test_role")


def admin_check(doc_id, *args):
    request = args[-1]
    if request.agent.custom.get("test_check_func"):
        return "Test error"
    return None


def someformat(value):
    if not isinstance(value, str):
        return True
    return value == "somevalue"


def build_options():
    """Options equivalent to the documented example configuration."""
    return {
        "collections": {
            "test": {
                "schema": copy.deepcopy(TEST_SCHEMA),
                "getRole": resolve_test_role,
                "roles": {
                    "admin": {
                        "create": {"fields": ["*"], "check": admin_check},
                        "read": {"fields": ["*"], "check": admin_check},
                        "update": {"fields": ["*"], "check": admin_check},
                        "delete": {"check": admin_check},
                    },
                    "user": {
                        "create": {"fields": ["str_prop", "num_prop"], "check": True},
                        "read": {"fields": ["str_prop", "num_prop"], "check": True},
                        "update": {"fields": ["str_prop", "num_prop"], "check": True},
                        "delete": {"check": True},
                    },
                },
            },
        },
        "options": {"godRole": "GOD_ROLE"},
        "zschema": {
            "options": {
                "noExtraKeywords": True,
                "assumeAdditional": True,
                "forceProperties": True,
                "forceItems": True,
            },
            "formats": {"someformat": someformat},
        },
    }


@pytest.fixture
def guard_options():
    return build_options()


@pytest.fixture
def registry(guard_options):
    return build_registry(guard_options)


@pytest.fixture
def settings():
    return GuardSettings(god_role="NeVeRrOlE, yeah?", collaborator_timeout_seconds=None)


@pytest.fixture
def orchestrator(registry, settings):
    return PipelineOrchestrator(registry, settings=settings)


@pytest.fixture
def test_item():
    return {
        "str_prop": "some string",
        "num_prop": 12345,
        "arr_prop": ["a", "b", "c"],
        "someformat_prop": "somevalue",
        "obj_prop": {"obj_key_prop": "another string"},
    }


@pytest.fixture
def make_agent():
    """Factory for client agents; checks are enforced unless ``is_server`` is set alone."""

    def _make(role=None, check_func=False, is_server=False, check_server_access=False, **kwargs):
        custom = {"test_role": role}
        if check_func:
            custom["test_check_func"] = True
        return AgentContext(
            client_id=kwargs.pop("client_id", "client-1"),
            is_server=is_server,
            check_server_access=check_server_access,
            connect_session=kwargs.pop("connect_session", {"user_id": "u1"}),
            subscribed_docs=kwargs.pop("subscribed_docs", {}),
            custom=custom,
        )

    return _make


@pytest.fixture
def create_request():
    def _make(agent, data, collection="test", doc_id="id"):
        return SubmitRequest(
            agent=agent,
            collection=collection,
            id=doc_id,
            op=OpData(src=agent.client_id, seq=1, v=0, create=CreateData(data=data, type="json0")),
            snapshot=DocumentSnapshot(id=doc_id, v=0),
        )

    return _make


@pytest.fixture
def delete_request():
    def _make(agent, stored, collection="test", doc_id="id"):
        return SubmitRequest(
            agent=agent,
            collection=collection,
            id=doc_id,
            op=OpData(src=agent.client_id, seq=2, v=1, delete=True),
            snapshot=DocumentSnapshot(id=doc_id, v=1, type="json0", data=stored),
        )

    return _make


@pytest.fixture
def edit_request():
    def _make(agent, stored, sub_ops, collection="test", doc_id="id"):
        return SubmitRequest(
            agent=agent,
            collection=collection,
            id=doc_id,
            op=OpData(src=agent.client_id, seq=3, v=1, op=sub_ops),
            snapshot=DocumentSnapshot(id=doc_id, v=1, type="json0", data=copy.deepcopy(stored)),
        )

    return _make


@pytest.fixture
def read_request():
    def _make(agent, documents, collection="test"):
        return ReadSnapshotsRequest(
            agent=agent,
            collection=collection,
            snapshots=[
                DocumentSnapshot(id=doc_id, v=1, type="json0", data=copy.deepcopy(data))
                for doc_id, data in documents.items()
            ],
        )

    return _make


@pytest.fixture
def op_request():
    def _make(agent, sub_ops, collection="test", doc_id="id", src="client-2"):
        return OpRequest(
            agent=agent,
            collection=collection,
            id=doc_id,
            op=OpData(src=src, seq=4, v=2, op=sub_ops),
        )

    return _make
