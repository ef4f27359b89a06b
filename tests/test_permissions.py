"""Tests for role resolution and permission evaluation."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from otguard.config.constants import Action, DenialReason
from otguard.core.exceptions import PermissionDeniedError, UpstreamError
from otguard.features.collections import AccessRule
from otguard.features.permissions import AccessDecision, PermissionEvaluator, RoleResolverAdapter
from otguard.utils.collaborators import CollaboratorInvoker


class TestPermissionEvaluator:
    """Role table evaluation order: no role, god, no handler, no fields."""

    @pytest.fixture
    def evaluator(self, registry):
        return PermissionEvaluator(registry.god_role, CollaboratorInvoker())

    @pytest.fixture
    def config(self, registry):
        return registry["test"]

    @pytest.mark.parametrize("role", [None, ""])
    def test_no_role(self, evaluator, config, role):
        decision = evaluator.evaluate(config, role, Action.READ)

        assert not decision.allowed
        assert decision.reason is DenialReason.NO_ROLE

    def test_god_role_bypasses_everything(self, evaluator, config):
        for action in Action:
            decision = evaluator.evaluate(config, "GOD_ROLE", action)

            assert decision.allowed
            assert decision.bypass
            assert decision.all_fields

    def test_unknown_role_has_no_handler(self, evaluator, config):
        decision = evaluator.evaluate(config, "guest", Action.CREATE)

        assert decision.reason is DenialReason.NO_HANDLER
        assert decision.role == "guest"

    def test_granted_decision_carries_rule(self, evaluator, config):
        decision = evaluator.evaluate(config, "user", Action.UPDATE)

        assert decision.allowed
        assert not decision.bypass
        assert not decision.all_fields
        assert decision.rule.fields == ("str_prop", "num_prop")

    def test_delete_does_not_require_fields(self, evaluator, config):
        assert evaluator.evaluate(config, "admin", Action.DELETE).allowed

    def test_denial_message(self):
        error = AccessDecision.denied(DenialReason.NO_HANDLER, "guest").to_error(Action.READ, "test", "id")

        assert str(error) == "403: Permission denied (read, no handler), collection: test, docId: id, role: guest"
        assert error.error_code == "permission_denied.no handler"

    @pytest.mark.asyncio
    async def test_run_check_skipped_for_god(self, evaluator, config):
        await evaluator.run_check(AccessDecision.god("GOD_ROLE"), Action.DELETE, config, "id", {}, {}, None)

    @pytest.mark.asyncio
    async def test_run_check_raises_for_denied_decision(self, evaluator, config):
        with pytest.raises(PermissionDeniedError, match="no role"):
            await evaluator.run_check(AccessDecision.denied(DenialReason.NO_ROLE), Action.READ, config, "id")

    @pytest.mark.asyncio
    async def test_run_check_awaits_async_predicate(self, config):
        predicate = AsyncMock(return_value="locked")
        evaluator = PermissionEvaluator("GOD_ROLE")
        decision = AccessDecision.granted("user", AccessRule.build(["*"], predicate))

        with pytest.raises(PermissionDeniedError) as exc_info:
            await evaluator.run_check(decision, Action.READ, config, "id", {"a": 1}, {}, None)

        predicate.assert_awaited_once_with("id", {"a": 1}, {}, None)
        assert exc_info.value.detail == "locked"
        assert exc_info.value.role == "user"

    @pytest.mark.asyncio
    async def test_run_check_propagates_predicate_errors(self, config):
        predicate = MagicMock(side_effect=KeyError("owner"))
        evaluator = PermissionEvaluator("GOD_ROLE")
        decision = AccessDecision.granted("user", AccessRule.build(["*"], predicate))

        with pytest.raises(KeyError):
            await evaluator.run_check(decision, Action.READ, config, "id", {}, {}, None)


class TestRoleResolverAdapter:
    """Resolver output normalization."""

    @pytest.fixture
    def adapter(self):
        return RoleResolverAdapter(CollaboratorInvoker())

    @pytest.mark.asyncio
    async def test_passes_arguments(self, adapter, registry):
        config = registry["test"]
        request = MagicMock()
        request.agent.custom = {"test_role": "user"}

        role = await adapter.resolve(config, Action.READ, "id", {"str_prop": "abcde"}, {"user_id": "u1"}, request)

        assert role == "user"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("resolved", [None, "", 0, False])
    async def test_falsy_role_is_none(self, adapter, registry, resolved):
        config = registry["test"]
        request = MagicMock()
        request.agent.custom = {"test_role": resolved}

        assert await adapter.resolve(config, Action.READ, "id", None, {}, request) is None

    @pytest.mark.asyncio
    async def test_non_string_role_rejected(self, adapter, registry):
        request = MagicMock()
        request.agent.custom = {"test_role": ["admin"]}

        with pytest.raises(UpstreamError) as exc_info:
            await adapter.resolve(registry["test"], Action.READ, "id", None, {}, request)

        assert exc_info.value.collaborator == "role resolver"
