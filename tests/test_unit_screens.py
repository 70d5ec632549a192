"""
Unit tests for gaia_manager/screens.py - screen handlers.

Handlers run against a fixed 16GB host and a two-entry catalog (SMALL and
MAX); prompts are patched and the node runtime is never invoked.
"""

import json
from unittest.mock import patch

import pytest

from gaia_manager import guide, screens
from gaia_manager.classifier import CapabilityTier
from gaia_manager.errors import CompatibilityBlocked, ModelNotFound, RemoteChatFailure
from gaia_manager.navigator import NavigationState, Screen, Transition


def state(screen, **answers):
    return NavigationState(screen, answers)


class TestMainMenu:

    def test_exit_entry(self, ctx):
        with patch("gaia_manager.ui.prompt_choice", return_value=len(screens.MENU_ENTRIES) - 1):
            assert screens.main_menu(ctx, state(Screen.MAIN_MENU)) == Transition.exit()

    def test_every_entry_advances(self, ctx):
        for idx, (_, target) in enumerate(screens.MENU_ENTRIES[:-1]):
            with patch("gaia_manager.ui.prompt_choice", return_value=idx):
                assert screens.main_menu(ctx, state(Screen.MAIN_MENU)) == Transition.advance(target)

    def test_every_screen_has_handler(self):
        for _, target in screens.MENU_ENTRIES[:-1]:
            assert target in screens.SCREENS


class TestListModels:

    def test_json(self, ctx, capsys):
        assert screens.list_models(ctx, state(Screen.LIST, format="json")) == Transition.menu()
        records = json.loads(capsys.readouterr().out)
        assert [r["id"] for r in records] == ["phi-3-mini-instruct-4k", "llama-3.1-405b-instruct"]
        assert [r["compatible"] for r in records] == [True, False]
        assert records[1]["min_ram_gb"] == 128

    def test_plain_with_tier_filter(self, ctx, capsys):
        screens.list_models(ctx, state(Screen.LIST, format="plain", tier=CapabilityTier.MAX))
        assert capsys.readouterr().out.split() == ["llama-3.1-405b-instruct"]

    def test_tier_by_name(self, ctx, capsys):
        screens.list_models(ctx, state(Screen.LIST, format="plain", tier="small"))
        assert capsys.readouterr().out.split() == ["phi-3-mini-instruct-4k"]

    def test_table(self, ctx, capsys):
        screens.list_models(ctx, state(Screen.LIST))
        assert "Available models (2)" in capsys.readouterr().out

    def test_no_match(self, ctx, capsys):
        screens.list_models(ctx, state(Screen.LIST, use_case="coding"))
        assert "No models match" in capsys.readouterr().out


class TestModelInfo:

    def test_incompatible_shows_shortfall(self, ctx, max_entry, capsys):
        screens.model_info(ctx, state(Screen.INFO, model=max_entry.id))
        out = capsys.readouterr().out
        assert max_entry.config_url in out
        assert "112GB short" in out

    def test_prompts_when_no_model(self, ctx, small_entry, capsys):
        with patch("gaia_manager.ui.prompt_choice", return_value=0):
            screens.model_info(ctx, state(Screen.INFO))
        assert "Compatible with this system" in capsys.readouterr().out

    def test_unknown_model(self, ctx):
        with pytest.raises(ModelNotFound):
            screens.model_info(ctx, state(Screen.INFO, model="nope"))


class TestRunModel:

    def test_compatible_deploys(self, ctx, small_entry):
        with patch("gaia_manager.runtime.deploy") as mock_deploy:
            result = screens.run_model(ctx, state(Screen.RUN, model=small_entry.id, skip_install=True))
        assert result == Transition.menu()
        mock_deploy.assert_called_once_with(small_entry, ctx.settings, skip_install=True)

    def test_blocked_without_force(self, ctx, max_entry):
        with patch("gaia_manager.runtime.deploy") as mock_deploy, \
             patch("gaia_manager.screens.request_override") as mock_override, \
             patch("gaia_manager.ui.prompt_yes_no") as mock_yes_no:
            with pytest.raises(CompatibilityBlocked) as excinfo:
                screens.run_model(ctx, state(Screen.RUN, model=max_entry.id, offer_override=False))
        assert excinfo.value.shortfall_gb == 112
        mock_override.assert_not_called()
        mock_yes_no.assert_not_called()
        mock_deploy.assert_not_called()

    def test_force_granted(self, ctx, max_entry):
        with patch("gaia_manager.runtime.deploy") as mock_deploy, \
             patch("gaia_manager.screens.request_override", return_value=True) as mock_override:
            screens.run_model(ctx, state(Screen.RUN, model=max_entry.id, force=True, offer_override=False))
        mock_override.assert_called_once_with(max_entry, ctx.profile, ctx.settings)
        mock_deploy.assert_called_once()

    def test_force_declined(self, ctx, max_entry):
        with patch("gaia_manager.runtime.deploy") as mock_deploy, \
             patch("gaia_manager.screens.request_override", return_value=False):
            with pytest.raises(CompatibilityBlocked):
                screens.run_model(ctx, state(Screen.RUN, model=max_entry.id, force=True))
        mock_deploy.assert_not_called()

    def test_menu_mode_offers_override(self, ctx, max_entry):
        with patch("gaia_manager.runtime.deploy") as mock_deploy, \
             patch("gaia_manager.ui.prompt_yes_no", return_value=False) as mock_yes_no, \
             patch("gaia_manager.screens.request_override") as mock_override:
            with pytest.raises(CompatibilityBlocked):
                screens.run_model(ctx, state(Screen.RUN, model=max_entry.id))
        assert mock_yes_no.call_args[1]["default"] is False
        mock_override.assert_not_called()
        mock_deploy.assert_not_called()


class TestGuidedSetup:

    def test_empty_category_then_retry(self, ctx, small_entry):
        tiers = CapabilityTier.ordered()
        choices = [tiers.index(CapabilityTier.STANDARD), tiers.index(CapabilityTier.SMALL), 0]
        with patch("gaia_manager.ui.prompt_choice", side_effect=choices), \
             patch("gaia_manager.ui.prompt_yes_no", return_value=True) as mock_yes_no, \
             patch("gaia_manager.runtime.deploy") as mock_deploy:
            assert screens.guided_setup(ctx, state(Screen.SETUP)) == Transition.menu()

        assert mock_yes_no.call_args[0][0] == "Would you like to select a different category?"
        mock_deploy.assert_called_once_with(small_entry, ctx.settings)

    def test_empty_category_give_up(self, ctx):
        tiers = CapabilityTier.ordered()
        with patch("gaia_manager.ui.prompt_choice", return_value=tiers.index(CapabilityTier.HEAVY)), \
             patch("gaia_manager.ui.prompt_yes_no", return_value=False), \
             patch("gaia_manager.runtime.deploy") as mock_deploy:
            assert screens.guided_setup(ctx, state(Screen.SETUP)) == Transition.menu()
        mock_deploy.assert_not_called()

    def test_oversized_model_warns_and_proceeds(self, ctx, max_entry, capsys):
        tiers = CapabilityTier.ordered()
        with patch("gaia_manager.ui.prompt_choice", side_effect=[tiers.index(CapabilityTier.MAX), 0]), \
             patch("gaia_manager.runtime.deploy") as mock_deploy:
            screens.guided_setup(ctx, state(Screen.SETUP))

        assert "Warning: You've selected a 'Max' model" in capsys.readouterr().out
        mock_deploy.assert_called_once_with(max_entry, ctx.settings)


class TestRecommend:

    def test_advances_to_setup(self, ctx, capsys):
        with patch("gaia_manager.ui.prompt_choice", return_value=1), \
             patch("gaia_manager.ui.prompt_yes_no", return_value=True):
            assert screens.recommend(ctx, state(Screen.RECOMMEND)) == Transition.advance(Screen.SETUP)
        out = capsys.readouterr().out
        assert "GENERAL CHAT" in out
        assert "phi-3-mini-instruct-4k" in out
        assert "llama-3.1-405b-instruct" not in out

    def test_declined_returns_to_menu(self, ctx):
        with patch("gaia_manager.ui.prompt_yes_no", return_value=False):
            assert screens.recommend(ctx, state(Screen.RECOMMEND, use_case="coding")) == Transition.menu()


class TestChat:

    def test_menu_directive(self, ctx, input_sequence):
        with patch("builtins.input", input_sequence(["hello", "/menu"])), \
             patch("gaia_manager.chat.ChatSession.send", return_value="hi there") as mock_send:
            assert screens.chat(ctx, state(Screen.CHAT)) == Transition.advance(Screen.MAIN_MENU)
        mock_send.assert_called_once_with("hello")

    def test_kb_directive(self, ctx, input_sequence):
        with patch("builtins.input", input_sequence(["/kb"])):
            assert screens.chat(ctx, state(Screen.CHAT)) == Transition.advance(Screen.KNOWLEDGE_BASE)

    def test_failure_is_reported_and_chat_continues(self, ctx, input_sequence, capsys):
        with patch("builtins.input", input_sequence(["hello", "again", "/exit"])), \
             patch("gaia_manager.chat.ChatSession.send",
                   side_effect=[RemoteChatFailure("endpoint down"), "ok"]) as mock_send:
            assert screens.chat(ctx, state(Screen.CHAT)) == Transition.exit()
        assert mock_send.call_count == 2
        assert "endpoint down" in capsys.readouterr().out

    def test_local_commands_not_sent(self, ctx, input_sequence):
        with patch("builtins.input", input_sequence(["/clear", "/help", "/bogus", "", "/quit"])), \
             patch("gaia_manager.chat.ChatSession.send") as mock_send:
            screens.chat(ctx, state(Screen.CHAT))
        mock_send.assert_not_called()

    def test_end_of_input_exits(self, ctx, input_sequence):
        with patch("builtins.input", input_sequence([])):
            assert screens.chat(ctx, state(Screen.CHAT)) == Transition.exit()


class TestKnowledgeBase:

    def test_topic_then_chat(self, ctx, capsys):
        topics = len(guide.KB_TOPICS)
        with patch("gaia_manager.ui.prompt_choice", side_effect=[0, topics]):
            assert screens.knowledge_base(ctx, state(Screen.KNOWLEDGE_BASE)) == Transition.advance(Screen.CHAT)
        assert guide.KB_TOPICS[0][0] in capsys.readouterr().out

    def test_back_to_menu(self, ctx):
        with patch("gaia_manager.ui.prompt_choice", return_value=len(guide.KB_TOPICS) + 1):
            assert screens.knowledge_base(ctx, state(Screen.KNOWLEDGE_BASE)) == Transition.advance(Screen.MAIN_MENU)


class TestHelpGuide:

    def test_shows_system_ram(self, ctx, capsys):
        assert screens.help_guide(ctx, state(Screen.HELP)) == Transition.menu()
        out = capsys.readouterr().out
        assert "16.0GB RAM" in out
        assert "QUICK SELECTION TIPS" in out
