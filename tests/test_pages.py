# tests/test_pages.py
from __future__ import annotations

import asyncio
import sys
from dataclasses import asdict
from pathlib import Path
from unittest.mock import MagicMock, patch

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from social_support.controller import WizardController, WizardState
from social_support.gateway import SubmissionResponse
from social_support.pages import _navigate
from social_support.record import FormData
from social_support.schema import Section
from social_support.store import FormStateStore

class BlockingGateway:
    def __init__(self) -> None:
        self.release = asyncio.Event()

    async def submit(self, form_data: FormData) -> SubmissionResponse:
        await self.release.wait()
        return SubmissionResponse(success=True, message="ok", application_id="APP-3")

def _fill_everything(store: FormStateStore, form_data: FormData) -> None:
    for section in Section:
        store.update_section(section, asdict(form_data.get_section(section)))

def test_navigation_during_submission_notifies_instead_of_raising(store: FormStateStore,
                                                                   valid_form_data: FormData) -> None:
    gateway = BlockingGateway()
    controller = WizardController(store, gateway)
    _fill_everything(store, valid_form_data)
    controller.go_to_step(3)
    refresh = MagicMock()

    async def scenario() -> None:
        pending = asyncio.create_task(controller.submit())
        await asyncio.sleep(0)
        assert controller.is_submitting

        with patch("social_support.pages.ui") as ui:
            _navigate(controller.prev_step, refresh)
            _navigate(lambda: controller.go_to_step(1), refresh)

        assert ui.notify.call_count == 2
        refresh.assert_not_called()
        assert controller.state is WizardState.SUBMITTING

        gateway.release.set()
        await pending

    asyncio.run(scenario())

def test_navigation_refreshes_after_a_move(store: FormStateStore) -> None:
    controller = WizardController(store, BlockingGateway())
    refresh = MagicMock()

    with patch("social_support.pages.ui") as ui:
        _navigate(lambda: controller.go_to_step(2), refresh)

    refresh.assert_called_once()
    ui.notify.assert_not_called()
    assert controller.state is WizardState.STEP_2
