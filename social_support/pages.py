# ===================================================================
# 1. IMPORTS
# ===================================================================
import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any
from collections.abc import Callable

from nicegui import ui

# Local application imports
from .assistant import SuggestionRequest, SuggestionService, generate_prompt
from .config import load_settings
from .controller import WizardController, WizardState
from .exceptions import WizardStateError
from .gateway import HttpSubmissionGateway, MockSubmissionGateway, SubmissionGateway
from .persistence import SnapshotStore
from .record import section_values
from .schema import FormField, Section, TOTAL_STEPS
from .step_definitions import STEPS_BY_ID, StepDefinition
from .store import FormStateStore
from .validation import DATE_FORMAT_STORAGE

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

settings = load_settings()

# ===================================================================
# 2. SESSION WIRING
# ===================================================================

def build_gateway() -> SubmissionGateway:
    if settings.submission_api_url:
        return HttpSubmissionGateway(settings.submission_api_url, timeout=settings.submission_timeout)
    logger.info("SUBMISSION_API_URL not set; using the simulated submission gateway.")
    return MockSubmissionGateway(failure_rate=settings.mock_failure_rate, delay=settings.mock_submission_delay)

def build_controller() -> WizardController:
    """One store + controller per page visit; nothing is shared between sessions."""
    store = FormStateStore(SnapshotStore(settings.db_path))
    return WizardController(store, build_gateway())

# ===================================================================
# 3. WIDGET VALUE CONVERSION
# ===================================================================

def _to_model_value(f: FormField, value: Any) -> Any:
    """Turns a raw widget value into the section's field type. No validation here."""
    if f.ui_type == 'date':
        if not value:
            return None
        try:
            return datetime.strptime(str(value), DATE_FORMAT_STORAGE).date()
        except ValueError:
            return None
    if f.ui_type == 'integer':
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value
    if f.ui_type == 'amount':
        if value is None:
            return None
        try:
            return Decimal(str(value))
        except InvalidOperation:
            return value
    return value if value is not None else ''

def _to_widget_value(f: FormField, value: Any) -> Any:
    if f.ui_type == 'date':
        return value.strftime(DATE_FORMAT_STORAGE) if isinstance(value, date) else ''
    if f.ui_type == 'amount' and isinstance(value, Decimal):
        return float(value)
    return value

# ===================================================================
# 4. UI RENDERING ENGINE
# ===================================================================

def create_field(controller: WizardController, section: Section, f: FormField,
                 on_assist: Callable[[FormField], Any] | None = None) -> None:
    """Creates a UI element from a FormField and binds it to the store."""
    values = section_values(controller.store.data.get_section(section))
    current_value = _to_widget_value(f, values.get(f.key))
    error_message = controller.current_errors.get(f.key)

    def on_change(e: Any) -> None:
        controller.store.update_section(section, {f.key: _to_model_value(f, e.value)})

    if f.ui_type == 'select':
        element = ui.select(options=f.options or {}, label=f.label, value=current_value or None, on_change=on_change)
    elif f.ui_type == 'textarea':
        element = ui.textarea(label=f.label, value=current_value, on_change=on_change)
    elif f.ui_type in ('integer', 'amount'):
        element = ui.number(label=f.label, value=current_value, min=0,
                            format='%d' if f.ui_type == 'integer' else '%.2f', on_change=on_change)
    elif f.ui_type == 'date':
        element = ui.input(label=f.label, value=current_value, on_change=on_change).props('type=date stack-label')
    elif f.ui_type == 'text':
        element = ui.input(label=f.label, value=current_value, on_change=on_change)
    else:
        raise ValueError(f"Unsupported UI type: {f.ui_type}")

    props_list: list[str] = ['outlined', 'dense']
    if f.max_length:
        props_list.append(f"maxlength={f.max_length}")
    if error_message:
        props_list.append(f"error-message='{error_message}'")
        props_list.append('error')
    element.props(' '.join(props_list)).classes('w-full')

    if on_assist is not None:
        ui.button("Help me write", icon='smart_toy', on_click=lambda: on_assist(f)).props('flat dense color=primary')

def _navigate(move: Callable[[], None], refresh: Callable[[], None]) -> None:
    """Runs a navigation action; refused moves (e.g. mid-submission) become a notification."""
    try:
        move()
    except WizardStateError as e:
        ui.notify(str(e), type='warning')
        return
    refresh()

def render_step_indicator(controller: WizardController, refresh: Callable[[], None]) -> None:
    data = controller.store.data
    ui.label(f"Step {data.current_step} of {TOTAL_STEPS}").classes('text-subtitle1 self-center')
    ui.label(f"{data.progress_percentage}% complete").classes('text-caption text-grey self-center')

    def jump(step_id: int) -> None:
        _navigate(lambda: controller.go_to_step(step_id), refresh)

    with ui.row().classes('w-full justify-center q-gutter-md q-mb-md'):
        for step_id, step_def in STEPS_BY_ID.items():
            status = data.step_status(step_id)
            icon = {'completed': 'check_circle', 'active': 'radio_button_checked'}.get(status, 'radio_button_unchecked')
            color = {'completed': 'positive', 'active': 'primary'}.get(status, 'grey')
            ui.button(step_def['title'], icon=icon, on_click=lambda _, s=step_id: jump(s)).props(f'flat color={color}')

def open_assist_dialog(controller: WizardController, service: SuggestionService,
                       section: Section, f: FormField, refresh: Callable[[], None]) -> None:
    existing = section_values(controller.store.data.get_section(section)).get(f.key) or None
    request = SuggestionRequest(prompt=generate_prompt(f.key, existing))

    with ui.dialog() as dialog, ui.card().style('min-width: 600px'):
        ui.label(f"AI assistance: {f.label}").classes('text-h6')
        body = ui.column().classes('w-full')
        with body:
            ui.spinner(size='lg').classes('self-center')

    async def load_suggestion() -> None:
        response = await service.get_suggestion(request)
        body.clear()
        with body:
            if not response.success:
                ui.label(response.error or 'Failed to generate suggestion.').classes('text-negative')
                ui.button('Close', on_click=dialog.close).props('flat')
                return
            draft = ui.textarea(value=response.suggestion).classes('w-full').props('outlined autogrow')

            def accept() -> None:
                controller.store.update_section(section, {f.key: draft.value or ''})
                dialog.close()
                refresh()

            with ui.row().classes('w-full justify-end'):
                ui.button('Discard', on_click=dialog.close).props('flat color=grey')
                ui.button('Use this text', on_click=accept).props('color=primary unelevated')

    dialog.open()
    ui.timer(0.1, load_suggestion, once=True)

def render_generic_step(controller: WizardController, step_def: StepDefinition,
                        service: SuggestionService, refresh: Callable[[], None]) -> None:
    """Renders the fields of one step plus its navigation buttons."""
    section = step_def['section']
    ui.label(step_def['title']).classes('text-h6 q-mb-xs')
    ui.markdown(step_def['subtitle'])

    assist = None
    if section is Section.SITUATION_DESCRIPTIONS:
        assist = lambda f: open_assist_dialog(controller, service, section, f, refresh)
    for field_conf in step_def['fields']:
        create_field(controller, section, field_conf['field'], on_assist=assist)

    def go_back() -> None:
        _navigate(controller.prev_step, refresh)

    with ui.row().classes('w-full q-mt-lg justify-between items-center'):
        if step_def['id'] > 1:
            ui.button("← Previous", on_click=go_back).props('flat color=grey')
        else:
            ui.label()
        if step_def['id'] < TOTAL_STEPS:
            confirm_button = ui.button("Next →").props('color=primary unelevated')
            confirm_button.on('click', lambda: _handle_step_confirmation(controller, confirm_button, refresh))
        else:
            submit_button = ui.button("Submit application").props('color=primary unelevated icon=send')
            submit_button.on('click', lambda: _handle_submission(controller, submit_button, refresh))

async def _handle_step_confirmation(controller: WizardController, button: ui.button,
                                    refresh: Callable[[], None]) -> None:
    button.disable()
    try:
        report = controller.next_step()
        if report.valid:
            ui.notify("Information saved.", type='positive')
        else:
            for error_message in report.errors:
                ui.notification(error_message, type='negative', multi_line=True)
        refresh()
    finally:
        button.enable()

async def _handle_submission(controller: WizardController, button: ui.button,
                             refresh: Callable[[], None]) -> None:
    button.disable()
    try:
        outcome = await controller.submit()
    except WizardStateError as e:
        ui.notify(str(e), type='warning')
        return
    finally:
        button.enable()

    if not outcome.validation.valid:
        ui.notify("Validation Error: " + ', '.join(outcome.validation.errors), type='negative', multi_line=True)
    elif outcome.succeeded:
        ui.notify(outcome.response.message, type='positive')
    else:
        ui.notify(f"Submission Error: {controller.submission_error}", type='negative', multi_line=True)
    refresh()

def render_success(controller: WizardController, refresh: Callable[[], None]) -> None:
    def start_over() -> None:
        controller.restart()
        ui.notify("You can now start a new application.")
        refresh()

    with ui.column().classes('w-full items-center'):
        ui.icon('check_circle', size='xl', color='positive')
        ui.label('Application submitted').classes('text-h5 text-positive')
        if controller.application_id:
            ui.label(f"Reference: {controller.application_id}").classes('text-subtitle1')
        ui.label(controller.submission_message or '').classes('text-grey')
        ui.button('Submit another application', icon='home', on_click=start_over).props('outline')

# ===================================================================
# 5. PAGE ROUTING
# ===================================================================

@ui.page('/')
def main_page() -> None:
    controller = build_controller()
    service = SuggestionService(api_key=settings.openai_api_key, model=settings.openai_model,
                                timeout=settings.openai_timeout)

    @ui.refreshable
    def update_step_content() -> None:
        if controller.state is WizardState.SUCCEEDED:
            render_success(controller, update_step_content.refresh)
            return
        render_step_indicator(controller, update_step_content.refresh)
        step_def = STEPS_BY_ID[controller.store.data.current_step]
        render_generic_step(controller, step_def, service, update_step_content.refresh)

    def save() -> None:
        if controller.state is WizardState.SUCCEEDED:
            return
        if controller.save_progress():
            ui.notify("Progress saved.", type='positive')
        else:
            ui.notify("Progress could not be saved on this device; your answers are kept for now.", type='warning')

    ui.query('body').style('background-color: #f0f2f5;')
    with ui.header(elevated=True).classes('bg-primary text-white q-pa-sm items-center'):
        ui.label("Social Support Application").classes('text-h5')
        ui.space()
        ui.button('Save progress', icon='save', on_click=save, color='white').props('flat dense')

    with ui.column().classes('w-full items-center q-pa-md'):
        with ui.card().classes('q-pa-md shadow-4').style('width: 95%; max-width: 900px;'):
            update_step_content()

    if controller.resume():
        ui.notify("Your previous progress has been restored.")
        update_step_content.refresh()

if __name__ in {"__main__", "__mp_main__"}:
    ui.run(
        host='0.0.0.0',
        port=settings.port,
        storage_secret=settings.storage_secret,
        reload=False,
    )
