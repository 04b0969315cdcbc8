"""
Form-driven wizard runner for function-based views.

Each step may have a Django form class; a step without a form (typically the
final "review" step) can proceed as soon as every earlier step is valid.
Values entered on every step are kept in the session between requests
(apps.core.session) and re-bound at submission time. A form class that
defines `session_values()` (the employee password step) decides what is
stored instead of the raw POST values; only its valid output is kept.

Usage from a view:

    return run_form_wizard(
        request,
        name='vehicle_create',
        title='New vehicle',
        description='...',
        steps=VEHICLE_STEPS,
        form_classes={'basic': VehicleBasicForm, ...},
        on_done=_create_vehicle,            # callable(cleaned) -> HttpResponse
        cancel_url=reverse('dashboard:vehicle_list'),
        error_message="An error occurred while adding the vehicle.",
    )

POST bodies carry an `action` of next / previous / cancel / submit.
"""
import logging

from django.contrib import messages
from django.forms import MultipleChoiceField
from django.shortcuts import redirect, render
from django.utils.datastructures import MultiValueDict

from .session import clear_wizard_session, get_wizard_session, set_wizard_session
from .wizard import Wizard, WizardStateError

logger = logging.getLogger(__name__)

WIZARD_TEMPLATE = 'core/wizard.html'


def _raw_values(form_class, post, form_kwargs) -> dict:
    """Pick this step's fields out of a POST body as {name: [values]}."""
    field_names = form_class(**form_kwargs).fields.keys()
    values = {}
    for name in field_names:
        items = post.getlist(name)
        if items:
            values[name] = items
    return values


def _initial_from(form_class, stored: dict, form_kwargs) -> dict:
    fields = form_class(**form_kwargs).fields
    initial = {}
    for name, items in stored.items():
        if name not in fields:
            continue
        initial[name] = items if isinstance(fields[name], MultipleChoiceField) else items[-1]
    return initial


class FormWizardRunner:

    def __init__(self, request, name, title, description, steps, form_classes,
                 on_done, cancel_url, error_message, form_kwargs=None,
                 context_builder=None, template=WIZARD_TEMPLATE, handled_errors=()):
        self.request = request
        self.name = name
        self.form_classes = form_classes
        self.on_done = on_done
        self.cancel_url = cancel_url
        self.error_message = error_message
        self.form_kwargs = form_kwargs or {}
        self.context_builder = context_builder
        self.template = template
        self.handled_errors = tuple(handled_errors)

        state = get_wizard_session(request, name)
        self.stored = state['data']
        self.cancelled = False
        self.wizard = Wizard(
            title=title,
            description=description,
            steps=steps,
            on_submit=self._submit,
            on_cancel=self._cancel,
            can_proceed=self.can_proceed,
            current_index=state['index'],
        )
        self._cleaned = None
        self._posted_form = None

    # ── Step validity ─────────────────────────────────────────────────────────

    def kwargs_for(self, step_id) -> dict:
        return dict(self.form_kwargs.get(step_id, {}))

    def bound_form(self, step_id, data=None):
        form_class = self.form_classes.get(step_id)
        if form_class is None:
            return None
        if data is None:
            data = MultiValueDict(self.stored.get(step_id, {}))
        return form_class(data=data, **self.kwargs_for(step_id))

    def can_proceed(self, step_id) -> bool:
        if step_id in self.form_classes:
            return self.bound_form(step_id).is_valid()
        # Form-less step: everything before it must be complete
        index = self.wizard.index_of(step_id)
        return all(
            self.bound_form(step.id).is_valid()
            for step in self.wizard.steps[:index]
            if step.id in self.form_classes
        )

    def cleaned_data(self) -> dict:
        """Merged cleaned data of every valid step form."""
        if self._cleaned is None:
            merged = {}
            for step in self.wizard.steps:
                form = self.bound_form(step.id)
                if form is not None and form.is_valid():
                    merged.update(form.cleaned_data)
            self._cleaned = merged
        return self._cleaned

    # ── Callbacks ─────────────────────────────────────────────────────────────

    def _cancel(self):
        self.cancelled = True
        clear_wizard_session(self.request, self.name)

    def _submit(self):
        response = self.on_done(self.cleaned_data())
        clear_wizard_session(self.request, self.name)
        return response

    # ── Request handling ──────────────────────────────────────────────────────

    def _store_current(self):
        step_id = self.wizard.current_step.id
        form_class = self.form_classes.get(step_id)
        if form_class is None:
            return
        if hasattr(form_class, 'session_values'):
            # Secrets: store what the form chooses to keep, never the raw POST
            data = self.request.POST.copy()
            for key, items in self.stored.get(step_id, {}).items():
                data.setlist(key, items)
            form = self.bound_form(step_id, data=data)
            values = form.session_values() if form.is_valid() else {}
            self._posted_form = (step_id, form)
        else:
            values = _raw_values(form_class, self.request.POST, self.kwargs_for(step_id))
        self.stored[step_id] = values
        self._cleaned = None
        set_wizard_session(self.request, self.name, step_id=step_id, values=values)

    def _first_incomplete_index(self):
        for index, step in enumerate(self.wizard.steps):
            if step.id in self.form_classes and not self.bound_form(step.id).is_valid():
                return index
        return None

    def handle(self):
        if self.request.method != 'POST':
            return self.render()

        action = self.request.POST.get('action', 'next')

        if action == 'cancel':
            self.wizard.cancel()
            return redirect(self.cancel_url)

        self._store_current()

        if action == 'previous':
            self.wizard.go_previous()
            if self.cancelled:
                return redirect(self.cancel_url)
            set_wizard_session(self.request, self.name, index=self.wizard.current_index)
            return redirect(self.request.path)

        if action == 'submit' and self.wizard.is_last:
            incomplete = self._first_incomplete_index()
            if incomplete is not None:
                self.wizard.current_index = incomplete
                set_wizard_session(self.request, self.name, index=incomplete)
                messages.error(self.request, 'Some information is missing or invalid.')
                return self.render(bind=True)
            try:
                return self.wizard.submit()
            except WizardStateError as exc:
                messages.error(self.request, str(exc))
                return self.render(bind=True)
            except self.handled_errors as exc:
                # Domain errors carry a message meant for the user
                logger.info('Wizard "%s" submission refused: %s', self.name, exc)
                messages.error(self.request, str(exc))
                return self.render(bind=True)
            except Exception:
                logger.exception('Wizard "%s" submission failed', self.name)
                messages.error(self.request, self.error_message)
                return self.render(bind=True)

        if self.wizard.go_next():
            set_wizard_session(self.request, self.name, index=self.wizard.current_index)
            return redirect(self.request.path)
        return self.render(bind=True)

    def render(self, bind=False, status=200):
        step = self.wizard.current_step
        form_class = self.form_classes.get(step.id)
        form = None
        if form_class is not None:
            kwargs = self.kwargs_for(step.id)
            if bind and self._posted_form and self._posted_form[0] == step.id:
                form = self._posted_form[1]
            elif bind:
                form = self.bound_form(step.id)
            else:
                initial = _initial_from(form_class, self.stored.get(step.id, {}), kwargs)
                form = form_class(initial=initial, **kwargs)

        context = {
            'wizard': self.wizard,
            'form': form,
            'step_template': step.template,
            'cleaned': self.cleaned_data(),
            'can_proceed': self.wizard.current_can_proceed if form_class is None else True,
        }
        if self.context_builder is not None:
            context.update(self.context_builder(self.cleaned_data()))
        return render(self.request, self.template, context, status=status)


def run_form_wizard(request, **options):
    return FormWizardRunner(request, **options).handle()
