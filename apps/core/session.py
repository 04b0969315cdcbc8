"""
Session helpers for multi-step wizards.

Wizard state stored in request.session['wizards']:
{
    "<wizard name>": {
        "index": 2,                      # current step index
        "data": {                        # POST values (or a form's session_values), per step
            "<step id>": {"field": ["value", ...], ...},
        },
    },
}

Raw values (lists of strings) are stored rather than cleaned data so the
session stays JSON-serialisable and each step form can be re-bound later.
Use the helpers below instead of accessing session['wizards'] directly.
"""
SESSION_KEY = 'wizards'


def _all_wizards(request) -> dict:
    return request.session.get(SESSION_KEY, {})


def get_wizard_session(request, name: str) -> dict:
    state = _all_wizards(request).get(name) or {}
    return {'index': state.get('index', 0), 'data': state.get('data', {})}


def set_wizard_session(request, name: str, index: int = None, step_id: str = None,
                       values: dict = None) -> None:
    wizards = _all_wizards(request)
    state = wizards.get(name) or {'index': 0, 'data': {}}
    if index is not None:
        state['index'] = index
    if step_id is not None:
        state.setdefault('data', {})[step_id] = values or {}
    wizards[name] = state
    request.session[SESSION_KEY] = wizards
    request.session.modified = True


def clear_wizard_session(request, name: str) -> None:
    wizards = _all_wizards(request)
    if wizards.pop(name, None) is not None:
        request.session[SESSION_KEY] = wizards
        request.session.modified = True
