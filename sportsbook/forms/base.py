from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict


class EntryForm(FlaskForm):
    """Base form for one JSON entry; the API has no CSRF tokens"""

    class Meta:
        csrf = False


def to_formdata(entry):
    """Turn one decoded JSON object into form data WTForms can parse"""
    formdata = MultiDict()
    for key, value in entry.items():
        if value is None:
            formdata.add(key, "")
        elif isinstance(value, bool):
            formdata.add(key, "true" if value else "false")
        elif isinstance(value, (list, tuple)):
            formdata.add(key, ",".join(str(item) for item in value))
        else:
            formdata.add(key, str(value))
    return formdata


def load_entries(form_class, entries, form_kwargs=None, **choices):
    """
    Validate a list of JSON entries with one form each.

    Args:
        form_class: EntryForm subclass
        entries: decoded JSON list
        form_kwargs: extra keyword arguments for every form
        **choices: field name -> list of allowed values for SelectFields

    Returns:
        tuple: (list of validated forms, dict of errors keyed by entry index)
    """
    if not isinstance(entries, list):
        return [], {"_": ["Expected a list of entries"]}

    forms = []
    errors = {}
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            errors[str(index)] = {"_": ["Expected an object"]}
            continue

        form = form_class(formdata=to_formdata(entry), **(form_kwargs or {}))
        for field_name, allowed in choices.items():
            getattr(form, field_name).choices = [(value, value) for value in allowed]

        if form.validate():
            forms.append(form)
        else:
            errors[str(index)] = form.errors

    return forms, errors
