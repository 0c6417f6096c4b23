import pydantic

from errors import ValidationError


def validate(model, data):
    """Build ``model`` from a raw dict, raising our ValidationError on bad input."""
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ValidationError.from_pydantic(exc.errors()) from exc
