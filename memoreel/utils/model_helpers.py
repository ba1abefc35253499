from pydantic import BaseModel


def refresh_model(target: BaseModel, source: BaseModel) -> BaseModel:
    """Copy every field of source onto target in place and return target."""
    for name in type(target).model_fields:
        setattr(target, name, getattr(source, name))
    return target
