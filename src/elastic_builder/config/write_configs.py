from pathlib import Path

from pydantic import BaseModel
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from elastic_builder.config.general import GeneralConfig

yaml = YAML()

HEADER = "\n".join(
    [
        "Default configuration values.",
        "Managed by elastic-builder.",
        "Don't edit this file, it will be overwritten.",
        "Copy the values you need into config/config.yaml instead.",
    ]
)


def to_commented(model: BaseModel) -> CommentedMap:
    """Recursively populate a commented mapping from a settings model."""
    commented = CommentedMap()
    dumped = model.model_dump(mode="json")
    for field, info in type(model).model_fields.items():
        value = getattr(model, field)
        commented[field] = (
            to_commented(value) if isinstance(value, BaseModel) else dumped[field]
        )
        if info.description:
            commented.yaml_add_eol_comment(comment=info.description, key=field)  # pyright:ignore[reportUnknownMemberType] ruamel uses unknowns
    return commented


def write_default_config(path: Path = Path("config/config.default.yaml")) -> Path:
    """Write the settings defaults, with field descriptions as comments."""
    commented = to_commented(GeneralConfig.model_construct())
    commented.yaml_set_start_comment(HEADER)  # pyright:ignore[reportUnknownMemberType] ruamel uses unknowns
    path = path.resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    yaml.dump(commented, path)  # pyright:ignore[reportUnknownMemberType] ruamel uses unknowns
    return path
