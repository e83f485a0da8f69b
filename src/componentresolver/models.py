from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ComponentRecord(BaseModel):
    """
        Class represents one parsed pattern.json file.
        `path`, `type` and `name` are derived from the file location only.
    """
    model_config = ConfigDict(frozen=True)
    meta_file: str
    directory: str
    path: str
    type: str
    name: str
    data: Any = Field(default_factory=dict)


class ExampleRecord(BaseModel):
    """
        Class represents one file of a component example folder,
        before it is handed to the example renderer.
    """
    name: str
    filepath: str
    content: str
    main: bool
    hidden: bool


class TemplateRecord(BaseModel):
    """
        Class represents a root-level component template.
    """
    filepath: str
    name: str
    content: str


class SubTemplateRecord(BaseModel):
    """
        Class represents a template of a component element,
        `name` is the element directory name.
    """
    filepath: str
    name: str
    content: str


class ReadmeRecord(BaseModel):
    """
        Class represents a readme.md file before it is handed to the readme renderer.
    """
    filepath: str
    content: str
