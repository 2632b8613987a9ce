from .base import BaseSettings


class TemplateSettings(BaseSettings):
    # relative to the directory containing the assessor package
    llm_path: str = "assessor/templates/llm"
