"""Generator settings loaded from environment variables and .env file."""

import logging
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_REFERENCE_PREFIX = "#/components/schemas/"


class GeneratorSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="OASGEN_", env_file=".env", extra="ignore")

    reference_prefix: str = DEFAULT_REFERENCE_PREFIX
    output_format: Literal["json", "yaml"] = "yaml"
    output_path: str = "docs/schemas.yaml"
    indent: int = 2
    # How often one field may re-enter the same generic with growing arguments
    max_generic_nesting: int = 32


settings = GeneratorSettings()

if not settings.reference_prefix.endswith("/"):
    logger.warning(
        "Reference prefix %r does not end with '/'. Generated $ref values will be glued to schema names.",
        settings.reference_prefix,
    )
